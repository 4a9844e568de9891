"""Тесты для проверки владения."""
from types import SimpleNamespace

import pytest

from codix.core.ownership import verify_ownership
from codix.core.permissions import Permission
from codix.models import Blog, Client
from codix.utils.exceptions import Forbidden, NotFoundError


async def _blog_owned_by_new_client(db_session):
    owner = Client(full_name="Owner", email="owner@example.com", phone="+15550001111", password_hash="x")
    db_session.add(owner)
    await db_session.flush()
    blog = Blog(title="Post", slug="post", content="text", category="news", author_id=owner.id)
    db_session.add(blog)
    await db_session.commit()
    return owner, blog


@pytest.mark.asyncio
@pytest.mark.unit
async def test_owner_gets_resource(db_session):
    owner, blog = await _blog_owned_by_new_client(db_session)
    found = await verify_ownership(db_session, Blog, blog.id, owner.id, owner_field="author_id", label="Blog")
    assert found.id == blog.id


@pytest.mark.asyncio
@pytest.mark.unit
async def test_other_requester_is_forbidden(db_session):
    owner, blog = await _blog_owned_by_new_client(db_session)
    with pytest.raises(Forbidden):
        await verify_ownership(db_session, Blog, blog.id, owner.id + 100, owner_field="author_id", label="Blog")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_missing_resource_is_not_found_before_forbidden(db_session):
    await _blog_owned_by_new_client(db_session)
    with pytest.raises(NotFoundError) as exc_info:
        await verify_ownership(db_session, Blog, 999, 12345, owner_field="author_id", label="Blog")
    assert exc_info.value.message == "Blog not found"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_superadmin_and_bypass_permission(db_session):
    _, blog = await _blog_owned_by_new_client(db_session)
    superadmin = SimpleNamespace(role="superadmin", permissions={})
    moderator = SimpleNamespace(role="moderator", permissions={"manageBlog": True})
    plain_admin = SimpleNamespace(role="admin", permissions={})

    assert await verify_ownership(db_session, Blog, blog.id, 0, owner_field="author_id", admin=superadmin)
    assert await verify_ownership(
        db_session, Blog, blog.id, 0, owner_field="author_id", admin=moderator, bypass_permission=Permission.MANAGE_BLOG
    )
    with pytest.raises(Forbidden):
        await verify_ownership(
            db_session, Blog, blog.id, 0, owner_field="author_id", admin=plain_admin,
            bypass_permission=Permission.MANAGE_BLOG,
        )
