"""Тесты для матрицы прав."""
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from codix.core.permissions import Permission, PermissionSet, default_permissions, has_permission


def _admin(role, **flags):
    return SimpleNamespace(role=role, permissions=flags)


@pytest.mark.unit
def test_superadmin_has_every_permission():
    superadmin = _admin("superadmin")
    assert all(has_permission(superadmin, p) for p in Permission)


@pytest.mark.unit
def test_permission_follows_stored_flag():
    admin = _admin("admin", manageServices=True, manageBlog=False)
    assert has_permission(admin, Permission.MANAGE_SERVICES)
    assert has_permission(admin, "manageServices")
    assert not has_permission(admin, Permission.MANAGE_BLOG)
    # Отсутствующий флаг означает False
    assert not has_permission(admin, Permission.MANAGE_PRICING)


@pytest.mark.unit
def test_unknown_permission_raises():
    with pytest.raises(ValueError):
        has_permission(_admin("admin"), "launchRockets")


@pytest.mark.unit
def test_role_defaults():
    moderator = default_permissions("moderator")
    assert moderator["manageBlog"] and moderator["manageContacts"]
    assert not moderator["manageServices"]

    admin = default_permissions("admin")
    assert admin["manageServices"] and admin["managePricing"] and admin["viewActivityLogs"]
    assert not admin["manageAdmins"]

    assert not any(default_permissions("client").values())


@pytest.mark.unit
def test_default_permissions_returns_copy():
    flags = default_permissions("moderator")
    flags["manageServices"] = True
    assert not default_permissions("moderator")["manageServices"]


@pytest.mark.unit
def test_permission_set_rejects_unknown_names():
    with pytest.raises(ValidationError):
        PermissionSet(launchRockets=True)
    assert set(PermissionSet().model_dump()) == {p.value for p in Permission}
