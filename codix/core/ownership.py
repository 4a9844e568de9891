"""Проверка владения ресурсом."""
from typing import Any, Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession

from codix.core.permissions import Permission, has_permission
from codix.utils.enums import AdminRole
from codix.utils.exceptions import Forbidden, NotFoundError


async def verify_ownership(
    session: AsyncSession,
    model: Type[Any],
    resource_id: int,
    requester_id: Optional[int],
    *,
    owner_field: str,
    admin: Any = None,
    bypass_permission: Optional[Permission] = None,
    label: str = "Resource",
) -> Any:
    """
    Загрузить ресурс и убедиться, что запрашивающий им владеет.

    Вызывается внутри той же сессии, что и последующая мутация.
    Отсутствие ресурса проверяется раньше владения.

    Args:
        session: Сессия транзакции
        model: Класс модели
        resource_id: ID ресурса
        requester_id: ID запрашивающего
        owner_field: Атрибут модели с ID владельца
        admin: Администратор (для суперадмина и обхода по праву)
        bypass_permission: Право, дающее доступ к чужим ресурсам
        label: Имя ресурса для сообщений об ошибках

    Returns:
        Загруженный ресурс

    Raises:
        NotFoundError: Ресурс не найден
        Forbidden: Ресурс принадлежит другому
    """
    resource = await session.get(model, resource_id)
    if resource is None:
        raise NotFoundError(f"{label} not found")

    if admin is not None:
        if admin.role == AdminRole.SUPERADMIN.value:
            return resource
        if bypass_permission is not None and has_permission(admin, bypass_permission):
            return resource

    if requester_id is None or getattr(resource, owner_field) != requester_id:
        raise Forbidden(f"You are not allowed to modify this {label.lower()}")
    return resource
