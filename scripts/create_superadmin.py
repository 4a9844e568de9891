"""Скрипт для создания суперадмина."""
import asyncio
import sys
from pathlib import Path

# Добавляем путь к проекту
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from codix.core.database import AsyncSessionLocal, engine
from codix.core.permissions import default_permissions
from codix.core.security import get_password_hash
from codix.models.admin import Admin
from codix.utils.enums import AdminRole, PrincipalType
from codix.utils.validators import is_strong_password


async def create_superadmin(full_name: str, email: str, password: str) -> bool:
    """Создать суперадмина, если его ещё нет."""
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Admin).where(Admin.role == AdminRole.SUPERADMIN.value))
        if result.scalars().first() is not None:
            print("Суперадмин уже существует!")
            return False

        result = await session.execute(select(Admin).where(Admin.email == email))
        if result.scalar_one_or_none() is not None:
            print(f"Администратор с email '{email}' уже существует!")
            return False

        session.add(
            Admin(
                full_name=full_name,
                email=email,
                password_hash=get_password_hash(password, PrincipalType.ADMIN),
                role=AdminRole.SUPERADMIN.value,
                permissions=default_permissions(AdminRole.SUPERADMIN.value),
                is_active=True,
            )
        )
        await session.commit()

    await engine.dispose()
    print(f"Суперадмин '{email}' успешно создан!")
    return True


if __name__ == "__main__":
    if len(sys.argv) < 4:
        print("Использование: python scripts/create_superadmin.py <full_name> <email> <password>")
        sys.exit(1)

    full_name, email, password = sys.argv[1], sys.argv[2].lower(), sys.argv[3]

    if not is_strong_password(password, PrincipalType.ADMIN):
        print("Пароль должен содержать минимум 8 символов, заглавную и строчную буквы, цифру и спецсимвол!")
        sys.exit(1)

    created = asyncio.run(create_superadmin(full_name, email, password))
    sys.exit(0 if created else 1)
