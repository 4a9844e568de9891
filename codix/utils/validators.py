"""Валидаторы входных данных."""
import re
from typing import Any, Dict, Iterable

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from codix.utils.enums import PrincipalType
from codix.utils.exceptions import ValidationError, WeakCredential

MIN_PASSWORD_LENGTH = {
    PrincipalType.CLIENT: 6,
    PrincipalType.ADMIN: 8,
}

_PHONE_RE = re.compile(r"^\+?[0-9]{7,15}$")
_email_adapter = TypeAdapter(EmailStr)


def is_strong_password(password: str, principal_type: PrincipalType) -> bool:
    """Длина по типу принципала, заглавная, строчная, цифра и спецсимвол."""
    if not password or len(password) < MIN_PASSWORD_LENGTH[principal_type]:
        return False
    return (
        any(c.isupper() for c in password)
        and any(c.islower() for c in password)
        and any(c.isdigit() for c in password)
        and any(not c.isalnum() and not c.isspace() for c in password)
    )


def ensure_strong_password(password: str, principal_type: PrincipalType) -> None:
    """
    Raises:
        WeakCredential: Пароль слишком простой
    """
    if not is_strong_password(password, principal_type):
        min_length = MIN_PASSWORD_LENGTH[principal_type]
        raise WeakCredential(
            f"Password must be at least {min_length} characters long and include uppercase, "
            "lowercase, number and special character"
        )


def is_valid_email(email: str) -> bool:
    try:
        _email_adapter.validate_python(email)
    except PydanticValidationError:
        return False
    return True


def is_valid_phone(phone: str) -> bool:
    """Телефон: 7-15 цифр, допускается ведущий «+», пробелы и дефисы игнорируются."""
    if not phone:
        return False
    return bool(_PHONE_RE.match(re.sub(r"[\s\-()]", "", phone)))


def require_fields(data: Dict[str, Any], fields: Iterable[str]) -> None:
    """
    Проверить, что обязательные поля заполнены.

    Raises:
        ValidationError: Есть пустые поля
    """
    missing = [f for f in fields if data.get(f) is None or (isinstance(data.get(f), str) and not data[f].strip())]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
