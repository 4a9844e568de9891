"""Тесты для валидаторов."""
import pytest

from codix.utils.enums import PrincipalType
from codix.utils.exceptions import ValidationError, WeakCredential
from codix.utils.validators import (
    ensure_strong_password,
    is_strong_password,
    is_valid_email,
    is_valid_phone,
    require_fields,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "password, principal_type, expected",
    [
        ("Ab1!xy", PrincipalType.CLIENT, True),
        ("Ab1!x", PrincipalType.CLIENT, False),
        ("Ab1!xy", PrincipalType.ADMIN, False),
        ("Abcd123!", PrincipalType.ADMIN, True),
        ("abcd123!", PrincipalType.ADMIN, False),
        ("ABCD123!", PrincipalType.ADMIN, False),
        ("Abcdefg!", PrincipalType.ADMIN, False),
        ("Abcd1234", PrincipalType.ADMIN, False),
        ("", PrincipalType.CLIENT, False),
    ],
)
def test_password_strength(password, principal_type, expected):
    assert is_strong_password(password, principal_type) is expected


@pytest.mark.unit
def test_weak_password_is_validation_error():
    with pytest.raises(WeakCredential) as exc_info:
        ensure_strong_password("weak", PrincipalType.ADMIN)
    assert isinstance(exc_info.value, ValidationError)
    assert exc_info.value.status_code == 400
    assert "8 characters" in exc_info.value.message


@pytest.mark.unit
def test_email_validation():
    assert is_valid_email("user@example.com")
    assert not is_valid_email("user@")
    assert not is_valid_email("not-an-email")


@pytest.mark.unit
def test_phone_validation():
    assert is_valid_phone("+15551234567")
    assert is_valid_phone("555-123-4567")
    assert not is_valid_phone("12")
    assert not is_valid_phone("phone")
    assert not is_valid_phone("")


@pytest.mark.unit
def test_require_fields_lists_missing():
    with pytest.raises(ValidationError) as exc_info:
        require_fields({"a": "x", "b": "  ", "c": None}, ("a", "b", "c"))
    assert exc_info.value.message == "Missing required fields: b, c"

    require_fields({"a": "x"}, ("a",))
