"""Хэширование паролей и JWT-токены."""
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from codix.core.config import Settings, get_settings
from codix.utils.enums import PrincipalType
from codix.utils.exceptions import ExpiredOrInvalidToken, RefreshTokenReused, ValidationError
from codix.utils.logger import get_logger

logger = get_logger(__name__)

BCRYPT_MAX_BYTES = 72


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"
    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"


@dataclass(frozen=True)
class TokenClaims:
    """Проверенные claims токена."""

    subject_id: int
    principal_type: PrincipalType
    kind: TokenKind
    role: Optional[str] = None
    email: Optional[str] = None


def _hash_rounds(principal_type: PrincipalType, settings: Settings) -> int:
    if principal_type == PrincipalType.ADMIN:
        return settings.admin_hash_rounds
    return settings.client_hash_rounds


def get_password_hash(password: str, principal_type: PrincipalType, settings: Optional[Settings] = None) -> str:
    """
    Хэшировать пароль bcrypt с cost по типу принципала.

    Raises:
        ValidationError: Пароль длиннее 72 байт
    """
    settings = settings or get_settings()
    raw = password.encode("utf-8")
    if len(raw) > BCRYPT_MAX_BYTES:
        raise ValidationError("Password must not exceed 72 bytes")
    salt = bcrypt.gensalt(rounds=_hash_rounds(principal_type, settings))
    return bcrypt.hashpw(raw, salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Сравнить пароль с хэшем. Некорректный хэш считается несовпадением."""
    raw = plain_password.encode("utf-8")
    if len(raw) > BCRYPT_MAX_BYTES or not password_hash:
        return False
    try:
        return bcrypt.checkpw(raw, password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("password_hash_malformed")
        return False


class TokenService:
    """Выпуск и проверка токенов всех видов."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _secret(self, kind: TokenKind) -> str:
        if kind == TokenKind.ACCESS:
            return self.settings.access_token_secret
        if kind == TokenKind.REFRESH:
            return self.settings.refresh_token_secret
        return self.settings.reset_token_secret

    def _lifetime(self, kind: TokenKind) -> timedelta:
        if kind == TokenKind.ACCESS:
            return timedelta(minutes=self.settings.access_token_expire_minutes)
        if kind == TokenKind.REFRESH:
            return timedelta(days=self.settings.refresh_token_expire_days)
        return timedelta(minutes=self.settings.reset_token_expire_minutes)

    def lifetime_seconds(self, kind: TokenKind) -> int:
        return int(self._lifetime(kind).total_seconds())

    def issue(self, principal: Any, kind: TokenKind) -> str:
        """
        Выпустить подписанный токен для клиента или администратора.

        Access-токен дополнительно несёт роль и email. ``jti`` делает
        каждый выпущенный токен уникальным.
        """
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": str(principal.id),
            "pt": principal.principal_type,
            "kind": kind.value,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + self._lifetime(kind),
        }
        if kind == TokenKind.ACCESS:
            payload["role"] = principal.role
            payload["email"] = principal.email
        return jwt.encode(payload, self._secret(kind), algorithm=self.settings.jwt_algorithm)

    def verify(self, token: Optional[str], kind: TokenKind) -> TokenClaims:
        """
        Проверить подпись, срок и вид токена.

        Raises:
            ExpiredOrInvalidToken: Токен отсутствует, подделан, истёк или другого вида
        """
        if not token:
            raise ExpiredOrInvalidToken("Unauthorized request")
        try:
            payload = jwt.decode(token, self._secret(kind), algorithms=[self.settings.jwt_algorithm])
        except ExpiredSignatureError:
            raise ExpiredOrInvalidToken("Token has expired")
        except JWTError:
            raise ExpiredOrInvalidToken()

        if payload.get("kind") != kind.value:
            raise ExpiredOrInvalidToken()
        try:
            return TokenClaims(
                subject_id=int(payload["sub"]),
                principal_type=PrincipalType(payload["pt"]),
                kind=kind,
                role=payload.get("role"),
                email=payload.get("email"),
            )
        except (KeyError, ValueError):
            raise ExpiredOrInvalidToken()

    def issue_pair(self, principal: Any) -> Dict[str, str]:
        """Выпустить пару access/refresh и сохранить refresh у принципала."""
        access_token = self.issue(principal, TokenKind.ACCESS)
        refresh_token = self.issue(principal, TokenKind.REFRESH)
        principal.refresh_token = refresh_token
        return {"accessToken": access_token, "refreshToken": refresh_token}


def check_refresh_token(presented: str, stored: Optional[str]) -> None:
    """
    Сверить предъявленный refresh-токен с сохранённым.

    Raises:
        ExpiredOrInvalidToken: Сохранённого токена нет (выход из системы)
        RefreshTokenReused: Предъявлен уже заменённый токен
    """
    if stored is None:
        raise ExpiredOrInvalidToken()
    if presented != stored:
        logger.warning("refresh_token_reused")
        raise RefreshTokenReused()


def get_token_service() -> TokenService:
    """Dependency: сервис токенов с текущими настройками."""
    return TokenService(get_settings())
