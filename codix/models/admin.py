"""Модель администратора."""
from sqlalchemy import Column, String, Boolean, DateTime, JSON, Text

from codix.core.database import Base, BigIntegerPK, utcnow
from codix.utils.enums import AdminRole


class Admin(Base):
    """Администратор с матрицей прав."""

    __tablename__ = "admins"

    id = Column(BigIntegerPK, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), default=AdminRole.ADMIN.value, nullable=False, index=True)
    # Флаги прав: {"manageServices": true, ...}
    permissions = Column(JSON, default=dict, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    last_login = Column(DateTime, nullable=True)
    login_ip = Column(String(64), nullable=True)

    refresh_token = Column(Text, nullable=True)
    reset_token = Column(Text, nullable=True)
    reset_token_expires = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    principal_type = "admin"
