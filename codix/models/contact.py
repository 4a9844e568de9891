"""Модель обращения через форму обратной связи."""
from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship

from codix.core.database import Base, BigIntegerPK, utcnow
from codix.utils.enums import ContactStatus


class Contact(Base):
    """Обращение. Клиент может быть не указан (анонимная отправка)."""

    __tablename__ = "contacts"

    id = Column(BigIntegerPK, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(32), default="", nullable=False)
    country = Column(String(255), default="", nullable=False)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    status = Column(String(16), default=ContactStatus.PENDING.value, nullable=False, index=True)
    response_message = Column(Text, default="", nullable=False)
    is_archived = Column(Boolean, default=False, nullable=False)
    ip_address = Column(String(64), default="", nullable=False)

    client_id = Column(BigIntegerPK, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True, index=True)
    responded_by_id = Column(BigIntegerPK, ForeignKey("admins.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    client = relationship("Client", lazy="selectin")
    responded_by = relationship("Admin", lazy="selectin")
