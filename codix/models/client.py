"""Модель клиента."""
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text
from sqlalchemy.orm import relationship

from codix.core.database import Base, BigIntegerPK, utcnow
from codix.utils.enums import ClientRole, ClientStatus

DEFAULT_PROFILE_IMAGE = "default-profile.png"


class Client(Base):
    """Клиент сайта."""

    __tablename__ = "clients"

    id = Column(BigIntegerPK, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(32), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), default=ClientRole.CLIENT.value, nullable=False)
    status = Column(String(32), default=ClientStatus.ACTIVE.value, nullable=False, index=True)

    profile_image = Column(String(1024), default=DEFAULT_PROFILE_IMAGE, nullable=False)
    profile_image_public_id = Column(String(512), nullable=True)

    address_country = Column(String(255), nullable=True)
    address_city = Column(String(255), nullable=True)
    address_street = Column(String(255), nullable=True)

    is_email_verified = Column(Boolean, default=False, nullable=False)
    verification_token = Column(Text, nullable=True)
    is_phone_verified = Column(Boolean, default=False, nullable=False)
    phone_verification_attempts = Column(Integer, default=0, nullable=False)

    refresh_token = Column(Text, nullable=True)
    reset_token = Column(Text, nullable=True)
    reset_token_expires = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    blogs = relationship("Blog", back_populates="author", cascade="all, delete-orphan")
    service_requests = relationship("ClientServiceRequest", back_populates="created_by", cascade="all, delete-orphan")

    principal_type = "client"

    @property
    def address(self) -> dict:
        return {
            "country": self.address_country,
            "city": self.address_city,
            "street": self.address_street,
        }
