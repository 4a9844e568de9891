"""Модели услуг и прайсов."""
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Float, Text, JSON, ForeignKey
from sqlalchemy.orm import relationship

from codix.core.database import Base, BigIntegerPK, utcnow
from codix.utils.enums import CatalogStatus, ServiceCategory


class Service(Base):
    """Услуга каталога, созданная администратором."""

    __tablename__ = "services"

    id = Column(BigIntegerPK, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    category = Column(String(32), default=ServiceCategory.BUSINESS.value, nullable=False, index=True)
    description = Column(Text, nullable=False)
    features = Column(JSON, default=list, nullable=False)
    price = Column(Float, nullable=False)
    is_customizable = Column(Boolean, default=True, nullable=False)
    delivery_time_in_days = Column(Integer, default=7, nullable=False)
    tags = Column(JSON, default=list, nullable=False)
    status = Column(String(16), default=CatalogStatus.ACTIVE.value, nullable=False, index=True)

    thumbnail_url = Column(String(1024), nullable=True)
    thumbnail_public_id = Column(String(512), nullable=True)
    thumbnail_resource_type = Column(String(16), nullable=True)

    created_by_id = Column(BigIntegerPK, ForeignKey("admins.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    created_by = relationship("Admin", lazy="selectin")
    pricing = relationship(
        "Pricing", back_populates="service", uselist=False, cascade="all, delete-orphan", lazy="selectin"
    )


class Pricing(Base):
    """Тарифная сетка услуги (одна на услугу)."""

    __tablename__ = "pricing"

    id = Column(BigIntegerPK, primary_key=True, index=True)
    service_id = Column(BigIntegerPK, ForeignKey("services.id", ondelete="CASCADE"), unique=True, nullable=False)
    # [{"name", "description", "features", "price", "deliveryTimeInDays", "isPopular"}]
    tiers = Column(JSON, default=list, nullable=False)
    currency = Column(String(8), default="USD", nullable=False)
    status = Column(String(16), default=CatalogStatus.ACTIVE.value, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    service = relationship("Service", back_populates="pricing", lazy="selectin")
