"""Модели клиентских заявок на услуги."""
from sqlalchemy import Column, String, DateTime, Float, Text, JSON, ForeignKey
from sqlalchemy.orm import relationship

from codix.core.database import Base, BigIntegerPK, utcnow
from codix.utils.enums import ServiceCategory, ServiceRequestStatus


class ClientServiceRequest(Base):
    """Заявка клиента на разработку."""

    __tablename__ = "client_service_requests"

    id = Column(BigIntegerPK, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    category = Column(String(32), default=ServiceCategory.CUSTOM.value, nullable=False)
    description = Column(Text, nullable=False)
    features = Column(JSON, default=list, nullable=False)
    budget = Column(Float, nullable=True)
    delivery_deadline = Column(DateTime, nullable=True)
    status = Column(String(32), default=ServiceRequestStatus.PENDING.value, nullable=False, index=True)
    admin_notes = Column(Text, nullable=True)

    created_by_id = Column(BigIntegerPK, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    created_by = relationship("Client", back_populates="service_requests", lazy="selectin")
    attachments = relationship(
        "ServiceRequestAttachment",
        back_populates="request",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ServiceRequestAttachment.id",
    )


class ServiceRequestAttachment(Base):
    """Файл заявки во внешнем хранилище."""

    __tablename__ = "service_request_attachments"

    id = Column(BigIntegerPK, primary_key=True, index=True)
    request_id = Column(
        BigIntegerPK, ForeignKey("client_service_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url = Column(String(1024), nullable=False)
    public_id = Column(String(512), nullable=False, index=True)
    resource_type = Column(String(16), nullable=False)
    uploaded_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    request = relationship("ClientServiceRequest", back_populates="attachments")
