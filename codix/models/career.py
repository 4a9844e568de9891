"""Модель заявки на вакансию."""
from typing import Optional

from sqlalchemy import Column, String, DateTime

from codix.core.database import Base, BigIntegerPK, utcnow
from codix.utils.enums import CareerSource, CareerStatus


class Career(Base):
    """Заявка соискателя с резюме во внешнем хранилище."""

    __tablename__ = "careers"

    id = Column(BigIntegerPK, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(32), nullable=False)
    position_applied = Column(String(255), nullable=False, index=True)

    resume_url = Column(String(1024), nullable=False)
    resume_public_id = Column(String(512), nullable=False)
    resume_resource_type = Column(String(16), nullable=False)
    cover_letter_url = Column(String(1024), nullable=True)
    cover_letter_public_id = Column(String(512), nullable=True)
    cover_letter_resource_type = Column(String(16), nullable=True)

    status = Column(String(32), default=CareerStatus.APPLIED.value, nullable=False, index=True)
    source = Column(String(32), default=CareerSource.WEBSITE.value, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @property
    def resume(self) -> dict:
        return {"url": self.resume_url, "publicId": self.resume_public_id, "resourceType": self.resume_resource_type}

    @property
    def cover_letter(self) -> Optional[dict]:
        if not self.cover_letter_public_id:
            return None
        return {
            "url": self.cover_letter_url,
            "publicId": self.cover_letter_public_id,
            "resourceType": self.cover_letter_resource_type,
        }
