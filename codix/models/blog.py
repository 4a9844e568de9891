"""Модель записи блога."""
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text, JSON, ForeignKey, Table, Index
from sqlalchemy.orm import relationship

from codix.core.database import Base, BigIntegerPK, utcnow
from codix.utils.enums import BlogStatus

blog_likes = Table(
    "blog_likes",
    Base.metadata,
    Column("blog_id", BigIntegerPK, ForeignKey("blogs.id", ondelete="CASCADE"), primary_key=True),
    Column("client_id", BigIntegerPK, ForeignKey("clients.id", ondelete="CASCADE"), primary_key=True),
)


class Blog(Base):
    """Запись блога, принадлежащая клиенту."""

    __tablename__ = "blogs"
    __table_args__ = (
        Index("ix_blogs_status_created_at", "status", "created_at"),
        Index("ix_blogs_author_created_at", "author_id", "created_at"),
        Index("ix_blogs_category_created_at", "category", "created_at"),
    )

    id = Column(BigIntegerPK, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    content = Column(Text, nullable=False)
    excerpt = Column(String(300), nullable=True)
    author_id = Column(BigIntegerPK, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    tags = Column(JSON, default=list, nullable=False)
    category = Column(String(100), nullable=False)
    reading_time = Column(String(32), nullable=True)
    views = Column(Integer, default=0, nullable=False)
    status = Column(String(32), default=BlogStatus.DRAFT.value, nullable=False)
    featured = Column(Boolean, default=False, nullable=False)
    seo_title = Column(String(255), nullable=True)
    seo_description = Column(String(500), nullable=True)
    meta_keywords = Column(JSON, default=list, nullable=False)

    cover_image_url = Column(String(1024), default="", nullable=False)
    cover_image_public_id = Column(String(512), nullable=True)
    cover_image_alt = Column(String(255), default="", nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    author = relationship("Client", back_populates="blogs", lazy="selectin")
    liked_by = relationship("Client", secondary=blog_likes, lazy="selectin")

    @property
    def like_count(self) -> int:
        return len(self.liked_by)

    @property
    def likes(self) -> list:
        return [client.id for client in self.liked_by]

    @property
    def cover_image(self) -> dict:
        return {
            "url": self.cover_image_url,
            "publicId": self.cover_image_public_id,
            "altText": self.cover_image_alt,
        }
