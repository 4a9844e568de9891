"""Схемы для блога."""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from codix.schemas.base import CamelModel, InputModel
from codix.schemas.client import ClientBrief
from codix.utils.enums import BlogStatus

MAX_TAGS = 10


class CoverImage(CamelModel):
    url: str = ""
    public_id: Optional[str] = None
    alt_text: str = ""


class BlogCreate(InputModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=100)
    tags: List[str] = Field(default_factory=list, max_length=MAX_TAGS)
    status: BlogStatus = BlogStatus.DRAFT
    seo_title: Optional[str] = Field(default=None, max_length=255)
    seo_description: Optional[str] = Field(default=None, max_length=500)
    meta_keywords: List[str] = Field(default_factory=list)


class BlogUpdate(InputModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    tags: Optional[List[str]] = Field(default=None, max_length=MAX_TAGS)
    status: Optional[BlogStatus] = None
    seo_title: Optional[str] = Field(default=None, max_length=255)
    seo_description: Optional[str] = Field(default=None, max_length=500)
    meta_keywords: Optional[List[str]] = None


class BlogStatusUpdate(InputModel):
    status: BlogStatus


class BlogResponse(CamelModel):
    id: int
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    author: Optional[ClientBrief] = None
    tags: List[str]
    category: str
    reading_time: Optional[str] = None
    views: int
    likes: List[int]
    like_count: int
    status: str
    featured: bool
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    meta_keywords: List[str]
    cover_image: CoverImage
    created_at: datetime
    updated_at: datetime
