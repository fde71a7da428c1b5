"""
Pydantic records passed between pipeline stages.

TrendingTopic and GeneratedArticle are transient. PublishedPost mirrors a
stored row and is what the pipeline reports back to callers.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PostStatus(str, Enum):
    """Lifecycle status of a stored post."""
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class TrendingTopic(BaseModel):
    """A candidate subject for one article."""
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    url: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    published_at: Optional[datetime] = None
    source: str = "unknown"
    priority_score: int = Field(default=3, ge=1, le=3, description="1 is the highest priority")

    @validator("title", "description")
    def strip_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @property
    def weight(self) -> int:
        return 4 - self.priority_score

    @property
    def is_repository(self) -> bool:
        return self.source == "GitHub Trending"


class HeroImage(BaseModel):
    """Cover image chosen for an article."""
    url: str
    alt_text: str
    provider: str


class GeneratedArticle(BaseModel):
    """Output of the content generator, before persistence."""
    title: str
    slug: str
    excerpt: str
    keywords: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    content: str
    hero_image_url: Optional[str] = None
    hero_image_alt: Optional[str] = None
    published_at: datetime = Field(default_factory=utcnow)
    canonical_url: str
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    source_topic: Optional[str] = None
    generated_by: str = "model"

    @validator("content")
    def content_not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError("content must not be empty")
        return v

    def with_hero_image(self, image: HeroImage) -> "GeneratedArticle":
        return self.copy(update={"hero_image_url": image.url, "hero_image_alt": image.alt_text})


class NewPost(BaseModel):
    """Insert payload handed to a PostStore."""
    title: str
    slug: str
    content: str
    excerpt: str
    status: PostStatus = PostStatus.PUBLISHED
    author_id: int
    category_ids: List[int] = Field(default_factory=list)
    tag_ids: List[int] = Field(default_factory=list)
    reading_time: int = 1
    cover_image: Optional[str] = None
    seo_description: Optional[str] = None
    canonical_url: Optional[str] = None
    seo_score: Optional[int] = None
    seo_metadata: Optional[Dict[str, Any]] = None
    published_at: datetime = Field(default_factory=utcnow)


class PublishedPost(BaseModel):
    """A stored article."""
    id: int
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    status: PostStatus = PostStatus.PUBLISHED
    author_id: int
    category_ids: List[int] = Field(default_factory=list)
    tag_ids: List[int] = Field(default_factory=list)
    reading_time: int = 1
    cover_image: Optional[str] = None
    seo_description: Optional[str] = None
    canonical_url: Optional[str] = None
    seo_score: Optional[int] = None
    seo_metadata: Optional[Dict[str, Any]] = None
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PostStats(BaseModel):
    """Counts over published posts."""
    total_posts: int = 0
    published_today: int = 0
    average_reading_time: int = 0


def start_of_day(now: Optional[datetime] = None) -> datetime:
    """Midnight UTC of the day containing now."""
    now = now or utcnow()
    return now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
