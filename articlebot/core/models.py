"""Database models for articlebot."""

from sqlalchemy import (
    Column, String, DateTime, Text, Integer, ForeignKey, JSON, Index, Table
)
from sqlalchemy.orm import mapped_column, relationship
from sqlalchemy.sql import func

from .db import Base


post_categories = Table(
    "post_categories",
    Base.metadata,
    Column("post_id", ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)

post_tags = Table(
    "post_tags",
    Base.metadata,
    Column("post_id", ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """Post authors."""
    __tablename__ = "users"

    id = mapped_column(Integer, primary_key=True)
    email = mapped_column(String(255), unique=True, nullable=False)
    name = mapped_column(String(200), nullable=False)
    role = mapped_column(String(32), default="ADMIN", nullable=False)
    created_at = mapped_column(DateTime(timezone=True), server_default=func.now())


class Category(Base):
    """Editorial categories."""
    __tablename__ = "categories"

    id = mapped_column(Integer, primary_key=True)
    name = mapped_column(String(200), nullable=False)
    slug = mapped_column(String(100), unique=True, nullable=False)
    created_at = mapped_column(DateTime(timezone=True), server_default=func.now())


class Tag(Base):
    """Free-form tags."""
    __tablename__ = "tags"

    id = mapped_column(Integer, primary_key=True)
    name = mapped_column(String(200), nullable=False)
    slug = mapped_column(String(100), unique=True, nullable=False)
    created_at = mapped_column(DateTime(timezone=True), server_default=func.now())


class Post(Base):
    """Published articles. Written once, never updated by the pipeline."""
    __tablename__ = "posts"

    id = mapped_column(Integer, primary_key=True)
    title = mapped_column(String(500), unique=True, nullable=False)
    slug = mapped_column(String(100), unique=True, nullable=False)
    content = mapped_column(Text, nullable=False)
    excerpt = mapped_column(Text, nullable=True)
    status = mapped_column(String(16), default="PUBLISHED", nullable=False)
    author_id = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    reading_time = mapped_column(Integer, default=1, nullable=False)
    cover_image = mapped_column(Text, nullable=True)  # may be a data: URL
    seo_description = mapped_column(String(500), nullable=True)
    canonical_url = mapped_column(String(1000), nullable=True)
    seo_score = mapped_column(Integer, nullable=True)
    seo_metadata = mapped_column(JSON, nullable=True)
    published_at = mapped_column(DateTime(timezone=True), index=True)
    created_at = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    author = relationship("User", lazy="selectin")
    categories = relationship("Category", secondary=post_categories, lazy="selectin")
    tags = relationship("Tag", secondary=post_tags, lazy="selectin")

    __table_args__ = (
        Index("ix_posts_status_published", "status", "published_at"),
    )
