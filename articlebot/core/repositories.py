"""Repository layer for database operations.

Async helpers taking an explicit session. Upserts are select-then-insert and
fall back to a re-select when a concurrent writer wins the unique constraint.
"""

from typing import Optional, Type

from sqlalchemy import func, select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from articlebot.core.logging import get_logger
from articlebot.core.models import Category, Post, Tag, User
from articlebot.core.schemas import NewPost, PostStats, PostStatus, PublishedPost, start_of_day

logger = get_logger(__name__)


def post_to_record(post: Post) -> PublishedPost:
    """Convert an ORM post into the pipeline's PublishedPost record."""
    return PublishedPost(
        id=post.id,
        title=post.title,
        slug=post.slug,
        content=post.content,
        excerpt=post.excerpt,
        status=post.status,
        author_id=post.author_id,
        category_ids=[c.id for c in post.categories],
        tag_ids=[t.id for t in post.tags],
        reading_time=post.reading_time,
        cover_image=post.cover_image,
        seo_description=post.seo_description,
        canonical_url=post.canonical_url,
        seo_score=post.seo_score,
        seo_metadata=post.seo_metadata,
        published_at=post.published_at,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


async def get_post_by_title_or_slug(session: AsyncSession, title: str, slug: str) -> Optional[Post]:
    """Find a post whose title or slug matches exactly."""
    stmt = select(Post).where(or_(Post.title == title, Post.slug == slug)).limit(1)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def slug_exists(session: AsyncSession, slug: str) -> bool:
    result = await session.execute(select(Post.id).where(Post.slug == slug).limit(1))
    return result.scalar_one_or_none() is not None


async def _upsert_by(session: AsyncSession, model: Type, column: str, value: str, **values) -> int:
    stmt = select(model.id).where(getattr(model, column) == value)
    existing_id = (await session.execute(stmt)).scalar_one_or_none()
    if existing_id is not None:
        return existing_id

    session.add(model(**{column: value}, **values))
    try:
        await session.commit()
    except IntegrityError:
        # Another writer inserted the same key first
        await session.rollback()
        existing_id = (await session.execute(stmt)).scalar_one_or_none()
        if existing_id is None:
            raise
        return existing_id

    created_id = (await session.execute(stmt)).scalar_one()
    logger.info(f"Created {model.__tablename__} row {column}={value!r} (id={created_id})")
    return created_id


async def upsert_author(session: AsyncSession, email: str, name: str) -> int:
    """Return the id of the user with email, creating it if needed."""
    return await _upsert_by(session, User, "email", email, name=name, role="ADMIN")


async def upsert_category(session: AsyncSession, slug: str, name: str) -> int:
    """Return the id of the category with slug, creating it if needed."""
    return await _upsert_by(session, Category, "slug", slug, name=name)


async def upsert_tag(session: AsyncSession, slug: str, name: str) -> int:
    """Return the id of the tag with slug, creating it if needed."""
    return await _upsert_by(session, Tag, "slug", slug, name=name)


async def insert_post(session: AsyncSession, new_post: NewPost) -> Post:
    """
    Insert a post with its category and tag links.

    Args:
        session: Database session
        new_post: Insert payload

    Returns:
        The stored Post

    Raises:
        IntegrityError: if title or slug is already taken
    """
    categories = []
    if new_post.category_ids:
        categories = list((await session.execute(
            select(Category).where(Category.id.in_(new_post.category_ids))
        )).scalars())
    tags = []
    if new_post.tag_ids:
        tags = list((await session.execute(
            select(Tag).where(Tag.id.in_(new_post.tag_ids))
        )).scalars())

    post = Post(
        title=new_post.title,
        slug=new_post.slug,
        content=new_post.content,
        excerpt=new_post.excerpt,
        status=new_post.status.value,
        author_id=new_post.author_id,
        reading_time=new_post.reading_time,
        cover_image=new_post.cover_image,
        seo_description=new_post.seo_description,
        canonical_url=new_post.canonical_url,
        seo_score=new_post.seo_score,
        seo_metadata=new_post.seo_metadata,
        published_at=new_post.published_at,
        categories=categories,
        tags=tags,
    )
    session.add(post)
    await session.commit()
    await session.refresh(post)

    logger.info(f"Inserted post id={post.id} slug={post.slug}")
    return post


# Reading time is averaged over this many most recent published posts
STATS_SAMPLE_SIZE = 100


async def published_stats(session: AsyncSession) -> PostStats:
    """Total and today's published posts, plus average reading time of recent ones."""
    published = Post.status == PostStatus.PUBLISHED.value
    total = (await session.execute(select(func.count(Post.id)).where(published))).scalar_one()
    today = (await session.execute(
        select(func.count(Post.id)).where(published, Post.published_at >= start_of_day())
    )).scalar_one()
    reading_times = list((await session.execute(
        select(Post.reading_time)
        .where(published)
        .order_by(Post.published_at.desc())
        .limit(STATS_SAMPLE_SIZE)
    )).scalars())

    average = round(sum(rt or 0 for rt in reading_times) / len(reading_times)) if reading_times else 0
    return PostStats(total_posts=total, published_today=today, average_reading_time=average)
