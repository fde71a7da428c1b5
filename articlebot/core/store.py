"""
Post store interface and implementations.

The pipeline only talks to PostStore. SQLAlchemyPostStore backs it with the
relational schema in core.models; InMemoryPostStore keeps everything in
process for dry runs and tests.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, InterfaceError, DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from articlebot.core import repositories
from articlebot.core.errors import DuplicatePostError, PersistenceError, StoreUnavailableError
from articlebot.core.logging import get_logger
from articlebot.core.schemas import NewPost, PostStats, PostStatus, PublishedPost, start_of_day, utcnow
from articlebot.core.utils import slugify

logger = get_logger(__name__)


class PostStore(ABC):
    """Abstract persistence interface used by the pipeline."""

    @abstractmethod
    async def find_post(self, title: str, slug: str) -> Optional[PublishedPost]:
        """Return a post whose title or slug matches exactly, else None."""
        pass

    @abstractmethod
    async def slug_exists(self, slug: str) -> bool:
        pass

    @abstractmethod
    async def upsert_author(self, email: str, name: str) -> int:
        pass

    @abstractmethod
    async def upsert_category(self, slug: str, name: str) -> int:
        pass

    @abstractmethod
    async def upsert_tag(self, name: str) -> int:
        pass

    @abstractmethod
    async def create_post(self, post: NewPost) -> PublishedPost:
        """
        Store a new post.

        Raises:
            DuplicatePostError: title or slug already taken
            StoreUnavailableError: store unreachable
        """
        pass

    @abstractmethod
    async def ping(self) -> None:
        """Raise StoreUnavailableError when the store cannot be reached."""
        pass

    @abstractmethod
    async def stats(self) -> PostStats:
        """Counts over published posts."""
        pass

    async def close(self) -> None:
        """Release connections held by the store."""
        return None


class SQLAlchemyPostStore(PostStore):
    """PostStore backed by an async SQLAlchemy session factory.

    When engine is given the store owns it and disposes it on close().
    """

    def __init__(self, session_factory: async_sessionmaker, engine: Optional[AsyncEngine] = None):
        self.session_factory = session_factory
        self.engine = engine

    async def _run(self, operation: str, fn, *args):
        try:
            async with self.session_factory() as session:
                return await fn(session, *args)
        except IntegrityError as e:
            raise DuplicatePostError(f"{operation} violated a unique constraint: {e.orig}") from e
        except (OperationalError, InterfaceError, OSError, ConnectionError) as e:
            raise StoreUnavailableError(f"{operation} failed, store unreachable: {e}") from e
        except DBAPIError as e:
            raise PersistenceError(f"{operation} failed: {e}") from e

    async def find_post(self, title: str, slug: str) -> Optional[PublishedPost]:
        async def _find(session):
            post = await repositories.get_post_by_title_or_slug(session, title, slug)
            return repositories.post_to_record(post) if post else None
        return await self._run("find_post", _find)

    async def slug_exists(self, slug: str) -> bool:
        return await self._run("slug_exists", repositories.slug_exists, slug)

    async def upsert_author(self, email: str, name: str) -> int:
        return await self._run("upsert_author", repositories.upsert_author, email, name)

    async def upsert_category(self, slug: str, name: str) -> int:
        return await self._run("upsert_category", repositories.upsert_category, slug, name)

    async def upsert_tag(self, name: str) -> int:
        return await self._run("upsert_tag", repositories.upsert_tag, slugify(name), name)

    async def create_post(self, post: NewPost) -> PublishedPost:
        async def _create(session):
            stored = await repositories.insert_post(session, post)
            return repositories.post_to_record(stored)
        return await self._run("create_post", _create)

    async def ping(self) -> None:
        async def _ping(session):
            await session.execute(text("SELECT 1"))
        await self._run("ping", _ping)

    async def stats(self) -> PostStats:
        return await self._run("stats", repositories.published_stats)

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Disposed database engine")


class InMemoryPostStore(PostStore):
    """Process-local PostStore with the same uniqueness rules as the database."""

    def __init__(self):
        self.posts: List[PublishedPost] = []
        self.authors: Dict[str, int] = {}
        self.categories: Dict[str, int] = {}
        self.tags: Dict[str, int] = {}
        self._lock = asyncio.Lock()
        self._next_id = 1

    def _allocate_id(self) -> int:
        allocated = self._next_id
        self._next_id += 1
        return allocated

    async def find_post(self, title: str, slug: str) -> Optional[PublishedPost]:
        for post in self.posts:
            if post.title == title or post.slug == slug:
                return post
        return None

    async def slug_exists(self, slug: str) -> bool:
        return any(post.slug == slug for post in self.posts)

    async def _upsert(self, table: Dict[str, int], key: str) -> int:
        async with self._lock:
            if key not in table:
                table[key] = self._allocate_id()
            return table[key]

    async def upsert_author(self, email: str, name: str) -> int:
        return await self._upsert(self.authors, email)

    async def upsert_category(self, slug: str, name: str) -> int:
        return await self._upsert(self.categories, slug)

    async def upsert_tag(self, name: str) -> int:
        return await self._upsert(self.tags, slugify(name))

    async def create_post(self, post: NewPost) -> PublishedPost:
        async with self._lock:
            if await self.find_post(post.title, post.slug):
                raise DuplicatePostError(f"Post '{post.title}' ({post.slug}) already exists")
            now = utcnow()
            stored = PublishedPost(
                id=self._allocate_id(),
                created_at=now,
                updated_at=now,
                **post.dict(),
            )
            self.posts.append(stored)
        logger.info(f"Stored post id={stored.id} slug={stored.slug} in memory")
        return stored

    async def ping(self) -> None:
        return None

    async def stats(self) -> PostStats:
        published = [p for p in self.posts if p.status == PostStatus.PUBLISHED]
        today = start_of_day()
        recent = sorted(
            published, key=lambda p: p.published_at or p.created_at or today, reverse=True,
        )[:repositories.STATS_SAMPLE_SIZE]
        average = round(sum(p.reading_time for p in recent) / len(recent)) if recent else 0
        return PostStats(
            total_posts=len(published),
            published_today=sum(1 for p in published if p.published_at and p.published_at >= today),
            average_reading_time=average,
        )
