"""Drop topics that were already published."""

from typing import List

from articlebot.core.logging import get_logger
from articlebot.core.schemas import TrendingTopic
from articlebot.core.store import PostStore
from articlebot.core.utils import slugify

logger = get_logger(__name__)


class Deduplicator:
    """Exact title / slug matching against the post store."""

    def __init__(self, store: PostStore):
        self.store = store

    async def is_published(self, topic: TrendingTopic) -> bool:
        existing = await self.store.find_post(topic.title, slugify(topic.title))
        return existing is not None

    async def filter_unique(self, topics: List[TrendingTopic]) -> List[TrendingTopic]:
        """
        Keep topics with no stored post of the same title or slug.

        Order is preserved. Store errors propagate to the caller.
        """
        unique = []
        for topic in topics:
            if await self.is_published(topic):
                logger.info(f"Skipping already published topic: {topic.title}")
                continue
            unique.append(topic)

        logger.info(f"Deduplicated {len(topics)} topics down to {len(unique)}")
        return unique
