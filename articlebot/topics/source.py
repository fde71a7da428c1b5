"""Topic discovery: gather feeds, classify, order, fall back."""

import asyncio
import time
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from articlebot.core.logging import get_logger
from articlebot.core.schemas import TrendingTopic
from .classifier import TopicClassifier, extract_keywords
from .fallback import get_fallback_topics
from .feeds import TopicFeed

logger = get_logger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _sort_key(topic: TrendingTopic):
    published = topic.published_at or _EPOCH
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    # Newest first within a tier; undated items sort last
    return (topic.priority_score, -published.timestamp())


class TopicSource:
    """
    Produce an ordered list of candidate topics.

    Feeds are fetched concurrently and merged in feed order. A failing feed
    is logged and skipped. Candidates are classified, de-duplicated by title
    and sorted by (priority, recency). When nothing usable remains the
    curated fallback list is returned.
    """

    def __init__(
        self,
        feeds: Sequence[TopicFeed],
        classifier: Optional[TopicClassifier] = None,
        max_candidates: Optional[int] = None,
    ):
        self.feeds = list(feeds)
        self.classifier = classifier or TopicClassifier()
        self.max_candidates = max_candidates

    async def _gather(self) -> List[TrendingTopic]:
        results = await asyncio.gather(
            *(feed.fetch() for feed in self.feeds),
            return_exceptions=True,
        )

        merged: List[TrendingTopic] = []
        for feed, result in zip(self.feeds, results):
            if isinstance(result, BaseException):
                logger.warning(f"Feed '{feed.name}' failed, skipping: {result}")
                continue
            merged.extend(result)
        return merged

    def _classify(self, candidates: List[TrendingTopic]) -> List[TrendingTopic]:
        seen_titles = set()
        accepted = []
        for topic in candidates:
            key = topic.title.strip().lower()
            if key in seen_titles:
                continue

            tier = self.classifier.classify(topic.title, topic.description)
            if tier is None:
                logger.debug(f"Dropped off-topic candidate: {topic.title}")
                continue

            seen_titles.add(key)
            keywords = topic.keywords or extract_keywords(f"{topic.title} {topic.description}")
            accepted.append(topic.copy(update={"priority_score": tier, "keywords": keywords}))
        return accepted

    async def discover(self) -> List[TrendingTopic]:
        """
        Discover topics ordered by priority then recency.

        Returns:
            Classified topics, or the curated fallback list when discovery
            produced nothing usable. Never empty, never raises for feed errors.
        """
        start_time = time.time()

        candidates = await self._gather()
        topics = sorted(self._classify(candidates), key=_sort_key)
        if self.max_candidates:
            topics = topics[:self.max_candidates]

        if not topics:
            logger.warning(
                f"No usable topics from {len(self.feeds)} feeds "
                f"({len(candidates)} candidates), using curated fallback list"
            )
            return get_fallback_topics()

        elapsed = time.time() - start_time
        logger.info(
            f"Discovered {len(topics)} topics from {len(candidates)} candidates in {elapsed:.2f}s"
        )
        return topics
