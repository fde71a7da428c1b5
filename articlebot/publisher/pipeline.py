"""Publishing pipeline orchestrator.

Coordinates one batch:
1. Validate environment: missing text-service key aborts, others warn
2. Discover topics and drop already-published ones
3. Per slot: generate, source hero image, score, persist
4. Report posts, errors, warnings and stats

Slots are processed sequentially with a fixed delay between them. A slot
failure is recorded and the loop moves on.

The per-slot generation retry does not retry model calls: ContentGenerator
already falls back to the template on any model failure. What it re-runs are
store errors raised while picking a unique slug.
"""

import asyncio
import time
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Tuple

from articlebot.core.errors import ConfigurationError
from articlebot.core.logging import get_logger
from articlebot.core.retry import RetryPolicy
from articlebot.core.schemas import PostStats, PublishedPost, TrendingTopic, utcnow
from articlebot.core.settings import Settings
from articlebot.core.store import PostStore
from articlebot.media.images import ImageSourcer
from articlebot.seo.analyzer import SEOAnalyzer
from articlebot.topics.dedup import Deduplicator
from articlebot.topics.fallback import get_fallback_topics
from articlebot.topics.source import TopicSource
from articlebot.writer.generator import ContentGenerator
from .persistence import ArticlePersister
from .results import BatchResult, BatchStats, CheckStatus, HealthCheck, HealthReport

logger = get_logger(__name__)

REQUIRED_ENV = [("OPENAI_API_KEY", "openai_api_key")]
OPTIONAL_ENV = [
    ("NEWSAPI_KEY", "newsapi_key", "news feed disabled, discovery uses GitHub only"),
    ("PEXELS_API_KEY", "pexels_api_key", "stock photo search disabled"),
    ("STABILITY_API_KEY", "stability_api_key", "image generation disabled"),
    ("SITE_URL", "site_url", "canonical URLs use the default site"),
]


class PipelineState(str, Enum):
    IDLE = "idle"
    VALIDATING_ENV = "validating_env"
    GENERATING = "generating"
    SCORING = "scoring"
    PERSISTING = "persisting"


class PublishingPipeline:
    """Batch article production over injected services."""

    def __init__(
        self,
        settings: Settings,
        store: PostStore,
        topic_source: TopicSource,
        generator: ContentGenerator,
        image_sourcer: ImageSourcer,
        analyzer: SEOAnalyzer,
        persister: ArticlePersister,
        deduplicator: Optional[Deduplicator] = None,
        generation_retry: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings
        self.store = store
        self.topic_source = topic_source
        self.generator = generator
        self.image_sourcer = image_sourcer
        self.analyzer = analyzer
        self.persister = persister
        self.deduplicator = deduplicator or Deduplicator(store)
        self.generation_retry = generation_retry or RetryPolicy(
            max_attempts=settings.retry_attempts,
            delay_seconds=settings.retry_delay_seconds,
            sleep=sleep,
        )
        self.sleep = sleep
        self.state = PipelineState.IDLE

    def validate_environment(self) -> Tuple[List[str], List[str]]:
        """
        Check configuration.

        Returns:
            (errors, warnings); errors name missing required variables
        """
        errors = []
        warnings = []
        for env_name, attr in REQUIRED_ENV:
            if not getattr(self.settings, attr):
                errors.append(f"{env_name} is not set")
        for env_name, attr, effect in OPTIONAL_ENV:
            if not getattr(self.settings, attr):
                warnings.append(f"{env_name} is not set: {effect}")
        return errors, warnings

    async def _select_topics(self, count: int, result: BatchResult) -> List[TrendingTopic]:
        topics = await self.topic_source.discover()
        try:
            unique = await self.deduplicator.filter_unique(topics)
            if len(unique) < count:
                selected_titles = {t.title for t in unique}
                extras = [t for t in get_fallback_topics() if t.title not in selected_titles]
                unique.extend(await self.deduplicator.filter_unique(extras))
        except Exception as e:
            logger.error(f"Deduplication failed: {e}")
            result.errors.append(f"Could not check existing posts: {e}")
            return []
        return unique[:count]

    async def _run_slot(self, topic: TrendingTopic, result: BatchResult) -> Tuple[PublishedPost, Optional[int]]:
        self.state = PipelineState.GENERATING
        article = await self.generation_retry.call(self.generator.generate, topic)
        if article.generated_by == "fallback":
            result.warnings.append(f"'{article.title}' was produced from the fallback template")

        image = await self.image_sourcer.get_hero_image(article.title)
        article = article.with_hero_image(image)

        seo = None
        if self.settings.validate_seo:
            self.state = PipelineState.SCORING
            seo = self.analyzer.analyze(
                article.title,
                article.content,
                article.seo_description or article.excerpt,
                target_keyword=article.keywords[0] if article.keywords else None,
            )
            if seo.overall_score < self.settings.min_seo_score:
                result.warnings.append(
                    f"'{article.title}' SEO score {seo.overall_score} is below {self.settings.min_seo_score}"
                )

        self.state = PipelineState.PERSISTING
        post = await self.persister.persist(article, seo)
        return post, seo.overall_score if seo else None

    async def generate(self, count: Optional[int] = None) -> BatchResult:
        """
        Produce up to count articles.

        Raises:
            ConfigurationError: required configuration is missing; nothing runs
        """
        count = count if count is not None else self.settings.posts_per_run
        start_time = time.time()
        result = BatchResult(stats=BatchStats(requested=count))

        self.state = PipelineState.VALIDATING_ENV
        errors, warnings = self.validate_environment()
        if errors:
            self.state = PipelineState.IDLE
            raise ConfigurationError("; ".join(errors), missing=[e.split()[0] for e in errors])
        result.warnings.extend(warnings)

        logger.info(f"Starting batch: count={count}")
        scores: List[int] = []
        try:
            topics = await self._select_topics(count, result) if count > 0 else []

            for slot in range(count):
                if slot:
                    await self.sleep(self.settings.inter_slot_delay_seconds)

                if slot >= len(topics):
                    result.stats.failed += 1
                    result.errors.append(f"Slot {slot + 1}: no unpublished topic available")
                    continue

                topic = topics[slot]
                try:
                    post, score = await self._run_slot(topic, result)
                except Exception as e:
                    logger.error(f"Slot {slot + 1} failed for '{topic.title}': {e}")
                    result.stats.failed += 1
                    result.errors.append(f"Slot {slot + 1} ('{topic.title}'): {e}")
                    continue

                result.posts.append(post)
                result.stats.generated += 1
                if score is not None:
                    scores.append(score)
        finally:
            self.state = PipelineState.IDLE

        result.stats.average_seo_score = round(sum(scores) / len(scores)) if scores else 0
        result.success = len(result.posts) > 0
        result.finished_at = utcnow()

        elapsed = time.time() - start_time
        logger.info(
            f"Batch finished in {elapsed:.2f}s: generated={result.stats.generated} "
            f"failed={result.stats.failed} avg_seo={result.stats.average_seo_score}"
        )
        return result

    async def health_check(self) -> HealthReport:
        """Configuration and store connectivity, without generating anything."""
        checks = []
        errors, warnings = self.validate_environment()
        if errors:
            checks.append(HealthCheck(name="environment", status=CheckStatus.FAIL, message="; ".join(errors)))
        elif warnings:
            checks.append(HealthCheck(name="environment", status=CheckStatus.WARN, message="; ".join(warnings)))
        else:
            checks.append(HealthCheck(name="environment", status=CheckStatus.PASS, message="All variables set"))

        try:
            await self.store.ping()
            checks.append(HealthCheck(name="store", status=CheckStatus.PASS, message="Store reachable"))
        except Exception as e:
            checks.append(HealthCheck(name="store", status=CheckStatus.FAIL, message=str(e)))

        return HealthReport.from_checks(checks)

    async def statistics(self) -> PostStats:
        """Published post counts; zeros when the store cannot be read."""
        try:
            return await self.store.stats()
        except Exception as e:
            logger.error(f"Could not read post statistics: {e}")
            return PostStats()
