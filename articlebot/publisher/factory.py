"""Wire a PublishingPipeline from settings."""

import asyncio
from typing import Optional

import httpx

from articlebot.core.db import create_engine, create_session_factory
from articlebot.core.errors import StoreUnavailableError
from articlebot.core.logging import get_logger
from articlebot.core.retry import RetryPolicy
from articlebot.core.settings import Settings
from articlebot.core.store import PostStore, SQLAlchemyPostStore
from articlebot.media.images import ImageSourcer, PexelsImageProvider, StabilityImageProvider
from articlebot.seo.analyzer import SEOAnalyzer
from articlebot.topics.classifier import ClassifierLists, TopicClassifier
from articlebot.topics.feeds import GitHubTrendingFeed, NewsAPIFeed
from articlebot.topics.source import TopicSource
from articlebot.writer.generator import ContentGenerator
from articlebot.writer.llm_provider import OpenAIProvider
from .persistence import ArticlePersister
from .pipeline import PublishingPipeline

logger = get_logger(__name__)

USER_AGENT = "ArticleBot/0.1 (+https://techonigx.com)"


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Shared client for feeds and image providers."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
        limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
    )


def create_store(settings: Settings) -> SQLAlchemyPostStore:
    engine = create_engine(settings.db_url, echo=settings.debug)
    return SQLAlchemyPostStore(create_session_factory(engine), engine=engine)


def build_pipeline(
    settings: Settings,
    http_client: httpx.AsyncClient,
    store: Optional[PostStore] = None,
    sleep=asyncio.sleep,
) -> PublishingPipeline:
    """
    Build a pipeline with concrete services.

    Args:
        settings: Application settings
        http_client: Client shared by feeds and image providers; caller closes it
        store: Post store, a SQLAlchemy store on settings.db_url when None
        sleep: Sleep coroutine used for every delay in the batch

    Returns:
        Ready-to-run PublishingPipeline
    """
    store = store or create_store(settings)

    classifier = TopicClassifier(
        ClassifierLists.from_yaml(settings.topics_config_path) if settings.topics_config_path else None
    )
    feeds = [GitHubTrendingFeed(http_client)]
    if settings.newsapi_key:
        feeds.append(NewsAPIFeed(http_client, settings.newsapi_key, sleep=sleep))
    topic_source = TopicSource(feeds, classifier=classifier)

    provider = None
    if settings.openai_api_key:
        provider = OpenAIProvider(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            max_tokens=settings.openai_max_tokens,
            temperature=settings.openai_temperature,
        )
    generator = ContentGenerator(
        provider,
        store,
        site_url=settings.resolved_site_url,
        fallback_model=settings.openai_fallback_model,
        cooldown_seconds=settings.rate_limit_cooldown_seconds,
        sleep=sleep,
    )

    image_sourcer = ImageSourcer([
        StabilityImageProvider(http_client, settings.stability_api_key),
        PexelsImageProvider(http_client, settings.pexels_api_key),
    ])

    persister = ArticlePersister(
        store,
        author_email=settings.author_email,
        author_name=settings.author_name,
        retry_policy=RetryPolicy(
            max_attempts=settings.retry_attempts,
            delay_seconds=settings.retry_delay_seconds,
            retry_on=(StoreUnavailableError,),
            sleep=sleep,
        ),
    )

    logger.info(f"Built pipeline with {len(feeds)} topic feeds")
    return PublishingPipeline(
        settings=settings,
        store=store,
        topic_source=topic_source,
        generator=generator,
        image_sourcer=image_sourcer,
        analyzer=SEOAnalyzer(),
        persister=persister,
        sleep=sleep,
    )
