"""
Content generator: topic in, complete article out.

1. Ask the model for a JSON article
2. On a rate-limit signal, cool down and retry once on the fallback model
3. Parse tolerantly; any failure falls through to the deterministic renderer
4. Resolve a unique slug and canonical URL
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, Optional

from articlebot.core.errors import GenerationError, RateLimitedError, SlugCollisionError
from articlebot.core.logging import get_logger
from articlebot.core.schemas import GeneratedArticle, TrendingTopic
from articlebot.core.store import PostStore
from articlebot.core.utils import slugify, suffixed_slug, truncate_text
from .llm_provider import LLMProvider
from .parsing import parse_article_json
from .prompts import SYSTEM_PROMPT, build_user_prompt
from .template_renderer import FallbackRenderer

logger = get_logger(__name__)

MAX_SLUG_PROBES = 50


class ContentGenerator:
    """Generate articles from topics with model fallback."""

    def __init__(
        self,
        provider: Optional[LLMProvider],
        store: PostStore,
        site_url: str,
        fallback_model: Optional[str] = None,
        cooldown_seconds: float = 30.0,
        renderer: Optional[FallbackRenderer] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the generator.

        Args:
            provider: Text service; None always uses the fallback renderer
            store: Used to check slug availability
            site_url: Base URL for canonical links
            fallback_model: Model used for the single post-cooldown retry
            cooldown_seconds: Wait after a rate-limit signal
            renderer: Fallback renderer
            sleep: Injectable sleep coroutine
        """
        self.provider = provider
        self.store = store
        self.site_url = site_url.rstrip("/")
        self.fallback_model = fallback_model
        self.cooldown_seconds = cooldown_seconds
        self.renderer = renderer or FallbackRenderer()
        self.sleep = sleep

    async def _request(self, topic: TrendingTopic, model: Optional[str] = None) -> Dict[str, Any]:
        raw = await self.provider.complete(SYSTEM_PROMPT, build_user_prompt(topic), model=model)
        parsed = parse_article_json(raw)
        if not parsed.ok:
            raise GenerationError(f"Unparseable model output: {parsed.error}")
        return parsed.data

    async def _generate_with_model(self, topic: TrendingTopic) -> Optional[Dict[str, Any]]:
        """Model payload, or None when the fallback renderer should be used."""
        if self.provider is None:
            return None

        try:
            return await self._request(topic)
        except RateLimitedError as e:
            logger.warning(f"Rate limited for '{topic.title}', cooling down {self.cooldown_seconds}s: {e}")
        except GenerationError as e:
            logger.warning(f"Model generation failed for '{topic.title}': {e}")
            return None

        await self.sleep(self.cooldown_seconds)
        try:
            return await self._request(topic, model=self.fallback_model)
        except GenerationError as e:
            logger.warning(f"Retry after cool-down failed for '{topic.title}': {e}")
            return None

    def _fallback_payload(self, topic: TrendingTopic) -> Dict[str, Any]:
        return {
            "title": topic.title,
            "description": self.renderer.description(topic),
            "keywords": self.renderer.keywords(topic),
            "tags": self.renderer.tags(topic),
            "content": self.renderer.render(topic),
        }

    async def unique_slug(self, title: str) -> str:
        """
        Slug for title, suffixed with -1, -2, ... until unused.

        Raises:
            SlugCollisionError: no free slug within MAX_SLUG_PROBES
        """
        base = slugify(title)
        if not await self.store.slug_exists(base):
            return base

        for counter in range(1, MAX_SLUG_PROBES + 1):
            candidate = suffixed_slug(base, counter)
            if not await self.store.slug_exists(candidate):
                return candidate

        raise SlugCollisionError(f"No free slug for '{title}' after {MAX_SLUG_PROBES} attempts")

    async def generate(self, topic: TrendingTopic) -> GeneratedArticle:
        """
        Generate one article for topic.

        Model failures never escape; the fallback renderer takes over. Only
        store errors during slug resolution and SlugCollisionError propagate.
        """
        start_time = time.time()

        payload = await self._generate_with_model(topic)
        generated_by = "model"
        if payload is None:
            payload = self._fallback_payload(topic)
            generated_by = "fallback"

        title = str(payload["title"]).strip() or topic.title
        description = truncate_text(str(payload["description"]), 160)
        slug = await self.unique_slug(title)

        article = GeneratedArticle(
            title=title,
            slug=slug,
            excerpt=description,
            keywords=list(payload["keywords"]),
            tags=list(payload["tags"]),
            content=payload["content"],
            canonical_url=f"{self.site_url}/blog/{slug}",
            seo_title=truncate_text(title, 60),
            seo_description=description,
            source_topic=topic.title,
            generated_by=generated_by,
        )

        elapsed = time.time() - start_time
        logger.info(f"Generated '{article.title}' ({generated_by}, slug={slug}) in {elapsed:.2f}s")
        return article
