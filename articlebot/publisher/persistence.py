"""
Turn a generated article into a stored post.

Resolves the author (once per persister), category and tags, computes
reading time and writes the post through the PostStore. Transient store
outages are retried; duplicates are not.
"""

from typing import Dict, List, Optional

from articlebot.core.errors import StoreUnavailableError
from articlebot.core.logging import get_logger
from articlebot.core.retry import RetryPolicy
from articlebot.core.schemas import GeneratedArticle, NewPost, PostStatus, PublishedPost
from articlebot.core.store import PostStore
from articlebot.core.utils import reading_time_minutes, strip_html
from articlebot.seo.analyzer import SEOAnalysisResult
from articlebot.topics.classifier import term_pattern

logger = get_logger(__name__)

DEFAULT_CATEGORY = "innovation-insights"

# Checked in order against the title first, then the body text
CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "web-development": [
        "react", "javascript", "typescript", "next.js", "vue", "angular",
        "web development", "frontend", "backend", "full-stack", "node.js",
        "html", "css", "jamstack", "pwa", "webassembly",
    ],
    "artificial-intelligence": [
        "ai", "artificial intelligence", "machine learning", "neural network",
        "deep learning", "chatgpt", "openai", "gpt", "ai dev tools", "ai integration",
        "computer vision", "natural language processing",
    ],
    "software-engineering": [
        "software engineering", "software development", "programming", "coding",
        "software architecture", "engineering practices", "code quality", "software design",
    ],
    "emerging-technologies": [
        "blockchain", "cryptocurrency", "iot", "internet of things", "augmented reality",
        "virtual reality", "quantum computing", "5g", "edge computing", "robotics",
    ],
    "digital-transformation": [
        "digital transformation", "digitalization", "industry 4.0",
        "business transformation", "digital strategy", "automation",
    ],
    "startup-ecosystem": [
        "startup", "entrepreneurship", "venture capital", "funding", "unicorn",
        "incubator", "accelerator", "seed funding",
    ],
    "business-strategy": [
        "business strategy", "market strategy", "competitive analysis", "business model",
        "strategic planning", "business intelligence",
    ],
    "industry-updates": [
        "industry news", "market news", "business news", "industry trends",
    ],
    "breaking-news": ["breaking news", "announcement", "current events"],
    "research-analysis": [
        "research", "data analysis", "market research", "trend analysis",
        "forecasting", "predictive analytics",
    ],
    "case-studies": ["case study", "success story", "use case", "real-world"],
    "sustainability": [
        "sustainability", "green technology", "carbon neutral", "renewable energy",
        "climate change", "clean energy",
    ],
    "global-impact": ["global impact", "social impact", "globalization", "worldwide"],
    "tools-resources": ["developer tools", "development tools", "productivity", "software tools"],
    "tutorials-guides": ["tutorial", "guide", "how-to", "step-by-step", "walkthrough"],
    DEFAULT_CATEGORY: [
        "innovation", "breakthrough", "cutting-edge", "revolutionary", "next-generation",
    ],
}

_CATEGORY_PATTERNS = {
    slug: [term_pattern(k) for k in keywords] for slug, keywords in CATEGORY_KEYWORDS.items()
}


def determine_category(title: str, content: str) -> str:
    """Category slug for an article; title matches win over body matches."""
    for text in (title.lower(), strip_html(content).lower()):
        for slug, patterns in _CATEGORY_PATTERNS.items():
            if any(p.search(text) for p in patterns):
                return slug
    return DEFAULT_CATEGORY


def category_name(slug: str) -> str:
    return slug.replace("-", " ").title()


class ArticlePersister:
    """Persist GeneratedArticle records through a PostStore."""

    def __init__(
        self,
        store: PostStore,
        author_email: str,
        author_name: str,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.store = store
        self.author_email = author_email
        self.author_name = author_name
        self.retry_policy = retry_policy or RetryPolicy(
            max_attempts=3, delay_seconds=1.0, retry_on=(StoreUnavailableError,)
        )
        self._author_id: Optional[int] = None

    async def author_id(self) -> int:
        """Author id, upserted on first use and reused afterwards."""
        if self._author_id is None:
            self._author_id = await self.store.upsert_author(self.author_email, self.author_name)
            logger.info(f"Using author {self.author_email} (id={self._author_id})")
        return self._author_id

    async def _persist(self, article: GeneratedArticle, seo: Optional[SEOAnalysisResult]) -> PublishedPost:
        author_id = await self.author_id()

        category_slug = determine_category(article.title, article.content)
        category_id = await self.store.upsert_category(category_slug, category_name(category_slug))

        tag_ids = []
        for tag in article.tags:
            tag_id = await self.store.upsert_tag(tag)
            if tag_id not in tag_ids:
                tag_ids.append(tag_id)

        new_post = NewPost(
            title=article.title,
            slug=article.slug,
            content=article.content,
            excerpt=article.excerpt,
            status=PostStatus.PUBLISHED,
            author_id=author_id,
            category_ids=[category_id],
            tag_ids=tag_ids,
            reading_time=reading_time_minutes(article.content),
            cover_image=article.hero_image_url,
            seo_description=article.seo_description or article.excerpt,
            canonical_url=article.canonical_url,
            seo_score=seo.overall_score if seo else None,
            seo_metadata=self._metadata(article, seo),
            published_at=article.published_at,
        )
        return await self.store.create_post(new_post)

    @staticmethod
    def _metadata(article: GeneratedArticle, seo: Optional[SEOAnalysisResult]) -> Dict:
        metadata = {
            "keywords": article.keywords,
            "seo_title": article.seo_title,
            "hero_image_alt": article.hero_image_alt,
            "generated_by": article.generated_by,
            "source_topic": article.source_topic,
        }
        if seo is not None:
            metadata["analysis"] = seo.to_metadata()
        return metadata

    async def persist(self, article: GeneratedArticle, seo: Optional[SEOAnalysisResult] = None) -> PublishedPost:
        """
        Store article as a published post.

        Raises:
            DuplicatePostError: title or slug taken, not retried
            StoreUnavailableError: store still unreachable after retries
        """
        post = await self.retry_policy.call(self._persist, article, seo)
        logger.info(f"Published post id={post.id} '{post.title}'")
        return post
