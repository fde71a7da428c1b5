"""
Upstream topic feeds.

Each feed turns one external API into a list of unclassified TrendingTopic
candidates. Feeds share an injected httpx.AsyncClient and raise
DiscoveryError when the upstream cannot be read at all.
"""

import asyncio
import random
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

import httpx
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from articlebot.core.errors import DiscoveryError
from articlebot.core.logging import get_logger
from articlebot.core.schemas import TrendingTopic

logger = get_logger(__name__)

GITHUB_SEARCH_URL = "https://api.github.com/search/repositories"
NEWSAPI_EVERYTHING_URL = "https://newsapi.org/v2/everything"

GITHUB_SOURCE = "GitHub Trending"

DEFAULT_GITHUB_LANGUAGES = [
    "javascript", "typescript", "python", "react", "vue", "angular", "rust",
]

# Grouped three per priority tier, most important first
DEFAULT_NEWS_QUERIES = [
    "AI developer tools",
    "WebAssembly OR Wasm",
    "TypeScript OR JavaScript framework",
    "React OR Next.js OR Vue",
    "Python programming",
    "Rust programming language",
    "open source software release",
    "cloud native kubernetes",
    "cybersecurity vulnerability software",
    "tech startup funding",
    "technology industry innovation",
    "venture capital technology",
]


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


class TopicFeed(ABC):
    """A single source of candidate topics."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def fetch(self) -> List[TrendingTopic]:
        """Fetch candidates. Raises DiscoveryError on upstream failure."""
        pass


class GitHubTrendingFeed(TopicFeed):
    """Recently created, most-starred repositories in one random language."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        languages: Sequence[str] = DEFAULT_GITHUB_LANGUAGES,
        lookback_days: int = 7,
        per_page: int = 15,
        limit: int = 8,
        rng: Optional[random.Random] = None,
    ):
        self.client = client
        self.languages = list(languages)
        self.lookback_days = lookback_days
        self.per_page = per_page
        self.limit = limit
        self.rng = rng or random.Random()

    @property
    def name(self) -> str:
        return "github"

    async def fetch(self) -> List[TrendingTopic]:
        language = self.rng.choice(self.languages)
        since = (datetime.now(timezone.utc) - timedelta(days=self.lookback_days)).strftime("%Y-%m-%d")
        params = {
            "q": f"language:{language} created:>{since}",
            "sort": "stars",
            "order": "desc",
            "per_page": self.per_page,
        }
        headers = {"Accept": "application/vnd.github+json"}

        try:
            response = await self.client.get(GITHUB_SEARCH_URL, params=params, headers=headers)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise DiscoveryError(f"GitHub search failed for language={language}: {e}") from e

        topics = []
        for repo in payload.get("items", []):
            if not repo.get("description") or not repo.get("language"):
                continue
            topics.append(self._to_topic(repo))
            if len(topics) >= self.limit:
                break

        logger.info(f"GitHub feed returned {len(topics)} repositories for language={language}")
        return topics

    @staticmethod
    def _to_topic(repo: Dict[str, Any]) -> TrendingTopic:
        name = repo["name"]
        language = repo["language"]
        description = repo["description"].strip()
        return TrendingTopic(
            title=f"{name}: Open-Source {language} Project for {description[:50].strip()}",
            description=f"Exploring {name}, a trending {language} repository: {description}",
            url=repo.get("html_url"),
            keywords=[language.lower(), "open source", "github"],
            published_at=_parse_timestamp(repo.get("created_at")),
            source=GITHUB_SOURCE,
            priority_score=1,
        )


class NewsAPIFeed(TopicFeed):
    """NewsAPI 'everything' search over a prioritised list of queries."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        queries: Sequence[str] = DEFAULT_NEWS_QUERIES,
        page_size: int = 10,
        query_delay_seconds: float = 0.2,
        sleep=asyncio.sleep,
    ):
        self.client = client
        self.api_key = api_key
        self.queries = list(queries)
        self.page_size = page_size
        self.query_delay_seconds = query_delay_seconds
        self.sleep = sleep

    @property
    def name(self) -> str:
        return "newsapi"

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.5, max=4),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _search(self, query: str, since: str) -> Dict[str, Any]:
        response = await self.client.get(
            NEWSAPI_EVERYTHING_URL,
            params={
                "q": query,
                "language": "en",
                "pageSize": self.page_size,
                "sortBy": "publishedAt",
                "from": since,
            },
            headers={"X-Api-Key": self.api_key},
        )
        response.raise_for_status()
        return response.json()

    async def fetch(self) -> List[TrendingTopic]:
        since = (datetime.now(timezone.utc) - timedelta(days=1)).strftime("%Y-%m-%d")
        topics: List[TrendingTopic] = []
        failures = 0

        for index, query in enumerate(self.queries):
            if index:
                await self.sleep(self.query_delay_seconds)

            priority = min(3, index // 3 + 1)
            try:
                payload = await self._search(query, since)
            except (httpx.HTTPError, ValueError) as e:
                failures += 1
                logger.warning(f"NewsAPI query '{query}' failed: {e}")
                continue

            for article in payload.get("articles", []):
                title = (article.get("title") or "").strip()
                description = (article.get("description") or "").strip()
                if not title or not description or title == "[Removed]":
                    continue
                topics.append(TrendingTopic(
                    title=title,
                    description=description,
                    url=article.get("url"),
                    published_at=_parse_timestamp(article.get("publishedAt")),
                    source=(article.get("source") or {}).get("name") or "NewsAPI",
                    priority_score=priority,
                ))

        if self.queries and failures == len(self.queries):
            raise DiscoveryError("All NewsAPI queries failed")

        logger.info(f"NewsAPI feed returned {len(topics)} articles from {len(self.queries)} queries")
        return topics
