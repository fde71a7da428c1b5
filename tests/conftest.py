"""Shared fixtures for articlebot tests."""

import json
from typing import List, Optional, Union

import pytest

from articlebot.core.schemas import TrendingTopic
from articlebot.core.settings import Settings
from articlebot.core.store import InMemoryPostStore
from articlebot.writer.llm_provider import LLMProvider


def make_content(words: int = 1600, h2: int = 5, external_links: int = 2, internal_links: int = 1) -> str:
    """Article HTML with a controllable shape."""
    sentence = "Developers ship reliable software with clear tools and simple habits. "
    body_words = " ".join((sentence * (words // 10 + 1)).split()[:words])
    parts = ["<h1>Main Title</h1>"]
    for i in range(h2):
        parts.append(f'<h2 id="s{i}">Section {i}</h2><h3>Detail {i}</h3>')
    parts.append(f"<p>{body_words}</p>")
    for i in range(external_links):
        parts.append(f'<a href="https://example{i}.org/ref">source {i}</a>')
    for i in range(internal_links):
        parts.append(f'<a href="/blog/related-{i}">related {i}</a>')
    parts.append("<ul><li>one</li></ul><pre><code>x = 1</code></pre><table><tr><td>a</td></tr></table>")
    return "\n".join(parts)


def make_article_json(title: str = "Rust Programming: Building Fast Services in 2025", **overrides) -> str:
    payload = {
        "title": title,
        "slug": "ignored-by-generator",
        "description": "Learn how Rust helps teams build fast, safe services. A practical guide with patterns, tooling and examples. Ready to start?",
        "keywords": ["rust", "programming", "performance", "memory safety", "services"],
        "tags": ["rust", "programming"],
        "content": make_content(),
    }
    payload.update(overrides)
    return json.dumps(payload)


class FakeProvider(LLMProvider):
    """Scripted provider: each call pops the next response or raises it."""

    def __init__(self, responses: Optional[List[Union[str, Exception]]] = None):
        self.responses = list(responses or [])
        self.calls = []

    @property
    def provider_name(self) -> str:
        return "Fake"

    async def health_check(self):
        return {"status": "healthy", "provider": self.provider_name}

    async def complete(self, system_prompt, user_prompt, model=None):
        self.calls.append({"model": model, "user_prompt": user_prompt})
        response = self.responses.pop(0) if self.responses else make_article_json()
        if isinstance(response, Exception):
            raise response
        return response


class SleepRecorder:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        openai_api_key="sk-test",
        newsapi_key="",
        pexels_api_key="",
        stability_api_key="",
        site_url="https://example.com",
        retry_attempts=3,
        retry_delay_seconds=0.0,
        inter_slot_delay_seconds=1.0,
        rate_limit_cooldown_seconds=30.0,
        min_seo_score=60,
        cron_secret="",
        db_url="sqlite+aiosqlite:///:memory:",
        environment="test",
    )


@pytest.fixture
def store():
    return InMemoryPostStore()


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def rust_topic():
    return TrendingTopic(
        title="Rust Programming: Building High-Performance Applications",
        description="Memory safety without garbage collection for fast services.",
        keywords=["rust", "performance"],
        source="Curated",
        priority_score=1,
    )


@pytest.fixture
def repo_topic():
    return TrendingTopic(
        title="fastkv: Open-Source Rust Project for A tiny embedded key value store",
        description="Exploring fastkv, a trending Rust repository: A tiny embedded key value store",
        url="https://github.com/acme/fastkv",
        source="GitHub Trending",
        priority_score=1,
    )
