"""Tests for model output parsing, the fallback renderer and the content generator."""

import json

import pytest
from unittest.mock import AsyncMock

from articlebot.core.errors import GenerationError, RateLimitedError, SlugCollisionError
from articlebot.core.schemas import NewPost, TrendingTopic
from articlebot.writer.generator import ContentGenerator
from articlebot.writer.parsing import extract_json_object, parse_article_json
from articlebot.writer.template_renderer import FallbackRenderer

from .conftest import FakeProvider, make_article_json


class TestParseArticleJson:

    def test_plain_json(self):
        result = parse_article_json(make_article_json())
        assert result.ok
        assert result.data["title"].startswith("Rust Programming")

    def test_fenced_json(self):
        result = parse_article_json(f"```json\n{make_article_json()}\n```")
        assert result.ok

    def test_prose_wrapped_json(self):
        raw = f"Sure! Here is your article:\n{make_article_json()}\nLet me know if you need changes."
        result = parse_article_json(raw)
        assert result.ok
        assert result.data["tags"] == ["rust", "programming"]

    def test_raw_control_characters_in_strings(self):
        raw = 'Output: {"title": "T", "slug": "t", "description": "D", "keywords": ["k"], ' \
              '"tags": ["x"], "content": "<p>line one\nline two\ttabbed</p>"}'
        result = parse_article_json(raw)
        assert result.ok
        assert "line two" in result.data["content"]

    def test_braces_inside_strings(self):
        block = extract_json_object('x {"content": "<style>.a{color:red}</style>", "n": 1} trailing }')
        assert json.loads(block)["n"] == 1

    def test_missing_required_field(self):
        payload = json.loads(make_article_json())
        del payload["tags"]
        result = parse_article_json(json.dumps(payload))
        assert not result.ok
        assert "tags" in result.error

    def test_empty_field_counts_as_missing(self):
        result = parse_article_json(make_article_json(content="   "))
        assert not result.ok
        assert "content" in result.error

    def test_comma_separated_keywords_normalised(self):
        result = parse_article_json(make_article_json(keywords="rust, safety ,speed"))
        assert result.ok
        assert result.data["keywords"] == ["rust", "safety", "speed"]

    @pytest.mark.parametrize("raw", ["", "   ", "no json here", "[1, 2, 3]", "{broken"])
    def test_failures_do_not_raise(self, raw):
        assert not parse_article_json(raw).ok


class TestFallbackRenderer:

    def test_news_variant(self, rust_topic):
        renderer = FallbackRenderer()
        html = renderer.render(rust_topic)

        assert html.startswith("<style>")
        assert html.count("<h1>") == 1
        assert html.count("<h2") >= 5
        assert "Frequently Asked Questions" in html
        assert renderer.tags(rust_topic) == ["technology", "news", "innovation", "trends"]

    def test_repository_variant(self, repo_topic):
        renderer = FallbackRenderer()
        html = renderer.render(repo_topic)

        assert "fastest-rising open-source projects on GitHub" in html
        assert 'href="https://github.com/acme/fastkv"' in html
        assert renderer.tags(repo_topic) == ["open-source", "github", "programming", "development"]

    def test_escapes_topic_text(self, rust_topic):
        topic = rust_topic.copy(update={"title": "Rust <script>alert(1)</script> tips"})
        html = FallbackRenderer().render(topic)
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_description_and_keywords(self, rust_topic):
        renderer = FallbackRenderer()
        assert 0 < len(renderer.description(rust_topic)) <= 155
        keywords = renderer.keywords(rust_topic)
        assert keywords[:3] == ["rust", "programming", "building"]
        assert len(keywords) <= 15
        assert len(keywords) == len(set(keywords))


class TestContentGenerator:

    def make_generator(self, store, provider, sleep_recorder):
        return ContentGenerator(
            provider,
            store,
            site_url="https://example.com/",
            fallback_model="gpt-4o",
            cooldown_seconds=30.0,
            sleep=sleep_recorder,
        )

    @pytest.mark.asyncio
    async def test_model_article(self, store, rust_topic, sleep_recorder):
        provider = FakeProvider([make_article_json()])
        article = await self.make_generator(store, provider, sleep_recorder).generate(rust_topic)

        assert article.generated_by == "model"
        assert article.slug == "rust-programming-building-fast-services-in-2025"
        assert article.canonical_url == f"https://example.com/blog/{article.slug}"
        assert article.keywords[0] == "rust"
        assert article.source_topic == rust_topic.title
        assert sleep_recorder.calls == []
        assert "Rust Programming: Building High-Performance Applications" in provider.calls[0]["user_prompt"]

    @pytest.mark.asyncio
    async def test_rate_limit_cools_down_and_retries_on_fallback_model(self, store, rust_topic, sleep_recorder):
        provider = FakeProvider([RateLimitedError("429"), make_article_json()])
        article = await self.make_generator(store, provider, sleep_recorder).generate(rust_topic)

        assert article.generated_by == "model"
        assert sleep_recorder.calls == [30.0]
        assert [c["model"] for c in provider.calls] == [None, "gpt-4o"]

    @pytest.mark.asyncio
    async def test_second_rate_limit_uses_fallback_template(self, store, rust_topic, sleep_recorder):
        provider = FakeProvider([RateLimitedError("429"), RateLimitedError("429 again")])
        article = await self.make_generator(store, provider, sleep_recorder).generate(rust_topic)

        assert article.generated_by == "fallback"
        assert article.title == rust_topic.title
        assert len(provider.calls) == 2
        assert "<h1>" in article.content

    @pytest.mark.asyncio
    async def test_other_errors_skip_cooldown(self, store, rust_topic, sleep_recorder):
        provider = FakeProvider([GenerationError("HTTP 500")])
        article = await self.make_generator(store, provider, sleep_recorder).generate(rust_topic)

        assert article.generated_by == "fallback"
        assert sleep_recorder.calls == []
        assert len(provider.calls) == 1

    @pytest.mark.asyncio
    async def test_unparseable_output_uses_fallback(self, store, rust_topic, sleep_recorder):
        provider = FakeProvider(["I cannot produce JSON today."])
        article = await self.make_generator(store, provider, sleep_recorder).generate(rust_topic)

        assert article.generated_by == "fallback"

    @pytest.mark.asyncio
    async def test_without_provider_always_fallback(self, store, repo_topic, sleep_recorder):
        article = await self.make_generator(store, None, sleep_recorder).generate(repo_topic)

        assert article.generated_by == "fallback"
        assert article.tags == ["open-source", "github", "programming", "development"]

    @pytest.mark.asyncio
    async def test_slug_suffix_on_collision(self, store, rust_topic, sleep_recorder):
        base = "rust-programming-building-fast-services-in-2025"
        for slug in (base, f"{base}-1"):
            await store.create_post(NewPost(
                title=f"Existing {slug}", slug=slug, content="<p>x</p>", excerpt="x", author_id=1,
            ))

        article = await self.make_generator(store, FakeProvider(), sleep_recorder).generate(rust_topic)

        assert article.slug == f"{base}-2"

    @pytest.mark.asyncio
    async def test_slug_probe_limit(self, rust_topic, sleep_recorder):
        store = AsyncMock()
        store.slug_exists.return_value = True
        generator = self.make_generator(store, FakeProvider(), sleep_recorder)

        with pytest.raises(SlugCollisionError):
            await generator.unique_slug("Always taken")

    @pytest.mark.asyncio
    async def test_persistent_rate_limits_still_produce_an_article(self, store, sleep_recorder):
        topic = TrendingTopic(
            title="React 19 Server Components",
            description="Server Components change how React apps fetch data and render.",
            source="Curated",
            priority_score=1,
        )
        provider = FakeProvider([RateLimitedError("429")] * 3)

        article = await self.make_generator(store, provider, sleep_recorder).generate(topic)

        assert article.generated_by == "fallback"
        assert article.slug == "react-19-server-components"
        assert "<h1>" in article.content
        assert "<h2" in article.content
        assert sleep_recorder.calls == [30.0]
