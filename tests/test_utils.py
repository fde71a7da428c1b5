"""Tests for core text utilities and settings."""

import pytest

from articlebot.core.settings import Settings
from articlebot.core.utils import (
    count_words,
    reading_time_minutes,
    slugify,
    stable_hash,
    strip_html,
    suffixed_slug,
    truncate_text,
)


class TestSlugify:

    def test_basic_title(self):
        assert slugify("React 19 Server Components: A Deep Dive") == "react-19-server-components-a-deep-dive"

    def test_deterministic(self):
        title = "Next.js 15: App Router & Server Actions"
        assert slugify(title) == slugify(title)

    def test_strips_punctuation_and_collapses_hyphens(self):
        assert slugify("Hello --  World!!") == "hello-world"

    def test_removes_accents(self):
        assert slugify("Café Développeur") == "cafe-developpeur"

    def test_max_length_without_trailing_hyphen(self):
        slug = slugify("word " * 40)
        assert len(slug) <= 60
        assert not slug.endswith("-")

    def test_empty_title_falls_back(self):
        assert slugify("") == "post"
        assert slugify("!!!") == "post"


class TestSuffixedSlug:

    def test_appends_counter(self):
        assert suffixed_slug("my-post", 2) == "my-post-2"

    def test_respects_max_length(self):
        base = "a" * 60
        slug = suffixed_slug(base, 12)
        assert len(slug) == 60
        assert slug.endswith("-12")


class TestStableHash:

    def test_matches_rolling_hash(self):
        assert stable_hash("a") == 97
        assert stable_hash("ab") == 97 * 31 + 98
        assert stable_hash("hello") == 99162322

    def test_wraps_to_signed_32_bits(self):
        # Rolls over to the minimum signed 32-bit value
        assert stable_hash("polygenelubricants") == 2147483648

    def test_empty(self):
        assert stable_hash("") == 0
        assert stable_hash(None) == 0


class TestTextHelpers:

    def test_strip_html_drops_style_blocks(self):
        html = "<style>.a{color:red}</style><h1>Title</h1><p>Body &amp; more</p>"
        assert strip_html(html) == "Title Body & more"

    def test_count_words_and_reading_time(self):
        html = "<p>" + "word " * 450 + "</p>"
        assert count_words(html) == 450
        assert reading_time_minutes(html) == 3

    def test_reading_time_minimum_one(self):
        assert reading_time_minutes("") == 1

    def test_truncate_text_at_word_boundary(self):
        text = "one two three four five six seven"
        result = truncate_text(text, 20)
        assert len(result) <= 20
        assert result.endswith("...")
        assert truncate_text("short", 20) == "short"


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.posts_per_run == 2
        assert settings.retry_attempts == 3
        assert settings.min_seo_score == 60
        assert settings.resolved_site_url == "https://techonigx.com"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("POSTS_PER_RUN", "5")
        monkeypatch.setenv("SITE_URL", "https://blog.example.org/")
        settings = Settings(_env_file=None)
        assert settings.posts_per_run == 5
        assert settings.resolved_site_url == "https://blog.example.org"
