"""Tests for basic and advanced SEO scoring."""

import pytest

from articlebot.seo.advanced import (
    analyze_competitiveness,
    analyze_content_quality,
    analyze_engagement,
    analyze_on_page,
    analyze_technical,
    blend_overall,
    estimate_syllables,
    flesch_reading_ease,
)
from articlebot.seo.analyzer import SEOAnalyzer
from articlebot.seo.basic import collect_metrics, extract_keywords, score_basic

from .conftest import make_content

GOOD_TITLE = "Rust in 2025: 7 Patterns for Fast, Safe Services"  # 48 chars
GOOD_DESCRIPTION = (
    "Learn seven proven Rust patterns for building fast, memory-safe backend services, "
    "with code samples, benchmarks and tooling tips. Ready to ship?"
)


class TestBasicScore:

    def test_metrics(self):
        content = make_content(words=600, h2=3, external_links=2, internal_links=3)
        content += '<img src="/a.png" alt="a">'
        metrics = collect_metrics(content)

        assert metrics.headings == 1 + 3 * 2
        assert metrics.internal_links == 3
        assert metrics.external_links == 2
        assert metrics.images == 1
        assert metrics.reading_time == 4

    def test_tiers(self):
        content = make_content(words=1600, h2=5, external_links=2, internal_links=3)
        result = score_basic(GOOD_TITLE, content, GOOD_DESCRIPTION)

        # title 15 + description 15 + words 20 + headings 15 + internal 10 + external 10 + images 0
        expected_without_keywords = 15 + 15 + 20 + 15 + 10 + 10 + 0
        assert result.score - expected_without_keywords in (0, 3, 5)
        assert "Include at least 3 images with descriptive alt text" in result.recommendations

    def test_weak_article(self):
        result = score_basic("Hi", "<p>short text</p>", "")
        assert result.score == 5 + 0 + 5
        assert len(result.recommendations) >= 6

    def test_score_never_drops_as_word_count_grows(self):
        images = '<img src="/1.png" alt="1"><img src="/2.png" alt="2"><img src="/3.png" alt="3">'
        previous = 0
        for words in range(0, 2001, 50):
            content = make_content(words=words, h2=5, external_links=2, internal_links=3) + images
            score = score_basic(GOOD_TITLE, content, GOOD_DESCRIPTION).score
            assert score >= previous, f"score dropped at {words} words"
            previous = score

    def test_score_capped_at_100(self):
        content = make_content(words=2000, h2=6, external_links=3, internal_links=3)
        content += '<img src="/1.png" alt="1"><img src="/2.png" alt="2"><img src="/3.png" alt="3">'
        assert score_basic(GOOD_TITLE, content, GOOD_DESCRIPTION).score <= 100

    def test_extract_keywords_skips_stop_words(self):
        keywords = extract_keywords("<p>rust rust rust async async the the the and</p>")
        assert keywords == ["rust", "async"]


class TestAdvancedDimensions:

    def test_technical_perfect(self):
        content = make_content(words=1600, h2=4)
        content += '<img src="/1.png" alt="one"><img src="/2.png" alt="two">'
        result = analyze_technical(GOOD_TITLE, content, GOOD_DESCRIPTION)
        assert result.score == 100
        assert result.issues == []

    def test_technical_deductions(self):
        content = "<h1>a</h1><h1>b</h1><img src='/x.png'>" + "<p>word</p>" * 10
        result = analyze_technical("Short", content, "")
        # title 10, description 10, length 15, multiple h1 5, h2 5, missing alt 10, image count 5
        assert result.score == 100 - 60
        assert "1 images missing alt text" in result.issues
        assert "Add more images to improve engagement (recommended: 2+)" in result.recommendations

    def test_content_quality_keyword_density(self):
        stuffed = "<p>" + "rust " * 50 + "</p>"
        result = analyze_content_quality(stuffed, "rust")
        assert result.keyword_density == 100.0
        assert "Keyword density too high - risk of keyword stuffing" in result.issues

    def test_content_quality_depth_tiers(self):
        assert analyze_content_quality(make_content(words=2600)).score in (100, 90)
        assert analyze_content_quality(make_content(words=1600)).score in (90, 80)
        assert analyze_content_quality(make_content(words=100)).score in (80, 70)

    def test_on_page_weights(self):
        content = make_content(h2=3, external_links=4, internal_links=5)
        result = analyze_on_page(GOOD_TITLE, content, GOOD_DESCRIPTION, target_keyword="rust")
        assert result.score == 100

    def test_on_page_missing_keyword_and_description(self):
        content = make_content(h2=3, external_links=0, internal_links=0)
        result = analyze_on_page("No digits here but long enough title", content, "", target_keyword="rust")
        # title 100-30-10=60, description 0, headings 100, no links
        assert result.score == round(60 * 0.3 + 0 + 100 * 0.25)

    def test_engagement(self):
        assert analyze_engagement("<p>short</p>").score == 50
        content = make_content(words=1200) + '<img src="a"><img src="b"><iframe src="https://youtube.com/x"></iframe>'
        result = analyze_engagement(content)
        assert result.multimedia_elements == 3
        assert result.interactive_elements >= 3
        assert result.score == 100

    @pytest.mark.parametrize("keyword,difficulty,ranking_time,score", [
        ("how to learn rust fast", "easy", "1-3 months", 80),
        ("rust web framework", "medium", "3-6 months", 60),
        ("rust", "hard", "6-12 months", 40),
        (None, "medium", "3-6 months", 60),
    ])
    def test_competitiveness_buckets(self, keyword, difficulty, ranking_time, score):
        result = analyze_competitiveness(make_content(words=200), keyword)
        assert result.difficulty == difficulty
        assert result.ranking_time == ranking_time
        assert result.score == score
        if keyword:
            assert result.target_keywords[0] == keyword

    def test_blend_weights(self):
        assert blend_overall(100, 0, 0, 0) == 20
        assert blend_overall(0, 100, 0, 0) == 30
        assert blend_overall(0, 0, 100, 0) == 30
        assert blend_overall(0, 0, 0, 100) == 20
        assert blend_overall(80, 70, 60, 50) == round(16 + 21 + 18 + 10)


class TestReadability:

    def test_syllables(self):
        assert estimate_syllables("cat") == 1
        assert estimate_syllables("make") == 1
        assert estimate_syllables("developer") == 4
        assert estimate_syllables("table") == 2

    def test_simple_text_reads_easier(self):
        simple = "The cat sat. The dog ran. We had fun."
        dense = ("Comprehensive infrastructural modernization necessitates extraordinarily "
                 "sophisticated organizational capabilities.")
        assert flesch_reading_ease(simple) > flesch_reading_ease(dense)
        assert 0 <= flesch_reading_ease(dense) <= 100

    def test_empty(self):
        assert flesch_reading_ease("") == 0.0


class TestSEOAnalyzer:

    def test_analyze_is_pure_and_complete(self):
        content = make_content(words=1600)
        analyzer = SEOAnalyzer()

        first = analyzer.analyze(GOOD_TITLE, content, GOOD_DESCRIPTION, target_keyword="rust patterns")
        second = analyzer.analyze(GOOD_TITLE, content, GOOD_DESCRIPTION, target_keyword="rust patterns")

        assert first == second
        assert 0 <= first.overall_score <= 100
        d = first.dimensions
        assert first.overall_score == blend_overall(d.technical, d.content_quality, d.on_page, d.engagement)
        assert first.difficulty == "hard"
        assert first.word_count >= 1600
        assert "analysis" not in first.to_metadata()
        assert first.to_metadata()["overall_score"] == first.overall_score

    def test_empty_article(self):
        result = SEOAnalyzer().analyze("", "", "")
        assert 0 <= result.overall_score <= 100
        assert "Missing H1 heading" in result.issues
