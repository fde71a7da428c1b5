"""
Basic SEO metrics and 100-point score.

Counts structural features of the HTML (headings, links, images) and scores
title, description, length, structure and keyword coverage.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List

from articlebot.core.utils import count_words, reading_time_minutes, strip_html

HEADING_RE = re.compile(r"<h[1-6][^>]*>", re.IGNORECASE)
INTERNAL_LINK_RE = re.compile(r"""<a\s[^>]*href=['"]/""", re.IGNORECASE)
EXTERNAL_LINK_RE = re.compile(r"""<a\s[^>]*href=['"]https?://""", re.IGNORECASE)
IMAGE_RE = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
WORD_RE = re.compile(r"\b[a-z]{3,}\b")

STOP_WORDS = {
    "the", "and", "for", "are", "but", "not", "you", "all", "can", "her", "was",
    "one", "our", "out", "day", "get", "has", "him", "his", "how", "man", "new",
    "now", "old", "see", "two", "way", "who", "boy", "did", "its", "let", "put",
    "say", "she", "too", "use", "that", "with", "have", "this", "will", "your",
    "from", "they", "know", "want", "been", "good", "much", "some", "time",
    "very", "when", "come", "here", "just", "like", "long", "make", "many",
    "over", "such", "take", "than", "them", "well", "were", "what", "which",
    "while", "also", "into", "more", "most", "only", "other", "their", "there",
    "these", "those", "about", "after", "where", "would", "could", "should",
    "each", "then", "does", "using", "used",
}


@dataclass
class BasicMetrics:
    """Structural counts for one article."""
    word_count: int
    reading_time: int
    headings: int
    internal_links: int
    external_links: int
    images: int
    keywords: List[str] = field(default_factory=list)


@dataclass
class BasicScore:
    score: int
    metrics: BasicMetrics
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "word_count": self.metrics.word_count,
            "reading_time": self.metrics.reading_time,
            "headings": self.metrics.headings,
            "internal_links": self.metrics.internal_links,
            "external_links": self.metrics.external_links,
            "images": self.metrics.images,
            "keywords": self.metrics.keywords,
            "recommendations": self.recommendations,
        }


def extract_keywords(content: str, limit: int = 10) -> List[str]:
    """Most frequent non-stop-words of three or more letters."""
    words = WORD_RE.findall(strip_html(content).lower())
    counts = Counter(w for w in words if w not in STOP_WORDS)
    return [word for word, _ in counts.most_common(limit)]


def collect_metrics(content: str) -> BasicMetrics:
    return BasicMetrics(
        word_count=count_words(content),
        reading_time=reading_time_minutes(content),
        headings=len(HEADING_RE.findall(content)),
        internal_links=len(INTERNAL_LINK_RE.findall(content)),
        external_links=len(EXTERNAL_LINK_RE.findall(content)),
        images=len(IMAGE_RE.findall(content)),
        keywords=extract_keywords(content),
    )


def _tiered(value: int, tiers) -> int:
    for threshold, points in tiers:
        if value >= threshold:
            return points
    return 0


def score_basic(title: str, content: str, description: str) -> BasicScore:
    """
    Score an article out of 100.

    title 15, description 15, length 20, headings 15, internal links 10,
    external links 10, images 10, keywords 5.
    """
    metrics = collect_metrics(content)
    title_len = len(title or "")
    desc_len = len(description or "")
    recommendations: List[str] = []
    score = 0

    if 30 <= title_len <= 60:
        score += 15
    elif 20 <= title_len <= 70:
        score += 10
    else:
        score += 5
    if not 30 <= title_len <= 60:
        recommendations.append("Keep the title between 30 and 60 characters")

    if 120 <= desc_len <= 160:
        score += 15
    elif 100 <= desc_len <= 180:
        score += 10
    elif desc_len > 0:
        score += 5
    if not 120 <= desc_len <= 160:
        recommendations.append("Write a meta description between 120 and 160 characters")

    score += _tiered(metrics.word_count, [(1500, 20), (1000, 15), (500, 10), (0, 5)])
    if metrics.word_count < 1500:
        recommendations.append("Expand the article to at least 1500 words")

    score += _tiered(metrics.headings, [(5, 15), (3, 10), (1, 5)])
    if metrics.headings < 5:
        recommendations.append("Add more headings to structure the content (5 or more)")

    score += _tiered(metrics.internal_links, [(3, 10), (1, 5)])
    if metrics.internal_links < 3:
        recommendations.append("Add internal links to related articles (3 or more)")

    score += _tiered(metrics.external_links, [(2, 10), (1, 5)])
    if metrics.external_links < 2:
        recommendations.append("Cite at least 2 authoritative external sources")

    score += _tiered(metrics.images, [(3, 10), (1, 5)])
    if metrics.images < 3:
        recommendations.append("Include at least 3 images with descriptive alt text")

    score += _tiered(len(metrics.keywords), [(8, 5), (5, 3)])
    if len(metrics.keywords) < 8:
        recommendations.append("Broaden keyword coverage across the article")

    return BasicScore(score=min(100, score), metrics=metrics, recommendations=recommendations)
