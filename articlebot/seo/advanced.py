"""
Multi-dimensional SEO analysis.

Five dimensions, each scored 0-100: technical, content quality, on-page,
user engagement and keyword competitiveness. The overall score blends the
first four as 0.2 / 0.3 / 0.3 / 0.2; competitiveness is reported alongside.
"""

import math
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional

from articlebot.core.utils import count_words, strip_html
from .basic import STOP_WORDS

H1_RE = re.compile(r"<h1\b", re.IGNORECASE)
H2_RE = re.compile(r"<h2\b", re.IGNORECASE)
H3_RE = re.compile(r"<h3\b", re.IGNORECASE)
IMG_RE = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
ALT_RE = re.compile(r"""\balt\s*=\s*['"][^'"]+['"]""", re.IGNORECASE)
LINK_RE = re.compile(r"""<a\b[^>]*href=["']([^"']+)["']""", re.IGNORECASE)
VIDEO_RE = re.compile(r"<video\b|<iframe[^>]*(?:youtube|vimeo)", re.IGNORECASE)
INTERACTIVE_RE = re.compile(r"<pre\b|<code\b|<ul\b|<ol\b|<table\b", re.IGNORECASE)
SENTENCE_RE = re.compile(r"[.!?]+")
VOWEL_GROUP_RE = re.compile(r"[aeiouy]+")

OVERALL_WEIGHTS = {
    "technical": 0.2,
    "content_quality": 0.3,
    "on_page": 0.3,
    "engagement": 0.2,
}

DIFFICULTY_SCORES = {"easy": 80, "medium": 60, "hard": 40}


@dataclass
class DimensionScore:
    """Score for one dimension with the issues that lowered it."""
    score: int
    issues: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


@dataclass
class ContentQuality(DimensionScore):
    readability: int = 0
    keyword_density: float = 0.0


@dataclass
class Engagement(DimensionScore):
    time_on_page: int = 0
    multimedia_elements: int = 0
    interactive_elements: int = 0


@dataclass
class Competitiveness(DimensionScore):
    difficulty: str = "medium"
    ranking_time: str = "3-6 months"
    target_keywords: List[str] = field(default_factory=list)


def _clamp(value: float) -> int:
    return int(max(0, min(100, round(value))))


def estimate_syllables(word: str) -> int:
    """Vowel-group syllable estimate with a silent trailing 'e'."""
    word = word.lower()
    groups = len(VOWEL_GROUP_RE.findall(word))
    if word.endswith("e") and not word.endswith(("le", "ee")) and groups > 1:
        groups -= 1
    return max(1, groups)


def flesch_reading_ease(text: str) -> float:
    """Flesch reading ease of plain text, clamped to 0-100."""
    words = re.findall(r"[A-Za-z]+", text)
    if not words:
        return 0.0
    sentences = [s for s in SENTENCE_RE.split(text) if s.strip()] or [text]
    syllables = sum(estimate_syllables(w) for w in words)
    score = 206.835 - 1.015 * (len(words) / len(sentences)) - 84.6 * (syllables / len(words))
    return max(0.0, min(100.0, score))


def keyword_density(text: str, keyword: str) -> float:
    """Occurrences of keyword per 100 words of text."""
    words = len(text.split())
    if not words or not keyword:
        return 0.0
    occurrences = len(re.findall(re.escape(keyword.lower()), text.lower()))
    return occurrences / words * 100


def analyze_technical(title: str, content: str, description: str) -> DimensionScore:
    score = 100
    issues: List[str] = []
    recommendations: List[str] = []

    if not 30 <= len(title) <= 60:
        issues.append("Title length not optimal (should be 30-60 characters)")
        score -= 10
    if not description or not 120 <= len(description) <= 160:
        issues.append("Meta description not optimal (should be 120-160 characters)")
        score -= 10

    words = count_words(content)
    if words < 1500:
        issues.append(f"Content too short ({words} words, recommended: 1500+)")
        recommendations.append("Add more comprehensive content to compete for top rankings")
        score -= 15

    h1_count = len(H1_RE.findall(content))
    if h1_count == 0:
        issues.append("Missing H1 heading")
        score -= 10
    elif h1_count > 1:
        issues.append("Multiple H1 headings (should have only one)")
        score -= 5

    if len(H2_RE.findall(content)) < 3:
        issues.append("Not enough H2 headings (recommended: 3+)")
        recommendations.append("Add more H2 headings to improve content structure")
        score -= 5

    images = IMG_RE.findall(content)
    missing_alt = sum(1 for img in images if not ALT_RE.search(img))
    if missing_alt:
        issues.append(f"{missing_alt} images missing alt text")
        score -= 10
    if len(images) < 2:
        recommendations.append("Add more images to improve engagement (recommended: 2+)")
        score -= 5

    return DimensionScore(score=_clamp(score), issues=issues, recommendations=recommendations)


def analyze_content_quality(content: str, target_keyword: Optional[str] = None) -> ContentQuality:
    text = strip_html(content)
    words = len(text.split())
    readability = flesch_reading_ease(text)
    score = 100
    issues: List[str] = []
    recommendations: List[str] = []

    density = 0.0
    if target_keyword:
        density = keyword_density(text, target_keyword)
        if density < 0.5:
            issues.append("Keyword density too low (target: 1-2%)")
            recommendations.append(f"Mention '{target_keyword}' naturally a few more times")
            score -= 15
        elif density > 3:
            issues.append("Keyword density too high - risk of keyword stuffing")
            score -= 20

    if words < 1500:
        issues.append("Content not comprehensive enough for top rankings")
        score -= 20
    elif words < 2500:
        score -= 10

    if readability < 50:
        issues.append("Content may be too complex for average readers")
        recommendations.append("Use shorter sentences and simpler words")
        score -= 10

    return ContentQuality(
        score=_clamp(score),
        issues=issues,
        recommendations=recommendations,
        readability=round(readability),
        keyword_density=round(density, 2),
    )


def analyze_on_page(title: str, content: str, description: str,
                    target_keyword: Optional[str] = None) -> DimensionScore:
    issues: List[str] = []
    keyword = (target_keyword or "").lower()

    title_score = 100
    if keyword and keyword not in title.lower():
        title_score -= 30
        issues.append("Target keyword missing from title")
    if not 30 <= len(title) <= 60:
        title_score -= 20
    if not re.search(r"\d", title):
        title_score -= 10

    if not description:
        description_score = 0
        issues.append("Missing meta description")
    else:
        description_score = 100
        if keyword and keyword not in description.lower():
            description_score -= 30
            issues.append("Target keyword missing from meta description")
        if not 120 <= len(description) <= 160:
            description_score -= 20
        if not re.search(r"[!?]", description):
            description_score -= 10

    heading_score = 100
    if len(H2_RE.findall(content)) < 3:
        heading_score -= 30
    if len(H3_RE.findall(content)) < 2:
        heading_score -= 20

    hrefs = LINK_RE.findall(content)
    internal = sum(1 for href in hrefs if href.startswith("/"))
    external = len(hrefs) - internal

    score = (
        max(0, title_score) * 0.3
        + max(0, description_score) * 0.25
        + max(0, heading_score) * 0.25
        + min(100, internal * 20) * 0.1
        + min(100, external * 25) * 0.1
    )
    recommendations = []
    if internal == 0:
        recommendations.append("Link to related articles on the site")
    if external == 0:
        recommendations.append("Cite authoritative external sources")
    return DimensionScore(score=_clamp(score), issues=issues, recommendations=recommendations)


def analyze_engagement(content: str) -> Engagement:
    time_on_page = math.ceil(count_words(content) / 200)
    multimedia = len(IMG_RE.findall(content)) + len(VIDEO_RE.findall(content))
    interactive = len(INTERACTIVE_RE.findall(content))

    score = 50
    if multimedia >= 3:
        score += 20
    elif multimedia >= 1:
        score += 10
    if interactive >= 3:
        score += 20
    elif interactive >= 1:
        score += 10
    if time_on_page >= 5:
        score += 10

    recommendations = []
    if multimedia < 3:
        recommendations.append("Add images or embedded video to hold attention")
    if interactive < 3:
        recommendations.append("Use code blocks, lists or tables to break up the text")

    return Engagement(
        score=_clamp(score),
        recommendations=recommendations,
        time_on_page=time_on_page,
        multimedia_elements=multimedia,
        interactive_elements=interactive,
    )


def analyze_competitiveness(content: str, target_keyword: Optional[str] = None) -> Competitiveness:
    difficulty, ranking_time = "medium", "3-6 months"
    keywords: List[str] = []

    if target_keyword:
        keywords.append(target_keyword)
        word_count = len(target_keyword.split())
        if word_count >= 4:
            difficulty, ranking_time = "easy", "1-3 months"
        elif word_count == 3:
            difficulty, ranking_time = "medium", "3-6 months"
        else:
            difficulty, ranking_time = "hard", "6-12 months"

    words = re.findall(r"\b[a-z]{4,}\b", strip_html(content).lower())
    counts = Counter(w for w in words if w not in STOP_WORDS)
    for word, _ in counts.most_common(5):
        if word not in keywords:
            keywords.append(word)

    recommendations = []
    if difficulty == "hard":
        recommendations.append("Target a longer-tail keyword phrase for faster ranking")

    return Competitiveness(
        score=DIFFICULTY_SCORES[difficulty],
        recommendations=recommendations,
        difficulty=difficulty,
        ranking_time=ranking_time,
        target_keywords=keywords,
    )


def blend_overall(technical: int, content_quality: int, on_page: int, engagement: int) -> int:
    return int(round(
        technical * OVERALL_WEIGHTS["technical"]
        + content_quality * OVERALL_WEIGHTS["content_quality"]
        + on_page * OVERALL_WEIGHTS["on_page"]
        + engagement * OVERALL_WEIGHTS["engagement"]
    ))
