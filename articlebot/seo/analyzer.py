"""SEO analyzer facade: one pure call producing the full analysis record."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from articlebot.core.logging import get_logger
from .advanced import (
    analyze_competitiveness,
    analyze_content_quality,
    analyze_engagement,
    analyze_on_page,
    analyze_technical,
    blend_overall,
)
from .basic import score_basic

logger = get_logger(__name__)


class DimensionScores(BaseModel):
    technical: int
    content_quality: int
    on_page: int
    engagement: int
    competitiveness: int


class SEOAnalysisResult(BaseModel):
    """Derived SEO record attached to a post as metadata."""
    overall_score: int = Field(..., ge=0, le=100)
    dimensions: DimensionScores
    basic_score: int = Field(..., ge=0, le=100)
    issues: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    word_count: int = 0
    reading_time: int = 1
    keywords: List[str] = Field(default_factory=list)
    readability: int = 0
    keyword_density: float = 0.0
    difficulty: str = "medium"
    ranking_time: str = "3-6 months"

    def to_metadata(self) -> Dict[str, Any]:
        return self.dict()


def _unique(items: List[str]) -> List[str]:
    seen = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


class SEOAnalyzer:
    """Score articles; no I/O and no side effects."""

    def analyze(
        self,
        title: str,
        content: str,
        description: str,
        target_keyword: Optional[str] = None,
    ) -> SEOAnalysisResult:
        """
        Analyze an article.

        Args:
            title: Article title
            content: Article HTML
            description: Meta description
            target_keyword: Primary keyword, enables density and difficulty checks

        Returns:
            SEOAnalysisResult with overall and per-dimension scores
        """
        title = title or ""
        content = content or ""
        description = description or ""

        basic = score_basic(title, content, description)
        technical = analyze_technical(title, content, description)
        quality = analyze_content_quality(content, target_keyword)
        on_page = analyze_on_page(title, content, description, target_keyword)
        engagement = analyze_engagement(content)
        competitiveness = analyze_competitiveness(content, target_keyword)

        dimensions = [technical, quality, on_page, engagement, competitiveness]
        overall = blend_overall(technical.score, quality.score, on_page.score, engagement.score)

        result = SEOAnalysisResult(
            overall_score=overall,
            dimensions=DimensionScores(
                technical=technical.score,
                content_quality=quality.score,
                on_page=on_page.score,
                engagement=engagement.score,
                competitiveness=competitiveness.score,
            ),
            basic_score=basic.score,
            issues=_unique([issue for d in dimensions for issue in d.issues]),
            recommendations=_unique(
                [r for d in dimensions for r in d.recommendations] + basic.recommendations
            ),
            word_count=basic.metrics.word_count,
            reading_time=basic.metrics.reading_time,
            keywords=basic.metrics.keywords,
            readability=quality.readability,
            keyword_density=quality.keyword_density,
            difficulty=competitiveness.difficulty,
            ranking_time=competitiveness.ranking_time,
        )
        logger.debug(f"SEO analysis for '{title}': overall={overall} basic={basic.score}")
        return result
