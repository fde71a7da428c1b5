"""SEO scoring for articlebot."""

from .analyzer import SEOAnalyzer, SEOAnalysisResult
from .basic import score_basic, extract_keywords
