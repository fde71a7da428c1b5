"""
Topic classification by curated keyword lists.

Each candidate is matched against lower-cased title + description:
block-list first (reject), then high-priority (1), general technical (2),
acceptable broader technology (3). Anything else is dropped.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from articlebot.core.logging import get_logger

logger = get_logger(__name__)


HIGH_PRIORITY_TERMS = [
    "AI Dev Tools", "PWAs", "WebAssembly", "Jamstack", "API-first",
    "Utility-First CSS", "Animated UIs", "Python", "JavaScript", "TypeScript",
    "React", "Next.js", "Vue", "Angular", "Node.js", "Django", "Flask",
    ".NET Core", "Swift", "Kotlin", "Flutter", "Dart", "Kotlin Multiplatform",
    "Tauri", "Rust", "Uno Platform", "C#", "Wasm", "AI integration",
    "serverless", "headless CMS", "IoT", "predictive analytics",
]

TECH_TERMS = [
    "programming", "coding", "developer", "software development", "github",
    "open source", "framework", "library", "docker", "kubernetes", "devops",
    "api", "database", "cloud computing", "microservices", "machine learning",
    "artificial intelligence", "cybersecurity", "blockchain", "web development",
    "mobile development", "frontend", "backend", "full stack", "algorithm",
]

BROADER_TERMS = [
    "tech investment", "technology funding", "startup funding", "tech acquisition",
    "technology policy", "digital transformation", "innovation", "tech industry",
    "ai companies", "tech ipo", "venture capital", "tech market",
]

BLOCKED_TERMS = [
    "dollar tree", "shopping mall", "retail store", "concert ticket", "music festival",
    "oasis band", "metlife stadium", "entertainment venue", "celebrity news",
    "sports game", "football", "basketball", "healthcare policy", "medical treatment",
    "education reform", "school system", "travel tourism", "hotel booking",
    "restaurant review", "food delivery", "cooking recipe", "fashion trend",
    "beauty product", "lifestyle blog", "real estate market", "housing price",
    "automotive review", "car dealership",
]

KEYWORD_VOCABULARY = [
    "ai", "artificial intelligence", "machine learning", "programming",
    "javascript", "typescript", "python", "react", "next.js", "vue", "angular",
    "node.js", "rust", "go", "kotlin", "swift", "flutter", "webassembly", "wasm",
    "docker", "kubernetes", "cloud", "serverless", "api", "database", "devops",
    "open source", "github", "security", "frontend", "backend", "web development",
]


def term_pattern(term: str) -> re.Pattern:
    """Whole-term matcher; terms like 'C#' or '.NET Core' need custom edges.

    Words of a multi-word term may be joined by spaces or hyphens.
    """
    escaped = r"[\s-]+".join(re.escape(word) for word in term.lower().split())
    return re.compile(rf"(?<![a-z0-9]){escaped}(?![a-z0-9])")


@dataclass
class ClassifierLists:
    """Keyword lists used by TopicClassifier."""
    high_priority: List[str] = field(default_factory=lambda: list(HIGH_PRIORITY_TERMS))
    tech: List[str] = field(default_factory=lambda: list(TECH_TERMS))
    broader: List[str] = field(default_factory=lambda: list(BROADER_TERMS))
    blocked: List[str] = field(default_factory=lambda: list(BLOCKED_TERMS))

    @classmethod
    def from_yaml(cls, path: str) -> "ClassifierLists":
        """
        Load list overrides from a YAML file.

        Recognised keys: high_priority, tech, broader, blocked. Missing keys
        keep their default lists.
        """
        with open(Path(path), "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        defaults = cls()
        lists = cls(
            high_priority=data.get("high_priority", defaults.high_priority),
            tech=data.get("tech", defaults.tech),
            broader=data.get("broader", defaults.broader),
            blocked=data.get("blocked", defaults.blocked),
        )
        logger.info(f"Loaded classifier lists from {path}")
        return lists


class TopicClassifier:
    """Assign a priority tier to candidate topics or reject them."""

    def __init__(self, lists: Optional[ClassifierLists] = None):
        self.lists = lists or ClassifierLists()
        self._patterns: Dict[str, List[re.Pattern]] = {
            name: [term_pattern(t) for t in getattr(self.lists, name)]
            for name in ("high_priority", "tech", "broader", "blocked")
        }

    def _matches(self, name: str, text: str) -> bool:
        return any(p.search(text) for p in self._patterns[name])

    def classify(self, title: str, description: str = "") -> Optional[int]:
        """
        Priority tier for a candidate.

        Returns:
            1, 2 or 3, or None when the candidate is blocked or off-topic
        """
        if self.is_blocked(title, description):
            return None
        text = f"{title} {description}".lower()
        if self._matches("high_priority", text):
            return 1
        if self._matches("tech", text):
            return 2
        if self._matches("broader", text):
            return 3
        return None

    def is_blocked(self, title: str, description: str = "") -> bool:
        return self._matches("blocked", f"{title} {description}".lower())


def extract_keywords(text: str, limit: int = 8) -> List[str]:
    """Technical vocabulary terms that appear in text, in vocabulary order."""
    lowered = (text or "").lower()
    found = [term for term in KEYWORD_VOCABULARY if term_pattern(term).search(lowered)]
    return found[:limit]
