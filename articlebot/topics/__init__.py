"""
Topic discovery for articlebot.

Main Components:
- feeds: GitHub and NewsAPI candidate feeds
- classifier: keyword-list priority tiers
- source: concurrent discovery with curated fallback
- dedup: exact title/slug filter against the post store
"""

from .classifier import TopicClassifier, ClassifierLists
from .dedup import Deduplicator
from .fallback import get_fallback_topics
from .feeds import TopicFeed, GitHubTrendingFeed, NewsAPIFeed
from .source import TopicSource
