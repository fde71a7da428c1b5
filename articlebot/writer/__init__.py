"""
Article writer for articlebot.

Main Components:
- llm_provider: text service abstraction and OpenAI implementation
- prompts: system and user prompts
- parsing: tolerant JSON extraction from model output
- template_renderer: deterministic fallback articles
- generator: orchestration with cool-down retry and slug resolution
"""

from .generator import ContentGenerator
from .llm_provider import LLMProvider, OpenAIProvider
from .parsing import ParseResult, parse_article_json
from .template_renderer import FallbackRenderer
