"""
LLM provider interface and the OpenAI implementation.

Providers return raw completion text. Transport and API failures are
translated into GenerationError, with RateLimitedError for rate or quota
rejections so the generator can cool down and retry.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import openai
from openai import AsyncOpenAI

from articlebot.core.errors import GenerationError, RateLimitedError
from articlebot.core.logging import get_logger

logger = get_logger(__name__)


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        model: Optional[str] = None,
    ) -> str:
        """
        Generate a completion.

        Args:
            system_prompt: Instructions for the model
            user_prompt: Topic-specific request
            model: Model override, provider default when None

        Returns:
            Raw completion text

        Raises:
            RateLimitedError: rate or quota limit hit
            GenerationError: any other failure
        """
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Check provider configuration."""
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identification name."""
        pass


def _is_quota_error(error: Exception) -> bool:
    code = getattr(error, "code", None)
    return code in ("insufficient_quota", "rate_limit_exceeded")


class OpenAIProvider(LLMProvider):
    """Chat completions through the official OpenAI async client."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        max_tokens: int = 16384,
        temperature: float = 0.7,
        timeout: float = 120.0,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        # Retries are owned by the generator and pipeline
        self.client = client or AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    @property
    def provider_name(self) -> str:
        return "OpenAI"

    async def health_check(self) -> Dict[str, Any]:
        return {
            "status": "configured" if self.client.api_key else "missing_api_key",
            "provider": self.provider_name,
            "model": self.model,
        }

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        model: Optional[str] = None,
    ) -> str:
        model = model or self.model
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except openai.RateLimitError as e:
            raise RateLimitedError(f"{model} rate limited: {e}") from e
        except openai.APIStatusError as e:
            if e.status_code == 429 or _is_quota_error(e):
                raise RateLimitedError(f"{model} quota exhausted: {e}") from e
            raise GenerationError(f"{model} returned HTTP {e.status_code}: {e}") from e
        except openai.OpenAIError as e:
            raise GenerationError(f"{model} request failed: {e}") from e

        if not response.choices:
            raise GenerationError(f"{model} returned no choices")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise GenerationError(f"{model} returned an empty completion")

        logger.debug(f"{model} completion received ({len(content)} chars)")
        return content
