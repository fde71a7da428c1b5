"""
Hero image sourcing.

Providers are tried in order: Stability text-to-image, Pexels stock search,
then a static pool that always answers. A provider without an API key is
skipped. get_hero_image never raises.
"""

import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Tuple

import httpx

from articlebot.core.errors import ImageSourcingError
from articlebot.core.logging import get_logger
from articlebot.core.schemas import HeroImage
from articlebot.core.utils import stable_hash

logger = get_logger(__name__)

STABILITY_URL = "https://api.stability.ai/v1/generation/stable-diffusion-xl-1024-v1-0/text-to-image"
PEXELS_SEARCH_URL = "https://api.pexels.com/v1/search"

DEFAULT_ASPECT_RATIO = "16:9"
ASPECT_RATIO_DIMENSIONS: Dict[str, Tuple[int, int]] = {
    "16:9": (1344, 768),
    "4:3": (1024, 768),
    "1:1": (1024, 1024),
}

_STOP_PHRASES = (
    "create a", "stunning", "modern", "hero", "banner", "image", "for", "a", "blog",
    "titled", "style", "professional", "high-quality", "design", "with", "vibrant",
    "colors", "typography", "visual", "elements", "that", "represent", "ai", "and",
    "technology", "include", "space", "text", "overlay", "aspect", "ratio", "make",
    "visually", "striking", "brand-friendly", "create", "square", "social", "media",
    "card", "post", "about", "eye-catching", "bold", "clean", "icons", "graphics",
    "highly", "shareable", "engaging",
)
_STOP_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(p) for p in sorted(_STOP_PHRASES, key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)

STATIC_IMAGE_IDS = [
    546819, 1181467, 3861969, 3183150, 3183153,
    3184291, 3184296, 3184338, 3184339, 3184340,
]
STATIC_IMAGE_POOL = [
    f"https://images.pexels.com/photos/{n}/pexels-photo-{n}.jpeg" for n in STATIC_IMAGE_IDS
]


def dimensions_for(aspect_ratio: Optional[str]) -> Tuple[int, int]:
    """Pixel size for an aspect ratio, 16:9 when unknown."""
    return ASPECT_RATIO_DIMENSIONS.get(aspect_ratio or DEFAULT_ASPECT_RATIO,
                                       ASPECT_RATIO_DIMENSIONS[DEFAULT_ASPECT_RATIO])


def build_search_query(text: str, max_words: int = 3) -> str:
    """
    Stock-photo search term for text.

    Strips prompt boilerplate, keeps words longer than three characters,
    takes the first few and adds a technology qualifier.
    """
    cleaned = _STOP_RE.sub(" ", text or "")
    words = [w for w in re.findall(r"[A-Za-z0-9][A-Za-z0-9.+#-]*", cleaned) if len(w) > 3]
    return " ".join(words[:max_words] + ["technology"])


def hero_image_prompt(title: str) -> str:
    return (f"A professional, modern hero image for a technology blog article titled "
            f"\"{title}\". Clean composition, subtle tech elements, no text.")


class ImageProvider(ABC):
    """One way of obtaining an image URL."""

    name: str = "image"

    @property
    def enabled(self) -> bool:
        return True

    @abstractmethod
    async def fetch(self, text: str) -> str:
        """Return an image URL. Raises ImageSourcingError on failure."""
        pass


class StabilityImageProvider(ImageProvider):
    """Stable Diffusion XL text-to-image, returned as a data URL."""

    name = "stability"

    def __init__(self, client: httpx.AsyncClient, api_key: str, aspect_ratio: str = DEFAULT_ASPECT_RATIO):
        self.client = client
        self.api_key = api_key
        self.aspect_ratio = aspect_ratio

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def fetch(self, text: str) -> str:
        width, height = dimensions_for(self.aspect_ratio)
        body = {
            "text_prompts": [{"text": hero_image_prompt(text), "weight": 1}],
            "cfg_scale": 7,
            "height": height,
            "width": width,
            "steps": 30,
            "samples": 1,
            "style_preset": "photographic",
        }
        try:
            response = await self.client.post(
                STABILITY_URL,
                json=body,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Accept": "application/json",
                },
            )
            response.raise_for_status()
            artifacts = response.json().get("artifacts") or []
        except (httpx.HTTPError, ValueError) as e:
            raise ImageSourcingError(f"Stability request failed: {e}") from e

        if not artifacts or not artifacts[0].get("base64"):
            raise ImageSourcingError("Stability returned no image artifacts")
        return f"data:image/png;base64,{artifacts[0]['base64']}"


class PexelsImageProvider(ImageProvider):
    """Pexels stock photo search."""

    name = "pexels"

    def __init__(self, client: httpx.AsyncClient, api_key: str):
        self.client = client
        self.api_key = api_key

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def fetch(self, text: str) -> str:
        query = build_search_query(text)
        try:
            response = await self.client.get(
                PEXELS_SEARCH_URL,
                params={"query": query, "per_page": 1},
                headers={"Authorization": self.api_key},
            )
            response.raise_for_status()
            photos = response.json().get("photos") or []
        except (httpx.HTTPError, ValueError) as e:
            raise ImageSourcingError(f"Pexels search failed for '{query}': {e}") from e

        if not photos:
            raise ImageSourcingError(f"Pexels returned no photos for '{query}'")
        src = photos[0].get("src") or {}
        url = src.get("large") or src.get("original")
        if not url:
            raise ImageSourcingError("Pexels photo has no usable URL")
        return url


class StaticImagePool(ImageProvider):
    """Deterministic pick from a fixed list of URLs."""

    name = "static"

    def __init__(self, urls: Sequence[str] = STATIC_IMAGE_POOL):
        if not urls:
            raise ValueError("StaticImagePool needs at least one URL")
        self.urls = list(urls)

    def pick(self, text: str) -> str:
        return self.urls[stable_hash(text) % len(self.urls)]

    async def fetch(self, text: str) -> str:
        return self.pick(text)


class ImageSourcer:
    """Try each provider in turn; the static pool is always the last resort."""

    def __init__(self, providers: Sequence[ImageProvider] = (), pool: Optional[StaticImagePool] = None):
        self.providers: List[ImageProvider] = list(providers)
        self.pool = pool or StaticImagePool()

    async def get_hero_image(self, text: str) -> HeroImage:
        """Hero image for an article title. Never raises."""
        alt_text = f"{text} - Hero Image"
        for provider in self.providers:
            if not provider.enabled:
                logger.debug(f"Image provider '{provider.name}' not configured, skipping")
                continue
            try:
                url = await provider.fetch(text)
            except ImageSourcingError as e:
                logger.warning(f"Image provider '{provider.name}' failed: {e}")
                continue
            logger.info(f"Hero image for '{text}' from {provider.name}")
            return HeroImage(url=url, alt_text=alt_text, provider=provider.name)

        return HeroImage(url=self.pool.pick(text), alt_text=alt_text, provider=self.pool.name)
