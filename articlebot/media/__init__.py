"""Hero image sourcing for articlebot."""

from .images import (
    ImageSourcer,
    ImageProvider,
    StabilityImageProvider,
    PexelsImageProvider,
    StaticImagePool,
    build_search_query,
    dimensions_for,
)
