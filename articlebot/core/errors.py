"""Exception hierarchy shared by every pipeline stage."""


class ArticleBotError(Exception):
    """Base class for all articlebot failures."""
    pass


class ConfigurationError(ArticleBotError):
    """Required configuration is missing. Fatal before any work starts."""

    def __init__(self, message: str, missing=None):
        super().__init__(message)
        self.missing = list(missing or [])


class DiscoveryError(ArticleBotError):
    """A topic feed could not be read."""
    pass


class GenerationError(ArticleBotError):
    """The text service failed or returned something unusable."""
    pass


class RateLimitedError(GenerationError):
    """The text service rejected the call for rate or quota reasons."""
    pass


class ImageSourcingError(ArticleBotError):
    """An image provider failed to return an image."""
    pass


class SlugCollisionError(ArticleBotError):
    """No free slug could be found within the probe limit."""
    pass


class PersistenceError(ArticleBotError):
    """The store rejected or failed a write."""
    pass


class DuplicatePostError(PersistenceError):
    """A post with the same title or slug already exists."""
    pass


class StoreUnavailableError(PersistenceError):
    """The store could not be reached. Safe to retry."""
    pass
