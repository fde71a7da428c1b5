"""ArticleBot: automated technical article production."""

__version__ = "0.1.0"
