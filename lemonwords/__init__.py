"""Top-level package for lemonwords."""

__version__ = "0.1.0"

from . import catalog, config, editor, models, wordcloud  # noqa: E402

__all__ = ["catalog", "config", "editor", "models", "wordcloud"]
