"""FluentPath - language-learning progress and practice API."""

__version__ = "1.0.0"
