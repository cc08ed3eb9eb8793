"""claudy: Claude Code plugin marketplace toolkit."""

__version__ = "1.0.0"
