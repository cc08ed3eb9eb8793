"""
CLAUDY — Errors
Raised for caller mistakes; bad plugin content is reported as findings instead.
"""

from __future__ import annotations

from pathlib import Path


class ClaudyError(Exception):
    """Base class for all claudy errors."""


class PluginNotFoundError(ClaudyError):
    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = available or []
        super().__init__(f"Plugin '{name}' not found in plugins/")


class PluginStructureError(ClaudyError):
    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Plugin '{name}' {reason}")


class ManifestError(ClaudyError):
    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class FrontmatterError(ClaudyError):
    pass


class BuilderError(ClaudyError):
    pass
