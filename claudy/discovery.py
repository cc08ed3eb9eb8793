"""
CLAUDY — Plugin Discovery
Locate plugin directories under `plugins/`, flat (`plugins/x`) or namespaced (`plugins/ns/x`).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from .errors import ClaudyError, PluginNotFoundError

logger = logging.getLogger(__name__)

MANIFEST_DIR = ".claude-plugin"
PLUGIN_MANIFEST = f"{MANIFEST_DIR}/plugin.json"


def has_manifest(path: Path) -> bool:
    return (path / PLUGIN_MANIFEST).is_file()


def _subdirs(path: Path) -> list[Path]:
    return sorted((p for p in path.iterdir() if p.is_dir() and not p.name.startswith(".")), key=lambda p: p.name)


def iter_plugin_dirs(plugins_dir: Path, *, require_manifest: bool = False) -> Iterator[Path]:
    """Yield plugin directories in name order.

    A top-level directory whose children carry manifests is treated as a
    namespace; it is only yielded itself when it has its own manifest.
    """
    if not plugins_dir.is_dir():
        return

    for child in _subdirs(plugins_dir):
        nested = [g for g in _subdirs(child) if has_manifest(g)]
        if has_manifest(child) or (not nested and not require_manifest):
            yield child
        yield from nested


def plugin_label(plugins_dir: Path, plugin_dir: Path) -> str:
    try:
        return plugin_dir.relative_to(plugins_dir).as_posix()
    except ValueError:
        return plugin_dir.name


def available_plugins(plugins_dir: Path) -> list[str]:
    return [plugin_label(plugins_dir, p) for p in iter_plugin_dirs(plugins_dir)]


def resolve_plugin(plugins_dir: Path, name: str) -> Path:
    """Map a plugin name (or `namespace/name`) to its directory."""
    if not plugins_dir.is_dir():
        raise ClaudyError(f"Plugins directory not found: {plugins_dir}")

    direct = plugins_dir / name
    base = plugins_dir.resolve()
    if name and direct.is_dir() and direct.resolve() != base and direct.resolve().is_relative_to(base):
        return direct

    matches = [p for p in iter_plugin_dirs(plugins_dir, require_manifest=True) if p.name == name]
    if len(matches) > 1:
        logger.warning("Plugin name %s is ambiguous, using %s", name, matches[0])
    if matches:
        return matches[0]

    raise PluginNotFoundError(name, available_plugins(plugins_dir))
