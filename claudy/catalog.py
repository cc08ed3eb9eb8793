"""
CLAUDY — Catalog
Plugin listings and per-plugin info for `list` / `info`.
"""

from __future__ import annotations

from pathlib import Path

from .discovery import MANIFEST_DIR, PLUGIN_MANIFEST, iter_plugin_dirs, plugin_label, resolve_plugin
from .errors import PluginStructureError
from .marketplace import has_mcp_config
from .models import PluginSummary
from .validator import read_json


def _stems(folder: Path) -> list[str]:
    if not folder.is_dir():
        return []
    return sorted(p.stem for p in folder.iterdir() if not p.name.startswith("."))


def summarize(plugin_dir: Path, name: str) -> PluginSummary:
    summary = PluginSummary(
        name=name,
        path=str(plugin_dir),
        commands=_stems(plugin_dir / "commands"),
        agents=_stems(plugin_dir / "agents"),
        skills=sorted(p.parent.name for p in (plugin_dir / "skills").glob("*/SKILL.md")),
        has_manifest=(plugin_dir / PLUGIN_MANIFEST).is_file(),
        has_mcp=has_mcp_config(plugin_dir),
    )

    # package.json first, then plugin.json
    for source in ("package.json", PLUGIN_MANIFEST):
        data, reason = read_json(plugin_dir / source)
        if reason is None and isinstance(data, dict):
            if summary.description == PluginSummary.model_fields["description"].default and data.get("description"):
                summary.description = str(data["description"])
            if summary.version is None and data.get("version"):
                summary.version = str(data["version"])
    return summary


def list_plugins(plugins_dir: Path) -> list[PluginSummary]:
    return [summarize(p, plugin_label(plugins_dir, p)) for p in iter_plugin_dirs(plugins_dir)]


def plugin_info(plugins_dir: Path, name: str) -> PluginSummary:
    plugin_dir = resolve_plugin(plugins_dir, name)
    if not (plugin_dir / MANIFEST_DIR).is_dir():
        raise PluginStructureError(name, "does not have a .claude-plugin directory")
    if not (plugin_dir / PLUGIN_MANIFEST).is_file():
        raise PluginStructureError(name, "does not have a plugin.json manifest")
    return summarize(plugin_dir, name)


def install_hint(name: str, marketplace: str) -> str:
    return f"/plugin install {name}@{marketplace}"
