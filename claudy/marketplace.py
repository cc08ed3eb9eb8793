"""
CLAUDY — Marketplace Verifier
Check a marketplace checkout: manifest, listed plugins and their consistency.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .config import ClaudyConfig, ConfigStore
from .discovery import PLUGIN_MANIFEST, has_manifest, iter_plugin_dirs, plugin_label
from .errors import ManifestError
from .models import MarketplaceManifest, MarketplaceReport
from .validator import PluginValidator, read_json

logger = logging.getLogger(__name__)


def load_marketplace(path: Path) -> MarketplaceManifest:
    """Parse marketplace.json or raise ManifestError."""
    if not path.is_file():
        raise ManifestError(path, "marketplace manifest not found")
    data, reason = read_json(path)
    if reason is not None:
        raise ManifestError(path, f"invalid JSON ({reason})")
    if not isinstance(data, dict):
        raise ManifestError(path, "marketplace manifest must be a JSON object")
    try:
        return MarketplaceManifest(**data)
    except ValidationError as e:
        raise ManifestError(path, f"schema error: {e.errors()[0]['msg']} at {e.errors()[0]['loc']}") from e


def load_plugin_manifest(plugin_dir: Path) -> Optional[dict]:
    """Raw plugin.json object; None when absent or not a JSON object."""
    data, reason = read_json(plugin_dir / PLUGIN_MANIFEST)
    if reason is not None or not isinstance(data, dict):
        return None
    return data


def has_mcp_config(plugin_dir: Path) -> bool:
    if (plugin_dir / ".mcp.json").is_file():
        return True
    data, reason = read_json(plugin_dir / PLUGIN_MANIFEST)
    return reason is None and isinstance(data, dict) and ("mcp" in data or "mcpServers" in data)


def _entry_count(folder: Path) -> int:
    if not folder.is_dir():
        return 0
    return sum(1 for _ in folder.iterdir())


class MarketplaceVerifier:
    """Verify every plugin a marketplace exposes."""

    def __init__(self, root: Path, config: Optional[ClaudyConfig] = None) -> None:
        self.root = root
        self.store = ConfigStore(root)
        self.config = config or self.store.load()
        self.validator = PluginValidator(self.config)

    @property
    def plugins_dir(self) -> Path:
        return self.root / self.config.plugins_dir

    @property
    def manifest_path(self) -> Path:
        return self.root / self.config.marketplace_file

    def verify(self, *, deep: bool = False) -> MarketplaceReport:
        report = MarketplaceReport(target=self.config.marketplace_name)
        manifest = self._check_manifest(report)

        if manifest is not None:
            self._check_listed(manifest, report, deep=deep)
            report.plugin_count = len(manifest.plugins)
        else:
            logger.info("No usable marketplace manifest, scanning %s", self.plugins_dir)
            for plugin_dir in iter_plugin_dirs(self.plugins_dir, require_manifest=True):
                label = plugin_label(self.plugins_dir, plugin_dir)
                report.plugins.append(label)
                self._check_plugin(plugin_dir, label, report, deep=deep)
            report.plugin_count = len(report.plugins)

        return report

    # ── Manifest ─────────────────────────────────────────────

    def _check_manifest(self, report: MarketplaceReport) -> Optional[MarketplaceManifest]:
        rel = self.config.marketplace_file
        if not self.manifest_path.is_file():
            report.add_error("MARKETPLACE_MISSING", "Marketplace manifest not found", rel)
            return None
        report.add_ok("MARKETPLACE", "Marketplace manifest exists", rel)

        try:
            manifest = load_marketplace(self.manifest_path)
        except ManifestError as e:
            report.add_error("MARKETPLACE_INVALID", f"Marketplace manifest is invalid: {e.reason}", rel)
            return None

        report.add_ok("MARKETPLACE_JSON", "Marketplace manifest is valid JSON", rel)
        report.add_ok("MARKETPLACE_PLUGINS", f"Found {len(manifest.plugins)} plugins in marketplace", rel)
        return manifest

    def _check_listed(self, manifest: MarketplaceManifest, report: MarketplaceReport, *, deep: bool) -> None:
        seen: set[str] = set()
        listed: set[Path] = set()

        for entry in manifest.plugins:
            report.plugins.append(entry.name)
            if entry.name in seen:
                report.add_error("DUPLICATE_PLUGIN", f"Duplicate marketplace entry: {entry.name}")
            seen.add(entry.name)

            if not entry.is_local:
                report.add_ok("REMOTE_SOURCE", f"{entry.name}: remote source {entry.source} (not checked)")
                continue

            plugin_dir = self.root / entry.local_path
            if not plugin_dir.is_dir():
                report.add_error("SOURCE_MISSING", f"{entry.name}: source directory not found: {entry.source}", entry.source)
                continue
            listed.add(plugin_dir.resolve())

            self._check_plugin(plugin_dir, entry.name, report, deep=deep)

            plugin = load_plugin_manifest(plugin_dir)
            if plugin is None:
                continue
            plugin_name = plugin.get("name")
            plugin_version = plugin.get("version")
            if isinstance(plugin_name, str) and plugin_name != entry.name:
                report.add_error(
                    "NAME_MISMATCH",
                    f"{entry.name}: marketplace name differs from plugin.json name '{plugin_name}'",
                    entry.source,
                )
            if entry.version and isinstance(plugin_version, str) and entry.version != plugin_version:
                report.add_warning(
                    "VERSION_MISMATCH",
                    f"{entry.name}: marketplace version {entry.version} != plugin.json {plugin_version}",
                    entry.source,
                )

        for plugin_dir in iter_plugin_dirs(self.plugins_dir, require_manifest=True):
            if plugin_dir.resolve() not in listed:
                label = plugin_label(self.plugins_dir, plugin_dir)
                report.add_warning("UNLISTED_PLUGIN", f"{label}: plugin not listed in marketplace manifest")

    # ── Per-plugin ───────────────────────────────────────────

    def _check_plugin(self, plugin_dir: Path, label: str, report: MarketplaceReport, *, deep: bool) -> None:
        if has_manifest(plugin_dir):
            report.add_ok("PLUGIN_MANIFEST", f"{label}: plugin.json exists")
        else:
            report.add_error("PLUGIN_MANIFEST_MISSING", f"{label}: plugin.json missing")

        has_content = False
        commands = _entry_count(plugin_dir / "commands")
        agents = _entry_count(plugin_dir / "agents")
        if commands:
            report.add_ok("COMMANDS", f"{label}: {commands} command(s)")
            has_content = True
        if agents:
            report.add_ok("AGENTS", f"{label}: {agents} agent(s)")
            has_content = True
        if has_mcp_config(plugin_dir):
            report.add_ok("MCP", f"{label}: MCP server configuration")
            has_content = True
        if not has_content:
            report.add_warning("NO_CONTENT", f"{label}: no commands, agents, or MCP servers found")

        if (plugin_dir / "README.md").is_file():
            report.add_ok("README", f"{label}: README.md exists")
        else:
            report.add_warning("README_MISSING", f"{label}: README.md missing")

        if deep:
            report.extend(self.validator.validate(plugin_dir, label), prefix=label)
