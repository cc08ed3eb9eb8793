"""
CLAUDY — Plugin Validator
Structure, manifest, markdown, skill and hook checks for a single plugin.
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Optional

from .config import ClaudyConfig
from .discovery import MANIFEST_DIR, PLUGIN_MANIFEST
from .errors import FrontmatterError
from .frontmatter import load_markdown
from .models import ValidationReport, is_kebab_case, is_semver

logger = logging.getLogger(__name__)

PLUGIN_ROOT_VAR = "${CLAUDE_PLUGIN_ROOT}"
BASH_SHEBANG = re.compile(r"^#!(/.*/bash|/usr/bin/env bash)$")
BASH_TEST = re.compile(r"\[\[\s+.*?\s+\]\]")
FUNCTION_KEYWORD = re.compile(r"^\s*function \w+", re.M)


def read_json(path: Path) -> tuple[Optional[Any], Optional[str]]:
    """Return (data, None) or (None, reason)."""
    try:
        return json.loads(path.read_text(encoding="utf-8")), None
    except json.JSONDecodeError as e:
        return None, f"line {e.lineno}: {e.msg}"
    except (OSError, UnicodeDecodeError) as e:
        return None, str(e)


class PluginValidator:
    """Validate one plugin directory and collect findings."""

    def __init__(self, config: Optional[ClaudyConfig] = None) -> None:
        self.config = config or ClaudyConfig()

    def validate(self, plugin_dir: Path, name: Optional[str] = None) -> ValidationReport:
        report = ValidationReport(target=name or plugin_dir.name)
        logger.debug("Validating plugin at %s", plugin_dir)

        self._check_package_json(plugin_dir, report)
        self._check_readme(plugin_dir, report)

        if not (plugin_dir / MANIFEST_DIR).is_dir():
            report.add_error("MANIFEST_DIR_MISSING", ".claude-plugin directory is missing", MANIFEST_DIR)
            return report
        report.add_ok("MANIFEST_DIR", ".claude-plugin directory exists", MANIFEST_DIR)

        self._check_manifest(plugin_dir, report)
        self._check_content(plugin_dir, report)
        self._check_skills(plugin_dir, report)
        self._check_hooks_json(plugin_dir, report)
        self._check_hook_scripts(plugin_dir, report)

        logger.info("%s: %d error(s), %d warning(s)", report.target, report.errors, report.warnings)
        return report

    # ── package.json / README ────────────────────────────────

    def _check_package_json(self, plugin_dir: Path, report: ValidationReport) -> None:
        path = plugin_dir / "package.json"
        if not path.is_file():
            if self.config.require_package_json:
                report.add_error("PACKAGE_JSON_MISSING", "package.json is missing", "package.json")
            else:
                report.add_warning("PACKAGE_JSON_MISSING", "package.json is missing (recommended)", "package.json")
            return
        report.add_ok("PACKAGE_JSON", "package.json exists", "package.json")

        data, reason = read_json(path)
        if reason is not None or not isinstance(data, dict):
            report.add_error("PACKAGE_JSON_INVALID", f"package.json is invalid JSON ({reason or 'not an object'})", "package.json")
            return

        missing = [k for k in ("name", "version", "description") if k not in data]
        if missing:
            report.add_error("PACKAGE_JSON_FIELDS", f"package.json missing field(s): {', '.join(missing)}", "package.json")
        if "version" in data and not is_semver(str(data["version"])):
            report.add_error("PACKAGE_JSON_VERSION", f"package.json version is not semver: {data['version']}", "package.json")

    def _check_readme(self, plugin_dir: Path, report: ValidationReport) -> None:
        path = plugin_dir / "README.md"
        if not path.is_file():
            report.add_warning("README_MISSING", "README.md is missing (recommended)", "README.md")
            return
        report.add_ok("README", "README.md exists", "README.md")

        content = path.read_text(encoding="utf-8", errors="replace")
        if not content.strip():
            report.add_warning("README_EMPTY", "README.md is empty", "README.md")
            return
        lowered = content.lower()
        if not re.search(r"^#\s+.+", content, flags=re.M):
            report.add_warning("README_TITLE", "README.md has no title", "README.md")
        if "install" not in lowered:
            report.add_warning("README_INSTALL", "README.md has no installation instructions", "README.md")
        if not re.search(r"usage|example|how to", lowered):
            report.add_warning("README_USAGE", "README.md has no usage examples", "README.md")

    # ── plugin.json ──────────────────────────────────────────

    def _check_manifest(self, plugin_dir: Path, report: ValidationReport) -> None:
        path = plugin_dir / PLUGIN_MANIFEST
        if not path.is_file():
            report.add_error("MANIFEST_MISSING", "plugin.json manifest is missing", PLUGIN_MANIFEST)
            return
        report.add_ok("MANIFEST", "plugin.json manifest exists", PLUGIN_MANIFEST)

        data, reason = read_json(path)
        if reason is not None:
            report.add_error("MANIFEST_INVALID", f"plugin.json is invalid JSON ({reason})", PLUGIN_MANIFEST)
            return
        if not isinstance(data, dict):
            report.add_error("MANIFEST_INVALID", "plugin.json must be a JSON object", PLUGIN_MANIFEST)
            return
        report.add_ok("MANIFEST_JSON", "plugin.json is valid JSON", PLUGIN_MANIFEST)

        for key in self.config.required_fields:
            value = data.get(key)
            if key == "author":
                self._check_author(value, report)
            elif not isinstance(value, str) or not value.strip():
                report.add_error("MANIFEST_FIELD", f"plugin.json missing required field '{key}'", PLUGIN_MANIFEST)

        name = data.get("name")
        if isinstance(name, str) and name and not is_kebab_case(name):
            report.add_error("MANIFEST_NAME", f"Plugin name must be kebab-case: {name}", PLUGIN_MANIFEST)

        version = data.get("version")
        if isinstance(version, str) and version and not is_semver(version):
            report.add_error("MANIFEST_VERSION", f"Version must be semver (x.y.z): {version}", PLUGIN_MANIFEST)

        keywords = data.get("keywords")
        if not isinstance(keywords, list) or not keywords:
            report.add_warning("MANIFEST_KEYWORDS", "plugin.json has no keywords", PLUGIN_MANIFEST)

    def _check_author(self, author: Any, report: ValidationReport) -> None:
        if isinstance(author, str) and author.strip():
            return
        if isinstance(author, dict):
            if isinstance(author.get("name"), str) and author["name"].strip():
                return
            report.add_error("MANIFEST_AUTHOR", "plugin.json 'author' object needs a 'name'", PLUGIN_MANIFEST)
            return
        report.add_error("MANIFEST_FIELD", "plugin.json missing required field 'author'", PLUGIN_MANIFEST)

    # ── commands / agents ────────────────────────────────────

    def _check_content(self, plugin_dir: Path, report: ValidationReport) -> None:
        found = False
        for kind in ("commands", "agents"):
            folder = plugin_dir / kind
            if not folder.is_dir():
                continue
            entries = sorted(p for p in folder.iterdir() if not p.name.startswith("."))
            if not entries:
                continue
            found = True
            report.add_ok(f"{kind.upper()}_FOUND", f"Found {len(entries)} {kind[:-1]}(s)", kind)
            self._check_markdown_dir(kind, entries, report)

        if not found:
            report.add_error("NO_CONTENT", "Plugin has no commands or agents")

    def _check_markdown_dir(self, kind: str, entries: list[Path], report: ValidationReport) -> None:
        for entry in entries:
            if entry.is_dir():
                continue
            rel = f"{kind}/{entry.name}"
            if entry.suffix != ".md":
                report.add_warning("NOT_MARKDOWN", f"{entry.name} is not a markdown file", rel)
                continue
            if not entry.read_text(encoding="utf-8", errors="replace").strip():
                report.add_error("EMPTY_MARKDOWN", f"{entry.name} is empty", rel)
            else:
                report.add_ok("MARKDOWN", f"{entry.name} has content", rel)
            if not is_kebab_case(entry.stem):
                report.add_error("NAMING", f"{kind[:-1].capitalize()} {entry.stem} should use kebab-case", rel)

    # ── skills ───────────────────────────────────────────────

    def _check_skills(self, plugin_dir: Path, report: ValidationReport) -> None:
        skills_dir = plugin_dir / "skills"
        if not skills_dir.is_dir():
            return

        for skill in sorted(p for p in skills_dir.iterdir() if p.is_dir()):
            rel = f"skills/{skill.name}/SKILL.md"
            if not is_kebab_case(skill.name):
                report.add_error("NAMING", f"Skill {skill.name} should use kebab-case", f"skills/{skill.name}")

            skill_md = skill / "SKILL.md"
            if not skill_md.is_file():
                report.add_error("SKILL_MISSING", f"Skill {skill.name} has no SKILL.md", rel)
                continue
            try:
                doc = load_markdown(skill_md)
            except FrontmatterError as e:
                report.add_error("SKILL_FRONTMATTER", f"Skill {skill.name}: {e}", rel)
                continue

            missing = [k for k in ("name", "description") if not doc.frontmatter.get(k)]
            if missing:
                report.add_warning("SKILL_FIELDS", f"Skill {skill.name} frontmatter missing: {', '.join(missing)}", rel)
            else:
                report.add_ok("SKILL", f"Skill {skill.name} is valid", rel)

    # ── hooks ────────────────────────────────────────────────

    def _check_hooks_json(self, plugin_dir: Path, report: ValidationReport) -> None:
        rel = "hooks/hooks.json"
        path = plugin_dir / rel
        if not path.is_file():
            return

        data, reason = read_json(path)
        if reason is not None:
            report.add_error("HOOKS_INVALID", f"hooks.json is invalid JSON ({reason})", rel)
            return
        hooks = data.get("hooks") if isinstance(data, dict) else None
        if not isinstance(hooks, dict):
            report.add_error("HOOKS_STRUCTURE", "hooks.json needs a top-level 'hooks' object", rel)
            return
        report.add_ok("HOOKS_JSON", "hooks.json is valid", rel)

        for event, configs in hooks.items():
            if event not in self.config.valid_hook_events:
                report.add_error("HOOK_EVENT", f"Invalid hook event: {event}", rel)
            if not isinstance(configs, list):
                report.add_error("HOOK_STRUCTURE", f"Event {event} should have array value", rel)
                continue
            for config in configs:
                self._check_hook_matcher(plugin_dir, event, config, report)

    def _check_hook_matcher(self, plugin_dir: Path, event: str, config: Any, report: ValidationReport) -> None:
        rel = "hooks/hooks.json"
        if not isinstance(config, dict) or not isinstance(config.get("hooks"), list):
            report.add_error("HOOK_STRUCTURE", f"{event}: each entry needs a 'hooks' array", rel)
            return

        for key in self.config.deprecated_hook_keys:
            if key in config:
                report.add_error("HOOK_DEPRECATED", f"{event}: deprecated '{key}' field", rel)

        for hook in config["hooks"]:
            if not isinstance(hook, dict) or hook.get("type") != "command" or not hook.get("command"):
                report.add_error("HOOK_COMMAND", f"{event}: hooks need type 'command' and a command", rel)
                continue
            command = str(hook["command"])
            if PLUGIN_ROOT_VAR not in command:
                report.add_warning("HOOK_ROOT_VAR", f"{event}: command should use {PLUGIN_ROOT_VAR}", rel)
                continue

            script = Path(command.split()[0].replace(PLUGIN_ROOT_VAR, str(plugin_dir)))
            if not script.is_file():
                report.add_error("HOOK_SCRIPT_MISSING", f"{event}: script not found: {script.name}", rel)
            elif not os.access(script, os.X_OK):
                report.add_error("HOOK_SCRIPT_MODE", f"{event}: script not executable: {script.name}", rel)
            else:
                report.add_ok("HOOK", f"{event}: {script.name}", rel)

    def _check_hook_scripts(self, plugin_dir: Path, report: ValidationReport) -> None:
        hooks_dir = plugin_dir / "hooks"
        if not hooks_dir.is_dir():
            return

        for script in sorted(hooks_dir.glob("*.sh")):
            rel = f"hooks/{script.name}"
            if not os.access(script, os.X_OK):
                report.add_error("SCRIPT_MODE", f"Script {script.name} is not executable", rel)

            content = script.read_text(encoding="utf-8", errors="replace")
            first_line = content.splitlines()[0].strip() if content else ""
            if not BASH_SHEBANG.match(first_line):
                report.add_warning("SCRIPT_SHEBANG", f"Script {script.name} missing bash shebang", rel)
            if BASH_TEST.search(content):
                report.add_warning("SCRIPT_POSIX", f"Script {script.name} uses [[ ]] test (not POSIX)", rel)
            if FUNCTION_KEYWORD.search(content):
                report.add_warning("SCRIPT_POSIX", f"Script {script.name} uses 'function' keyword (not POSIX)", rel)
