"""
CLAUDY — Config
Per-marketplace and per-user settings, persisted as JSON.
"""

from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".claudy"
USER_CONFIG_FILE = CONFIG_DIR / "config.json"
PROJECT_CONFIG_NAME = ".claudy.json"

HOOK_EVENTS = [
    "PreToolUse",
    "PostToolUse",
    "UserPromptSubmit",
    "SessionStart",
    "SessionEnd",
    "PreCompact",
    "Notification",
    "Stop",
    "SubagentStop",
]


class ClaudyConfig(BaseModel):
    plugins_dir: str = "plugins"
    marketplace_file: str = ".claude-plugin/marketplace.json"
    marketplace_name: str = "claudy"
    require_package_json: bool = True
    required_fields: List[str] = Field(
        default_factory=lambda: ["name", "description", "version", "author"]
    )
    valid_hook_events: List[str] = Field(default_factory=lambda: list(HOOK_EVENTS))
    deprecated_hook_keys: List[str] = Field(
        default_factory=lambda: ["script", "required", "timeout_ms"]
    )
    strict: bool = False
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper().strip()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level


class ConfigStore:
    """
    Resolves the active config for a marketplace checkout.
    `<root>/.claudy.json` wins over `~/.claudy/config.json`; defaults otherwise.
    """

    def __init__(self, root: Path, user_file: Optional[Path] = None) -> None:
        self.root = root
        self.user_file = user_file or USER_CONFIG_FILE
        self._config: Optional[ClaudyConfig] = None

    @property
    def project_file(self) -> Path:
        return self.root / PROJECT_CONFIG_NAME

    def source(self) -> Optional[Path]:
        for candidate in (self.project_file, self.user_file):
            if candidate.is_file():
                return candidate
        return None

    # ── Load / Save ──────────────────────────────────────────

    def load(self) -> ClaudyConfig:
        if self._config is not None:
            return self._config

        path = self.source()
        if path is None:
            self._config = ClaudyConfig()
        else:
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                self._config = ClaudyConfig(**raw)
                logger.debug("Loaded config from %s", path)
            except (OSError, json.JSONDecodeError, ValidationError, TypeError) as e:
                logger.warning("Ignoring unreadable config %s: %s", path, e)
                self._config = ClaudyConfig()

        env_level = os.environ.get("CLAUDY_LOG_LEVEL")
        if env_level:
            try:
                self._config = ClaudyConfig(**{**self._config.model_dump(), "log_level": env_level})
            except ValidationError:
                logger.warning("Ignoring CLAUDY_LOG_LEVEL=%s", env_level)
        return self._config

    def save(self, config: ClaudyConfig, *, user: bool = False) -> Path:
        self._config = config
        target = self.user_file if user else self.project_file
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(config.model_dump_json(indent=2), encoding="utf-8")
        return target

    def update(self, **kwargs) -> ClaudyConfig:
        cfg = self.load()
        changes = {k: v for k, v in kwargs.items() if k in ClaudyConfig.model_fields and v is not None}
        cfg = ClaudyConfig(**{**cfg.model_dump(), **changes})
        self.save(cfg)
        return cfg

    # ── Paths ────────────────────────────────────────────────

    @property
    def plugins_dir(self) -> Path:
        return self.root / self.load().plugins_dir

    @property
    def marketplace_path(self) -> Path:
        return self.root / self.load().marketplace_file
