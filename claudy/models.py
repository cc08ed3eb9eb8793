"""
CLAUDY — Data Models
Plugin manifests, marketplace manifests and validation reports, all via Pydantic.
"""

from __future__ import annotations
import re
from typing import Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

KEBAB_CASE = re.compile(r"^[a-z][a-z0-9]*(-[a-z0-9]+)*$")
SEMVER = re.compile(r"^\d+\.\d+\.\d+$")


def is_kebab_case(name: str) -> bool:
    return bool(KEBAB_CASE.match(name or ""))


def is_semver(version: str) -> bool:
    return bool(SEMVER.match(version or ""))


# ── Manifests ─────────────────────────────────────────────────────────────────

class Author(BaseModel):
    name: str
    email: Optional[str] = None
    url: Optional[str] = None


class PluginManifest(BaseModel):
    """`.claude-plugin/plugin.json` — unknown keys are preserved."""
    model_config = ConfigDict(extra="allow")

    name: str
    description: str
    version: str
    author: Union[Author, str]
    keywords: List[str] = Field(default_factory=list)
    homepage: Optional[str] = None
    repository: Optional[str] = None
    license: Optional[str] = None

    @property
    def author_name(self) -> str:
        return self.author.name if isinstance(self.author, Author) else self.author

    def has_mcp(self) -> bool:
        extra = self.model_extra or {}
        return "mcp" in extra or "mcpServers" in extra


class PackageJson(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    version: str
    description: str


class MarketplaceOwner(BaseModel):
    name: str
    email: Optional[str] = None


class MarketplacePluginEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    source: str
    description: Optional[str] = None
    version: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("source", mode="before")
    @classmethod
    def flatten_source(cls, v: object) -> object:
        # Remote sources are objects ({"source": "github", "repo": ...}); keep a readable label.
        if isinstance(v, dict):
            kind = v.get("source", "remote")
            where = v.get("repo") or v.get("url") or v.get("package") or ""
            return f"{kind}:{where}"
        return v

    @property
    def is_local(self) -> bool:
        return ":" not in self.source or self.source.startswith(("./", "../", "/"))

    @property
    def local_path(self) -> str:
        src = self.source
        while src.startswith("./"):
            src = src[2:]
        return src.rstrip("/")


class MarketplaceManifest(BaseModel):
    """`.claude-plugin/marketplace.json`."""
    model_config = ConfigDict(extra="allow")

    name: str
    owner: Optional[MarketplaceOwner] = None
    metadata: Dict[str, object] = Field(default_factory=dict)
    plugins: List[MarketplacePluginEntry] = Field(default_factory=list)


# ── Validation Results ────────────────────────────────────────────────────────

Level = Literal["ok", "error", "warning"]


class Finding(BaseModel):
    level: Level
    code: str
    message: str
    path: Optional[str] = None


class ValidationReport(BaseModel):
    """Ordered check results for one plugin or one marketplace."""
    target: str
    findings: List[Finding] = Field(default_factory=list)

    @property
    def errors(self) -> int:
        return sum(1 for f in self.findings if f.level == "error")

    @property
    def warnings(self) -> int:
        return sum(1 for f in self.findings if f.level == "warning")

    @property
    def passed(self) -> bool:
        return self.errors == 0

    def ok_for(self, strict: bool = False) -> bool:
        return self.passed and not (strict and self.warnings)

    def add_ok(self, code: str, message: str, path: Optional[str] = None) -> None:
        self.findings.append(Finding(level="ok", code=code, message=message, path=path))

    def add_error(self, code: str, message: str, path: Optional[str] = None) -> None:
        self.findings.append(Finding(level="error", code=code, message=message, path=path))

    def add_warning(self, code: str, message: str, path: Optional[str] = None) -> None:
        self.findings.append(Finding(level="warning", code=code, message=message, path=path))

    def extend(self, other: "ValidationReport", prefix: str = "") -> None:
        for f in other.findings:
            message = f"{prefix}: {f.message}" if prefix else f.message
            self.findings.append(f.model_copy(update={"message": message}))

    def codes(self, level: Optional[Level] = None) -> List[str]:
        return [f.code for f in self.findings if level is None or f.level == level]


class MarketplaceReport(ValidationReport):
    plugin_count: int = 0
    plugins: List[str] = Field(default_factory=list)


class PluginSummary(BaseModel):
    """What `list` and `info` show for one plugin directory."""
    name: str
    path: str
    description: str = "No description available"
    version: Optional[str] = None
    commands: List[str] = Field(default_factory=list)
    agents: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    has_manifest: bool = False
    has_mcp: bool = False
