"""
CLAUDY — Frontmatter
YAML frontmatter parsing for skill, agent and command markdown.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .errors import FrontmatterError

FRONTMATTER_RE = re.compile(r"\A---\s*\n(.*?)\n---\s*(?:\n|\Z)", re.S)


@dataclass
class MarkdownDoc:
    path: Path
    frontmatter: dict = field(default_factory=dict)
    body: str = ""

    @property
    def title(self) -> str:
        for line in self.body.splitlines():
            if line.startswith("# "):
                return line[2:].strip()
        return ""


def split_frontmatter(text: str) -> tuple[dict, str]:
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid YAML frontmatter: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError("Frontmatter must be a mapping")
    return data, text[match.end():]


def load_markdown(path: Path) -> MarkdownDoc:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FrontmatterError(f"Unreadable markdown: {e}") from e
    meta, body = split_frontmatter(text)
    return MarkdownDoc(path=path, frontmatter=meta, body=body)
