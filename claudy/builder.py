"""
CLAUDY — Plugin Builder
Fluent builder that renders plugin.json plus command/agent markdown and scaffolds a plugin.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Annotated, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, Field

from .discovery import PLUGIN_MANIFEST
from .errors import BuilderError
from .models import is_kebab_case

logger = logging.getLogger(__name__)


def _kebab(v: str) -> str:
    if not is_kebab_case(v):
        raise ValueError(f"'{v}' must be kebab-case")
    return v


KebabName = Annotated[str, AfterValidator(_kebab)]


class PluginMetadata(BaseModel):
    name: KebabName
    version: str = "1.0.0"
    description: str
    author: str
    tags: List[str] = Field(default_factory=list)
    claude_code_version: Optional[str] = None


class CommandSpec(BaseModel):
    name: KebabName
    description: str
    prompt: str
    tags: List[str] = Field(default_factory=list)


class AgentExample(BaseModel):
    context: str
    user_message: str
    assistant_response: str
    commentary: str


class AgentSpec(BaseModel):
    name: KebabName
    description: str
    instructions: str
    tools: List[str] = Field(default_factory=list)
    examples: List[AgentExample] = Field(default_factory=list)


class PluginBuilder:
    def __init__(self) -> None:
        self.metadata: Optional[PluginMetadata] = None
        self.commands: List[CommandSpec] = []
        self.agents: List[AgentSpec] = []

    def with_metadata(self, metadata: PluginMetadata) -> "PluginBuilder":
        self.metadata = metadata
        return self

    def add_command(self, command: CommandSpec) -> "PluginBuilder":
        self.commands.append(command)
        return self

    def add_agent(self, agent: AgentSpec) -> "PluginBuilder":
        self.agents.append(agent)
        return self

    def build(self) -> PluginMetadata:
        if self.metadata is None:
            raise BuilderError("Plugin metadata is required")
        return self.metadata

    # ── Rendering ────────────────────────────────────────────

    def manifest(self) -> dict:
        meta = self.build()
        data: dict = {
            "name": meta.name,
            "description": meta.description,
            "version": meta.version,
            "author": {"name": meta.author},
            "keywords": meta.tags,
        }
        if meta.claude_code_version:
            data["claudeCodeVersion"] = meta.claude_code_version
        return data

    def command_files(self) -> Dict[str, str]:
        return {f"commands/{c.name}.md": render_command(c) for c in self.commands}

    def agent_files(self) -> Dict[str, str]:
        return {f"agents/{a.name}.md": render_agent(a) for a in self.agents}

    def readme(self) -> str:
        meta = self.build()
        lines = [f"# {meta.name}", "", meta.description, "", "## Installation", "",
                 "```", f"/plugin install {meta.name}", "```", "", "## Usage", ""]
        lines += [f"- `/{c.name}`: {c.description}" for c in self.commands]
        lines += [f"- `{a.name}` agent: {a.description}" for a in self.agents]
        return "\n".join(lines) + "\n"

    def package_json(self) -> dict:
        meta = self.build()
        return {"name": meta.name, "version": meta.version, "description": meta.description}

    def files(self) -> Dict[str, str]:
        out = {
            PLUGIN_MANIFEST: json.dumps(self.manifest(), indent=2) + "\n",
            "package.json": json.dumps(self.package_json(), indent=2) + "\n",
            "README.md": self.readme(),
        }
        out.update(self.command_files())
        out.update(self.agent_files())
        return out

    def write(self, target: Path) -> list[Path]:
        """Materialize the plugin under `target`; refuses to touch an existing directory."""
        files = self.files()
        if not self.commands and not self.agents:
            raise BuilderError("Plugin needs at least one command or agent")
        if target.exists():
            raise BuilderError(f"Plugin already exists at {target}")

        written: list[Path] = []
        try:
            for rel, content in files.items():
                path = target / rel
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content, encoding="utf-8")
                written.append(path)
        except OSError as e:
            shutil.rmtree(target, ignore_errors=True)
            raise BuilderError(f"Failed to write plugin: {e}") from e

        logger.info("Scaffolded plugin %s with %d file(s)", target, len(written))
        return written


def render_command(command: CommandSpec) -> str:
    return f"# {command.name}\n\n{command.description}\n\n---\n\n{command.prompt}\n"


def render_agent(agent: AgentSpec) -> str:
    content = f"# {agent.name}\n\n{agent.description}\n\n## Instructions\n\n{agent.instructions}\n\n"

    if agent.tools:
        content += "## Available Tools\n\n"
        content += "\n".join(f"- {tool}" for tool in agent.tools)
        content += "\n\n"

    if agent.examples:
        content += "## Examples\n\n"
        for ex in agent.examples:
            content += "<example>\n"
            content += f"Context: {ex.context}\n"
            content += f'user: "{ex.user_message}"\n'
            content += f'assistant: "{ex.assistant_response}"\n'
            content += f"<commentary>\n{ex.commentary}\n</commentary>\n"
            content += "</example>\n\n"

    return content
