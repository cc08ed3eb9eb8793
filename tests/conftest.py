import json
import os
from pathlib import Path

import pytest

README = """# rails-workflow

Rails workflow commands and agents.

## Installation

Run `/plugin install rails-workflow@claudy`.

## Usage

Example: `/rails-review`
"""


def write_plugin(
    plugins_dir: Path,
    name: str = "rails-workflow",
    *,
    manifest: dict | str | None = None,
    package: dict | None = None,
    readme: str | None = README,
    commands: dict[str, str] | None = None,
    agents: dict[str, str] | None = None,
) -> Path:
    """Write a plugin that passes every check unless overridden."""
    root = plugins_dir / name
    (root / ".claude-plugin").mkdir(parents=True)

    if manifest is None:
        manifest = {
            "name": name.split("/")[-1],
            "description": "Rails workflow helpers",
            "version": "1.0.0",
            "author": {"name": "Jane Doe"},
            "keywords": ["rails"],
        }
    text = manifest if isinstance(manifest, str) else json.dumps(manifest)
    (root / ".claude-plugin" / "plugin.json").write_text(text)

    if package is None:
        package = {"name": name.split("/")[-1], "version": "1.0.0", "description": "Rails workflow helpers"}
    if package:
        (root / "package.json").write_text(json.dumps(package))

    if readme is not None:
        (root / "README.md").write_text(readme)

    for kind, files in (
        ("commands", {"rails-review.md": "# rails-review\n\nReview the diff.\n"} if commands is None else commands),
        ("agents", {"rails-architect.md": "# rails-architect\n\nDesign things.\n"} if agents is None else agents),
    ):
        if files:
            (root / kind).mkdir()
            for filename, content in files.items():
                (root / kind / filename).write_text(content)
    return root


def write_script(path: Path, content: str = "#!/bin/bash\necho ok\n", executable: bool = True) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    os.chmod(path, 0o755 if executable else 0o644)
    return path


def write_marketplace(root: Path, plugins: list[dict], name: str = "claudy") -> Path:
    path = root / ".claude-plugin" / "marketplace.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"name": name, "owner": {"name": "Claudy"}, "plugins": plugins}))
    return path


@pytest.fixture
def marketplace_root(tmp_path: Path) -> Path:
    (tmp_path / "plugins").mkdir()
    return tmp_path


@pytest.fixture
def plugins_dir(marketplace_root: Path) -> Path:
    return marketplace_root / "plugins"


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the developer's ~/.claudy/config.json out of every test."""
    user_file = tmp_path / "home" / ".claudy" / "config.json"
    monkeypatch.setattr("claudy.config.USER_CONFIG_FILE", user_file)
    monkeypatch.delenv("CLAUDY_LOG_LEVEL", raising=False)
    return user_file
