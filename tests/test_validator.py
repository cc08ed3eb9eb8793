import json

from claudy.config import ClaudyConfig
from claudy.validator import PluginValidator

from conftest import write_plugin, write_script


def test_valid_plugin_has_no_errors_or_warnings(plugins_dir):
    root = write_plugin(plugins_dir)
    report = PluginValidator().validate(root)

    assert report.passed
    assert report.errors == 0
    assert report.warnings == 0
    assert "MANIFEST_JSON" in report.codes("ok")
    assert "COMMANDS_FOUND" in report.codes("ok")


def test_missing_claude_plugin_dir_stops_validation(plugins_dir):
    root = plugins_dir / "bare"
    (root / "commands").mkdir(parents=True)
    (root / "commands" / "go.md").write_text("# go\n")

    report = PluginValidator().validate(root)

    assert report.codes("error")[-1] == "MANIFEST_DIR_MISSING"
    assert "NO_CONTENT" not in report.codes()


def test_package_json_optional_when_configured(plugins_dir):
    root = write_plugin(plugins_dir, package={})
    strict = PluginValidator().validate(root)
    relaxed = PluginValidator(ClaudyConfig(require_package_json=False)).validate(root)

    assert "PACKAGE_JSON_MISSING" in strict.codes("error")
    assert "PACKAGE_JSON_MISSING" in relaxed.codes("warning")
    assert relaxed.passed


def test_invalid_manifest_json(plugins_dir):
    root = write_plugin(plugins_dir, manifest="{not json")
    report = PluginValidator().validate(root)

    assert "MANIFEST_INVALID" in report.codes("error")
    assert not report.passed


def test_manifest_required_fields_and_formats(plugins_dir):
    root = write_plugin(
        plugins_dir,
        manifest={"name": "Rails_Workflow", "version": "1.0", "author": {"email": "x@y.z"}},
    )
    report = PluginValidator().validate(root)
    errors = report.codes("error")

    assert errors.count("MANIFEST_FIELD") == 1  # description
    assert "MANIFEST_NAME" in errors
    assert "MANIFEST_VERSION" in errors
    assert "MANIFEST_AUTHOR" in errors
    assert "MANIFEST_KEYWORDS" in report.codes("warning")


def test_author_may_be_plain_string(plugins_dir):
    manifest = {"name": "rails-workflow", "description": "d", "version": "0.1.0", "author": "Jane", "keywords": ["x"]}
    report = PluginValidator().validate(write_plugin(plugins_dir, manifest=manifest))
    assert report.passed


def test_plugin_without_commands_or_agents(plugins_dir):
    root = write_plugin(plugins_dir, commands={}, agents={})
    report = PluginValidator().validate(root)
    assert "NO_CONTENT" in report.codes("error")


def test_hidden_files_do_not_count_as_content(plugins_dir):
    root = write_plugin(plugins_dir, commands={".gitkeep": ""}, agents={})
    report = PluginValidator().validate(root)

    assert "NO_CONTENT" in report.codes("error")
    assert "COMMANDS_FOUND" not in report.codes("ok")
    assert "NOT_MARKDOWN" not in report.codes("warning")


def test_markdown_checks(plugins_dir):
    root = write_plugin(
        plugins_dir,
        commands={"empty.md": "  \n", "BadName.md": "# bad\n", "notes.txt": "hi"},
    )
    report = PluginValidator().validate(root)

    assert "EMPTY_MARKDOWN" in report.codes("error")
    assert "NAMING" in report.codes("error")
    assert "NOT_MARKDOWN" in report.codes("warning")


def test_readme_content_warnings(plugins_dir):
    root = write_plugin(plugins_dir, readme="just some text\n")
    report = PluginValidator().validate(root)
    warnings = report.codes("warning")

    assert {"README_TITLE", "README_INSTALL", "README_USAGE"} <= set(warnings)
    assert report.passed


def test_missing_readme_is_warning(plugins_dir):
    report = PluginValidator().validate(write_plugin(plugins_dir, readme=None))
    assert "README_MISSING" in report.codes("warning")
    assert report.passed


def test_skill_checks(plugins_dir):
    root = write_plugin(plugins_dir)
    (root / "skills" / "rails-docs").mkdir(parents=True)
    (root / "skills" / "rails-docs" / "SKILL.md").write_text(
        "---\nname: rails-docs\ndescription: Search the Rails guides\n---\n\n# Rails docs\n"
    )
    (root / "skills" / "no-doc").mkdir()
    (root / "skills" / "broken").mkdir()
    (root / "skills" / "broken" / "SKILL.md").write_text("---\nname: [unclosed\n---\nbody\n")
    (root / "skills" / "thin").mkdir()
    (root / "skills" / "thin" / "SKILL.md").write_text("---\nname: thin\n---\nbody\n")

    report = PluginValidator().validate(root)

    assert "SKILL" in report.codes("ok")
    assert "SKILL_MISSING" in report.codes("error")
    assert "SKILL_FRONTMATTER" in report.codes("error")
    assert "SKILL_FIELDS" in report.codes("warning")


def test_undecodable_skill_is_reported(plugins_dir):
    root = write_plugin(plugins_dir)
    (root / "skills" / "garbled").mkdir(parents=True)
    (root / "skills" / "garbled" / "SKILL.md").write_bytes(b"---\nname: \xff\xfe\n---\n")

    report = PluginValidator().validate(root)
    assert "SKILL_FRONTMATTER" in report.codes("error")


def _write_hooks(root, hooks):
    (root / "hooks").mkdir(exist_ok=True)
    (root / "hooks" / "hooks.json").write_text(json.dumps({"hooks": hooks}))


def test_valid_hooks(plugins_dir):
    root = write_plugin(plugins_dir)
    write_script(root / "hooks" / "pre-commit.sh")
    _write_hooks(root, {
        "PreToolUse": [
            {"matcher": "Bash", "hooks": [{"type": "command", "command": "${CLAUDE_PLUGIN_ROOT}/hooks/pre-commit.sh"}]}
        ]
    })

    report = PluginValidator().validate(root)

    assert report.errors == 0
    assert "HOOK" in report.codes("ok")


def test_hook_errors(plugins_dir):
    root = write_plugin(plugins_dir)
    write_script(root / "hooks" / "slow.sh", executable=False)
    _write_hooks(root, {
        "BeforeEverything": [],
        "PostToolUse": {"hooks": []},
        "PreToolUse": [
            {"script": "old.sh", "hooks": []},
            {"hooks": [{"type": "command", "command": "${CLAUDE_PLUGIN_ROOT}/hooks/missing.sh"}]},
            {"hooks": [{"type": "command", "command": "${CLAUDE_PLUGIN_ROOT}/hooks/slow.sh"}]},
            {"hooks": [{"type": "prompt"}]},
        ],
        "Stop": [{"hooks": [{"type": "command", "command": "./hooks/slow.sh"}]}],
    })

    report = PluginValidator().validate(root)
    errors = report.codes("error")

    assert "HOOK_EVENT" in errors
    assert "HOOK_STRUCTURE" in errors
    assert "HOOK_DEPRECATED" in errors
    assert "HOOK_SCRIPT_MISSING" in errors
    assert "HOOK_SCRIPT_MODE" in errors
    assert "HOOK_COMMAND" in errors
    assert "SCRIPT_MODE" in errors
    assert "HOOK_ROOT_VAR" in report.codes("warning")


def test_hook_script_style(plugins_dir):
    root = write_plugin(plugins_dir)
    write_script(
        root / "hooks" / "style.sh",
        "#!/bin/sh\nfunction check {\n  if [[ -n \"$1\" ]]; then echo y; fi\n}\n",
    )

    report = PluginValidator().validate(root)
    warnings = report.codes("warning")

    assert "SCRIPT_SHEBANG" in warnings
    assert warnings.count("SCRIPT_POSIX") == 2


def test_posix_character_class_is_not_flagged(plugins_dir):
    root = write_plugin(plugins_dir)
    write_script(root / "hooks" / "grep.sh", "#!/usr/bin/env bash\ngrep -E '[[:space:]]' file\n")

    report = PluginValidator().validate(root)
    assert "SCRIPT_POSIX" not in report.codes()
