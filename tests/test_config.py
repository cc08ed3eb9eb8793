import json

from claudy.config import ClaudyConfig, ConfigStore


def test_defaults_without_files(tmp_path):
    store = ConfigStore(tmp_path, user_file=tmp_path / "missing.json")
    cfg = store.load()

    assert cfg.plugins_dir == "plugins"
    assert cfg.required_fields == ["name", "description", "version", "author"]
    assert "PreToolUse" in cfg.valid_hook_events
    assert store.marketplace_path == tmp_path / ".claude-plugin" / "marketplace.json"


def test_project_file_wins_over_user_file(tmp_path):
    user = tmp_path / "user.json"
    user.write_text(json.dumps({"marketplace_name": "user-hub"}))
    (tmp_path / ".claudy.json").write_text(json.dumps({"marketplace_name": "project-hub"}))

    assert ConfigStore(tmp_path, user_file=user).load().marketplace_name == "project-hub"


def test_unreadable_config_falls_back_to_defaults(tmp_path):
    (tmp_path / ".claudy.json").write_text("{broken")
    cfg = ConfigStore(tmp_path, user_file=tmp_path / "none.json").load()
    assert cfg == ClaudyConfig()


def test_env_log_level(tmp_path, monkeypatch):
    monkeypatch.setenv("CLAUDY_LOG_LEVEL", "debug")
    cfg = ConfigStore(tmp_path, user_file=tmp_path / "none.json").load()
    assert cfg.log_level == "DEBUG"


def test_update_persists(tmp_path):
    store = ConfigStore(tmp_path, user_file=tmp_path / "none.json")
    store.update(strict=True, unknown="ignored")

    saved = json.loads((tmp_path / ".claudy.json").read_text())
    assert saved["strict"] is True
    assert "unknown" not in saved
    assert ConfigStore(tmp_path, user_file=tmp_path / "none.json").load().strict


def test_default_user_file_is_module_setting(tmp_path, isolated_user_config):
    isolated_user_config.parent.mkdir(parents=True)
    isolated_user_config.write_text(json.dumps({"marketplace_name": "home-hub"}))

    store = ConfigStore(tmp_path)
    assert store.user_file == isolated_user_config
    assert store.load().marketplace_name == "home-hub"
