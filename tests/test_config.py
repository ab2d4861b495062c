"""Tests for configuration loading."""

from pathlib import Path

from setlog.config import get_config_path, get_db_path, get_log_level, load_config


def test_defaults_without_file():
    config = load_config()
    assert config["form"]["default_category"] == "인물"
    assert config["display"]["color"] is True


def test_paths_follow_environment(isolated_env: Path, tmp_path: Path):
    assert get_db_path() == isolated_env / "setlog.db"
    assert get_config_path() == tmp_path / "config" / "setlog" / "config.toml"


def test_file_overrides_merge_with_defaults():
    path = get_config_path()
    path.parent.mkdir(parents=True)
    path.write_text('[form]\ndefault_category = "세계관"\n', encoding="utf-8")

    config = load_config()

    assert config["form"]["default_category"] == "세계관"
    assert config["logging"]["level"] == "WARNING"


def test_log_level_env_wins(monkeypatch):
    monkeypatch.setenv("SETLOG_LOG_LEVEL", "debug")
    assert get_log_level() == "DEBUG"


def test_log_level_from_config():
    assert get_log_level({"logging": {"level": "info"}}) == "INFO"
