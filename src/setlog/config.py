"""
Configuration management for Setlog.

Uses XDG base directories:
- Config: ~/.config/setlog/config.toml
- Data: ~/setlog/ (the store lives here)
"""

from pathlib import Path
from typing import Any
import os

# XDG defaults
DEFAULT_CONFIG_HOME = Path.home() / ".config"
DEFAULT_DATA_HOME = Path.home() / "setlog"


def get_config_dir() -> Path:
    """Get the config directory (XDG_CONFIG_HOME/setlog)."""
    base = Path(os.environ.get("XDG_CONFIG_HOME", DEFAULT_CONFIG_HOME))
    return base / "setlog"


def get_setlog_home() -> Path:
    """Get the setlog data directory (~/setlog or SETLOG_HOME)."""
    if env_home := os.environ.get("SETLOG_HOME"):
        return Path(env_home)
    return DEFAULT_DATA_HOME


def get_config_path() -> Path:
    """Get the path to config.toml."""
    return get_config_dir() / "config.toml"


def get_db_path() -> Path:
    """Get the path to setlog.db."""
    return get_setlog_home() / "setlog.db"


def ensure_dirs() -> None:
    """Ensure all required directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_setlog_home().mkdir(parents=True, exist_ok=True)


def load_config() -> dict[str, Any]:
    """
    Load configuration from config.toml.

    Returns default config if file doesn't exist. Sections missing from
    the file fall back to their defaults.
    """
    config_path = get_config_path()
    config = get_default_config()

    if not config_path.exists():
        return config

    # Lazy import tomli only when needed
    import tomli

    with open(config_path, "rb") as f:
        loaded = tomli.load(f)

    for section, values in loaded.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values
    return config


def get_default_config() -> dict[str, Any]:
    """Return default configuration."""
    return {
        "setlog": {
            "home": str(get_setlog_home()),
        },
        "form": {
            "default_category": "인물",  # Prefilled on a new setting
        },
        "display": {
            "color": True,
        },
        "logging": {
            "level": "WARNING",
        },
    }


def get_log_level(config: dict[str, Any] | None = None) -> str:
    """Resolve the log level from SETLOG_LOG_LEVEL or the config file."""
    if env_level := os.environ.get("SETLOG_LOG_LEVEL"):
        return env_level.upper()
    config = config or load_config()
    return str(config.get("logging", {}).get("level", "WARNING")).upper()
