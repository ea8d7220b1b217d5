"""Configuration management — TOML config at ~/.config/smartspend/smartspend.toml."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import tomli_w

from smartspend.core.exceptions import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

_DEFAULT_CONFIG: dict[str, Any] = {
    "general": {
        "data_dir": "~/.local/share/smartspend",
        "log_level": "INFO",
    },
    "server": {
        "host": "127.0.0.1",
        "port": 5000,
        "cors_origins": ["http://localhost:3000", "http://localhost:5173"],
    },
    "auth": {
        "jwt_secret": "",
        "token_expiry_days": 7,
        "google_client_id": "",
    },
    "reminders": {
        "bill_days": 7,
        "warranty_days": 30,
        "due_soon_days": 3,
    },
    "display": {
        "date_format": "%b %d, %Y",
        "currency_symbol": "$",
    },
}

# Environment variables that override a (section, key) of the file config
_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "SMARTSPEND_DATA_DIR": ("general", "data_dir"),
    "SMARTSPEND_LOG_LEVEL": ("general", "log_level"),
    "SMARTSPEND_JWT_SECRET": ("auth", "jwt_secret"),
    "GOOGLE_CLIENT_ID": ("auth", "google_client_id"),
}


def get_config_dir() -> Path:
    """Return the config directory, creating it if needed."""
    config_dir = Path(os.environ.get("SMARTSPEND_CONFIG_DIR", "~/.config/smartspend")).expanduser()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    """Return the path to the config TOML file."""
    return get_config_dir() / "smartspend.toml"


def get_data_dir(config: dict[str, Any] | None = None) -> Path:
    """Return the data directory, creating it if needed."""
    if config is None:
        config = load_config()
    data_dir = Path(config.get("general", {}).get("data_dir", "~/.local/share/smartspend")).expanduser()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_upload_dir(config: dict[str, Any] | None = None) -> Path:
    """Return the directory uploaded avatars are written to."""
    upload_dir = get_data_dir(config) / "uploads" / "avatars"
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir


def load_config() -> dict[str, Any]:
    """Load configuration from TOML file, returning defaults if not found.

    Environment overrides are applied last.
    """
    return _apply_env(_load_file_config())


def _load_file_config() -> dict[str, Any]:
    config_path = get_config_path()
    config = _deep_copy_dict(_DEFAULT_CONFIG)
    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                user_config = tomllib.load(f)
            config = _merge_config(config, user_config)
        except Exception as e:
            raise ConfigError(f"Failed to load config: {e}") from e
    return config


def save_config(config: dict[str, Any]) -> None:
    """Save configuration to TOML file."""
    config_path = get_config_path()
    try:
        with open(config_path, "wb") as f:
            tomli_w.dump(config, f)
    except Exception as e:
        raise ConfigError(f"Failed to save config: {e}") from e


def update_config(**updates: Any) -> dict[str, Any]:
    """Load config, apply nested updates, save, and return the result.

    Usage: update_config(server={"port": 8080}, auth={"token_expiry_days": 1})

    Environment overrides are not written back to the file.
    """
    config = _load_file_config()
    for section, values in updates.items():
        if section not in config:
            config[section] = {}
        if isinstance(values, dict):
            config[section].update(values)
        else:
            config[section] = values
    save_config(config)
    return config


def _apply_env(config: dict[str, Any]) -> dict[str, Any]:
    for var, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if value:
            config.setdefault(section, {})[key] = value
    return config


def _merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge override into base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_config(base[key], value)
        else:
            base[key] = value
    return base


def _deep_copy_dict(d: dict[str, Any]) -> dict[str, Any]:
    """Simple deep copy for nested dicts of simple types."""
    result: dict[str, Any] = {}
    for k, v in d.items():
        if isinstance(v, dict):
            result[k] = _deep_copy_dict(v)
        elif isinstance(v, list):
            result[k] = list(v)
        else:
            result[k] = v
    return result


def set_value(dotted_key: str, raw: str) -> Any:
    """Set ``section.key`` from a command-line string and save it.

    Only keys present in the defaults are accepted; the value is converted
    to the default's type (lists are comma-separated).
    """
    section, _, key = dotted_key.partition(".")
    if section not in _DEFAULT_CONFIG or key not in _DEFAULT_CONFIG[section]:
        raise ConfigError(f"Unknown config key: {dotted_key}")

    default = _DEFAULT_CONFIG[section][key]
    if isinstance(default, bool):
        if raw.lower() not in ("true", "false"):
            raise ConfigError(f"{dotted_key} must be true or false")
        value: Any = raw.lower() == "true"
    elif isinstance(default, int):
        try:
            value = int(raw)
        except ValueError:
            raise ConfigError(f"{dotted_key} must be an integer") from None
    elif isinstance(default, list):
        value = [part.strip() for part in raw.split(",") if part.strip()]
    else:
        value = raw

    update_config(**{section: {key: value}})
    return value
