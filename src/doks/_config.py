"""Configuration management for doks.

Supports:
- Environment variables (DIGITALOCEAN_TOKEN, DOKS_API_URL, etc.)
- Config file (~/.doks/config.toml)
- Programmatic configuration
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


DEFAULT_BASE_URL = "https://api.digitalocean.com"
DEFAULT_TIMEOUT = 60.0
DEFAULT_MAX_RETRIES = 0
DEFAULT_POLL_INTERVAL = 10.0
DEFAULT_MAX_POLLS = 120

CONFIG_DIR = Path.home() / ".doks"
CONFIG_FILE = CONFIG_DIR / "config.toml"

_TRUTHY = ("1", "true", "yes")
_FALSY = ("0", "false", "no")


@dataclass
class DoksConfig:
    """Library configuration."""

    token: str | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    verify_ssl: bool = True
    debug: bool = False

    # Convergence polling
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_polls: int = DEFAULT_MAX_POLLS

    @classmethod
    def from_env(cls) -> DoksConfig:
        """Load configuration from environment variables."""
        return cls(
            token=os.getenv("DIGITALOCEAN_TOKEN") or os.getenv("DOKS_TOKEN"),
            base_url=os.getenv("DOKS_API_URL", DEFAULT_BASE_URL),
            timeout=float(os.getenv("DOKS_TIMEOUT", DEFAULT_TIMEOUT)),
            max_retries=int(os.getenv("DOKS_MAX_RETRIES", DEFAULT_MAX_RETRIES)),
            verify_ssl=os.getenv("DOKS_VERIFY_SSL", "true").lower() not in _FALSY,
            debug=os.getenv("DOKS_DEBUG", "").lower() in _TRUTHY,
            poll_interval=float(os.getenv("DOKS_POLL_INTERVAL", DEFAULT_POLL_INTERVAL)),
            max_polls=int(os.getenv("DOKS_MAX_POLLS", DEFAULT_MAX_POLLS)),
        )

    @classmethod
    def from_file(cls, path: Path | None = None) -> DoksConfig:
        """Load configuration from TOML file."""
        config_path = path or CONFIG_FILE

        if not config_path.exists():
            return cls()

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        return cls(
            token=data.get("token"),
            base_url=data.get("api_url", DEFAULT_BASE_URL),
            timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
            max_retries=int(data.get("max_retries", DEFAULT_MAX_RETRIES)),
            verify_ssl=data.get("verify_ssl", True),
            debug=data.get("debug", False),
            poll_interval=float(data.get("poll_interval", DEFAULT_POLL_INTERVAL)),
            max_polls=int(data.get("max_polls", DEFAULT_MAX_POLLS)),
        )

    @classmethod
    def load(cls) -> DoksConfig:
        """Load configuration with precedence: env > file > defaults."""
        config = cls.from_file()
        env_config = cls.from_env()

        if env_config.token:
            config.token = env_config.token
        if os.getenv("DOKS_API_URL"):
            config.base_url = env_config.base_url
        if os.getenv("DOKS_TIMEOUT"):
            config.timeout = env_config.timeout
        if os.getenv("DOKS_MAX_RETRIES"):
            config.max_retries = env_config.max_retries
        if os.getenv("DOKS_VERIFY_SSL"):
            config.verify_ssl = env_config.verify_ssl
        if os.getenv("DOKS_DEBUG"):
            config.debug = env_config.debug
        if os.getenv("DOKS_POLL_INTERVAL"):
            config.poll_interval = env_config.poll_interval
        if os.getenv("DOKS_MAX_POLLS"):
            config.max_polls = env_config.max_polls

        return config


def save_config(config: dict[str, Any], path: Path | None = None) -> None:
    """Save configuration to TOML file.

    The file is written with 0o600 permissions since it may hold the API token.
    """
    import tomli_w

    config_path = path or CONFIG_FILE
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    config_path.chmod(0o600)


def get_config_value(key: str) -> Any:
    """Get a single config value."""
    config = DoksConfig.load()
    key_mapping = {
        "api_url": "base_url",
    }
    attr_name = key_mapping.get(key, key)
    return getattr(config, attr_name, None)


def set_config_value(key: str, value: Any) -> None:
    """Set a single config value in the config file."""
    config_path = CONFIG_FILE

    if config_path.exists():
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    else:
        data = {}

    data[key] = value
    save_config(data, config_path)
