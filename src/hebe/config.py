"""
Configuration management for Hebe.

Loads defaults from environment variables or a .env file.
"""

import os
from pathlib import Path
from dataclasses import dataclass

from dotenv import load_dotenv

# Check common locations for .env
env_locations = [
    Path.home() / ".hebe" / ".env",
    Path.home() / ".config" / "hebe" / ".env",
    Path.cwd() / ".env",
]
for env_path in env_locations:
    if env_path.exists():
        load_dotenv(env_path)
        break


DEFAULT_CLUSTER = "localhost:9200"
DEFAULT_TIMEOUT = 30.0


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass
class HebeConfig:
    """Runtime defaults for commands and the shared HTTP client."""

    # Elasticsearch cluster used by the `es` commands
    cluster: str = DEFAULT_CLUSTER

    # Transport defaults
    timeout: float = DEFAULT_TIMEOUT
    proxy: str = ""  # empty means no explicit proxy
    insecure: bool = False

    debug: bool = False

    @classmethod
    def from_env(cls) -> "HebeConfig":
        """Load configuration from environment variables."""
        return cls(
            cluster=os.getenv("HEBE_CLUSTER", DEFAULT_CLUSTER),
            timeout=_env_float("HEBE_TIMEOUT", DEFAULT_TIMEOUT),
            proxy=os.getenv("HEBE_PROXY", ""),
            insecure=_env_bool("HEBE_INSECURE"),
            debug=_env_bool("HEBE_DEBUG"),
        )


# Global config instance
_config: HebeConfig | None = None


def get_config() -> HebeConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = HebeConfig.from_env()
    return _config


def set_config(config: HebeConfig | None) -> None:
    """Set the global configuration instance (None forces a reload)."""
    global _config
    _config = config
