"""Configuration models and loading."""

import json
import os
from pathlib import Path

import httpx
from pydantic import BaseModel, Field, ValidationError

from core.exceptions import ConfigurationError

CONFIG_DIR = Path.home() / ".config" / "keyvault-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"

BACKEND_HOST_ENV = "AZURE_KEYVAULT_BACKEND_HOST"


class ProxySettings(BaseModel):
    port: int = 8080
    debug: bool = False
    # Name used in the Via header instead of the inbound host
    pseudonym: str | None = None


class BackendSettings(BaseModel):
    host: str = ""
    timeout: float = 60.0


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    backend: BackendSettings = Field(default_factory=BackendSettings)


def load_config() -> Config:
    """Load configuration from JSON file, creating default if needed.

    The backend host environment variable wins over the file.
    """
    config = _read_config_file()
    backend_host = os.environ.get(BACKEND_HOST_ENV)
    if backend_host:
        config.backend.host = backend_host
    return config


def resolve_backend_url(config: Config) -> httpx.URL:
    """Return the backend endpoint, failing if it is unset or not absolute."""
    if not config.backend.host:
        raise ConfigurationError(
            f"The required application setting {BACKEND_HOST_ENV} has not been set."
        )
    try:
        url = httpx.URL(config.backend.host)
    except httpx.InvalidURL as e:
        raise ConfigurationError(f"Invalid {BACKEND_HOST_ENV}: {e}") from e
    if not url.is_absolute_url or not url.host:
        raise ConfigurationError(
            f"{BACKEND_HOST_ENV} must be an absolute URL, got {config.backend.host!r}"
        )
    return url


def _read_config_file() -> Config:
    if not CONFIG_FILE.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        default = Config()
        CONFIG_FILE.write_text(default.model_dump_json(indent=2))
        return default

    try:
        data = json.loads(CONFIG_FILE.read_text())
        return Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = CONFIG_FILE.with_suffix(".json.bak")
        CONFIG_FILE.rename(backup)
        default = Config()
        CONFIG_FILE.write_text(default.model_dump_json(indent=2))
        return default
