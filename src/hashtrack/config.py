"""Configuration management for the Hashtrack CLI.

Resolves the service endpoint and local paths from CLI overrides,
environment variables (optionally loaded from .env) and config.yaml.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import httpx
import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from hashtrack.exceptions import ConfigError


DEFAULT_ENDPOINT = "https://hashtrack.herokuapp.com"
CONFIG_DIR = Path.home() / ".config" / "hashtrack"


class Config(BaseModel):
    """Endpoint configuration, fixed for the lifetime of one invocation."""

    model_config = ConfigDict(frozen=True)

    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="Base URL of the Hashtrack service")
    config_path: Path = Field(default=CONFIG_DIR / "config.yaml", description="YAML config file location")
    token_path: Path = Field(default=CONFIG_DIR / "token", description="File holding the session token")
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    feed_buffer: int = Field(default=100, ge=1, description="Max tweets buffered between feed and display")
    feed_reconnects: int = Field(default=3, ge=0, description="Reconnect attempts after a dropped feed")
    reconnect_delay: float = Field(default=1.0, ge=0, description="Base delay between reconnects")

    @field_validator("endpoint")
    @classmethod
    def _check_endpoint(cls, value: str) -> str:
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as e:
            raise ValueError(f"Invalid endpoint {value!r}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"Endpoint must be an http(s) URL, got {value!r}")
        return value

    @field_validator("config_path", "token_path")
    @classmethod
    def _expand_user(cls, value: Path) -> Path:
        return Path(value).expanduser()

    @property
    def base_url(self) -> str:
        return self.endpoint.rstrip("/")


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _load_file(path: Path) -> dict[str, Any]:
    """Read config.yaml; a missing file is an empty config."""
    if not path.exists():
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _env_overrides() -> dict[str, str]:
    overrides = {
        "endpoint": _env("HASHTRACK_ENDPOINT"),
        "token_path": _env("HASHTRACK_TOKEN_PATH"),
        "timeout": _env("HASHTRACK_TIMEOUT"),
        "feed_buffer": _env("HASHTRACK_FEED_BUFFER"),
        "feed_reconnects": _env("HASHTRACK_FEED_RECONNECTS"),
    }
    return {k: v for k, v in overrides.items() if v}


def load_config(endpoint: str | None = None, config_path: str | Path | None = None) -> Config:
    """Build a Config from overrides, environment and the YAML file.

    Precedence, highest first: arguments, HASHTRACK_* variables,
    config.yaml, defaults. Relative token paths in the YAML file are
    resolved against the file's directory.
    """
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    path = Path(config_path or _env("HASHTRACK_CONFIG") or CONFIG_DIR / "config.yaml").expanduser()
    values: dict[str, Any] = _load_file(path)
    values.pop("config_path", None)

    if "token_path" in values:
        token_path = Path(str(values["token_path"])).expanduser()
        if not token_path.is_absolute():
            token_path = path.parent / token_path
        values["token_path"] = token_path
    elif config_path is not None:
        # A custom config file keeps its token alongside it
        values["token_path"] = path.parent / "token"

    values.update(_env_overrides())
    if endpoint:
        values["endpoint"] = endpoint

    try:
        return Config(config_path=path, **values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


@lru_cache(maxsize=8)
def get_config(endpoint: str | None = None, config_path: str | None = None) -> Config:
    """Load and cache the configuration for this invocation."""
    return load_config(endpoint, config_path)
