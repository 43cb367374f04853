"""Tests for config.py — file loading, env overrides, precedence, env helpers."""
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from hashtrack.config import DEFAULT_ENDPOINT, Config, _env, _load_file, load_config
from hashtrack.exceptions import ConfigError

ENV_KEYS = (
    "HASHTRACK_ENDPOINT", "HASHTRACK_TOKEN_PATH", "HASHTRACK_TIMEOUT",
    "HASHTRACK_FEED_BUFFER", "HASHTRACK_FEED_RECONNECTS", "HASHTRACK_CONFIG",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


def _write(path: Path, text: str) -> Path:
    path.write_text(text)
    return path


# ── Config model ─────────────────────────────────────────────────────

def test_base_url_strips_trailing_slash():
    assert Config(endpoint="http://localhost:8080/").base_url == "http://localhost:8080"


def test_config_is_frozen():
    cfg = Config()
    with pytest.raises(ValidationError):
        cfg.endpoint = "http://elsewhere"


def test_token_path_expands_user():
    cfg = Config(token_path="~/tok")
    assert "~" not in str(cfg.token_path)


# ── load_config ──────────────────────────────────────────────────────

def test_missing_file_gives_defaults(tmp_path):
    cfg = load_config(config_path=tmp_path / "absent.yaml")
    assert cfg.endpoint == DEFAULT_ENDPOINT
    assert cfg.feed_buffer == 100


def test_custom_config_keeps_token_alongside(tmp_path):
    cfg = load_config(config_path=tmp_path / "config.yaml")
    assert cfg.token_path == tmp_path / "token"


def test_reads_yaml(tmp_path):
    path = _write(tmp_path / "config.yaml", "endpoint: http://yaml.test\nfeed_buffer: 5\n")
    cfg = load_config(config_path=path)

    assert cfg.endpoint == "http://yaml.test"
    assert cfg.feed_buffer == 5
    assert cfg.config_path == path


def test_relative_token_path_resolves_against_file(tmp_path):
    path = _write(tmp_path / "config.yaml", "token_path: secrets/tok\n")
    cfg = load_config(config_path=path)
    assert cfg.token_path == tmp_path / "secrets" / "tok"


def test_env_overrides_yaml(tmp_path, monkeypatch):
    path = _write(tmp_path / "config.yaml", "endpoint: http://yaml.test\n")
    monkeypatch.setenv("HASHTRACK_ENDPOINT", "http://env.test")
    monkeypatch.setenv("HASHTRACK_FEED_RECONNECTS", "0")

    cfg = load_config(config_path=path)
    assert cfg.endpoint == "http://env.test"
    assert cfg.feed_reconnects == 0


def test_endpoint_argument_wins(tmp_path, monkeypatch):
    monkeypatch.setenv("HASHTRACK_ENDPOINT", "http://env.test")
    cfg = load_config(endpoint="http://arg.test", config_path=tmp_path / "config.yaml")
    assert cfg.endpoint == "http://arg.test"


def test_config_path_from_env(tmp_path, monkeypatch):
    path = _write(tmp_path / "other.yaml", "timeout: 5\n")
    monkeypatch.setenv("HASHTRACK_CONFIG", str(path))
    assert load_config().timeout == 5.0


def test_dotenv_in_cwd_is_loaded(tmp_path):
    _write(tmp_path / ".env", "HASHTRACK_ENDPOINT=http://dotenv.test\n")
    with patch.dict(os.environ):
        cfg = load_config(config_path=tmp_path / "config.yaml")
    assert cfg.endpoint == "http://dotenv.test"


def test_invalid_yaml(tmp_path):
    path = _write(tmp_path / "config.yaml", "endpoint: [unclosed\n")
    with pytest.raises(ConfigError, match="Could not read config file"):
        load_config(config_path=path)


def test_non_mapping_yaml(tmp_path):
    path = _write(tmp_path / "config.yaml", "- a\n- b\n")
    with pytest.raises(ConfigError, match="must contain a mapping"):
        load_config(config_path=path)


def test_invalid_value(tmp_path, monkeypatch):
    monkeypatch.setenv("HASHTRACK_FEED_BUFFER", "0")
    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_config(config_path=tmp_path / "config.yaml")


def test_endpoint_with_bad_port(tmp_path):
    with pytest.raises(ConfigError, match="Invalid endpoint"):
        load_config(endpoint="http://host:notaport", config_path=tmp_path / "config.yaml")


def test_endpoint_needs_http_scheme():
    with pytest.raises(ValidationError):
        Config(endpoint="hashtrack.test")


# ── _load_file ───────────────────────────────────────────────────────

def test_load_empty_file(tmp_path):
    assert _load_file(_write(tmp_path / "config.yaml", "")) == {}


# ── _env helper ──────────────────────────────────────────────────────

def test_env_first_key(monkeypatch):
    monkeypatch.setenv("FOO", "bar")
    assert _env("FOO", "BAZ") == "bar"


def test_env_fallback_key(monkeypatch):
    monkeypatch.delenv("FOO", raising=False)
    monkeypatch.setenv("BAZ", "qux")
    assert _env("FOO", "BAZ") == "qux"


def test_env_default(monkeypatch):
    monkeypatch.delenv("FOO", raising=False)
    monkeypatch.delenv("BAZ", raising=False)
    assert _env("FOO", "BAZ", default="fallback") == "fallback"


def test_env_strips_quotes(monkeypatch):
    monkeypatch.setenv("FOO", '"quoted"')
    assert _env("FOO") == "quoted"
