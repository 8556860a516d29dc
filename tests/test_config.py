"""Tests for netresponse.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from netresponse.config import (
    _atomic_write,
    _deep_merge,
    get_cache_dir,
    get_config_dir,
    get_data_dir,
    global_config_path,
    load_global_config,
    load_project_config,
    reset_global_config,
    resolve_cache_dir,
    resolve_config,
    save_global_config,
)
from netresponse.exceptions import ConfigError
from netresponse.models import CacheConfig, CacheStrategy, GlobalConfig, RetryConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write *data* as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPaths:
    def test_custom_xdg_dirs(self, isolated_config: Path) -> None:
        assert get_config_dir() == isolated_config / "config" / "netresponse"
        assert get_cache_dir() == isolated_config / "cache" / "netresponse"
        assert get_data_dir() == isolated_config / "data" / "netresponse"
        assert get_cache_dir().is_dir()

    def test_xdg_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("netresponse.config._is_xdg_platform", lambda: True)
        for var in ("XDG_CONFIG_HOME", "XDG_CACHE_HOME", "XDG_DATA_HOME"):
            monkeypatch.delenv(var, raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".config" / "netresponse"
        assert get_cache_dir() == tmp_path / ".cache" / "netresponse"
        assert get_data_dir() == tmp_path / ".local" / "share" / "netresponse"

    def test_fallback_paths(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("netresponse.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".netresponse"
        assert get_cache_dir() == tmp_path / ".netresponse" / "cache"
        assert get_data_dir() == tmp_path / ".netresponse" / "logs"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_file_with_content(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "test.txt"
        _atomic_write(target, "hello world")
        assert target.read_text(encoding="utf-8") == "hello world"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        target.write_text("old content", encoding="utf-8")
        _atomic_write(target, "new content")
        assert target.read_text(encoding="utf-8") == "new content"
        assert list(tmp_path.iterdir()) == [target]

    def test_no_temp_files_left_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        with patch("netresponse.config.os.fsync", side_effect=OSError("disk error")):
            with pytest.raises(OSError, match="disk error"):
                _atomic_write(target, "will fail")
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_load_returns_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.cache.strategy is CacheStrategy.NETWORK_FIRST
        assert config.cache.max_age_seconds == 300
        assert config.retry.max_attempts == 3

    def test_save_and_load_roundtrip(self, isolated_config: Path) -> None:
        config = GlobalConfig(
            cache=CacheConfig(strategy=CacheStrategy.CACHE_FIRST, max_age_seconds=60),
            retry=RetryConfig(max_attempts=5, factor=1.5),
        )
        save_global_config(config)

        loaded = load_global_config()

        assert loaded.cache == config.cache
        assert loaded.retry.max_attempts == 5
        assert loaded.retry.factor == 1.5

    def test_should_retry_is_not_persisted(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig())
        data = json.loads(global_config_path().read_text(encoding="utf-8"))
        assert "should_retry" not in data["retry"]
        assert data["cache"]["strategy"] == "network_first"

    def test_invalid_json_raises_config_error(self, isolated_config: Path) -> None:
        global_config_path().write_text("{broken", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_invalid_schema_raises_config_error(self, isolated_config: Path) -> None:
        _write_json(global_config_path(), {"cache": {"max_age_seconds": -1}})
        with pytest.raises(ConfigError):
            load_global_config()

    def test_reset(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(cache_dir="/tmp/x"))
        reset_global_config()
        assert not global_config_path().exists()
        assert load_global_config() == GlobalConfig()

    def test_reset_without_file(self, isolated_config: Path) -> None:
        reset_global_config()


# ---------------------------------------------------------------------------
# Project config and precedence
# ---------------------------------------------------------------------------


class TestProjectConfig:
    def test_missing_returns_none(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_loads_partial_config(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "netresponse.json", {"cache": {"strategy": "cache_first"}})
        assert load_project_config() == {"cache": {"strategy": "cache_first"}}

    def test_non_object_raises(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "netresponse.json", ["not", "an", "object"])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()

    def test_deep_merge(self) -> None:
        base = {"cache": {"strategy": "network_first", "max_age_seconds": 300}, "cache_dir": None}
        merged = _deep_merge(base, {"cache": {"strategy": "cache_only"}})
        assert merged == {"cache": {"strategy": "cache_only", "max_age_seconds": 300}, "cache_dir": None}
        assert base["cache"]["strategy"] == "network_first"


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_config() == GlobalConfig()

    def test_project_overrides_global(self, isolated_config: Path) -> None:
        save_global_config(
            GlobalConfig(cache=CacheConfig(strategy=CacheStrategy.CACHE_FIRST, max_age_seconds=60))
        )
        _write_json(isolated_config / "netresponse.json", {"cache": {"strategy": "cache_only"}})

        config = resolve_config()

        assert config.cache.strategy is CacheStrategy.CACHE_ONLY
        assert config.cache.max_age_seconds == 60

    def test_env_overrides_project(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_json(isolated_config / "netresponse.json", {"cache": {"strategy": "cache_only"}})
        monkeypatch.setenv("NETRESPONSE_CACHE_STRATEGY", "NETWORK_ONLY")
        monkeypatch.setenv("NETRESPONSE_CACHE_DIR", str(isolated_config / "elsewhere"))

        config = resolve_config()

        assert config.cache.strategy is CacheStrategy.NETWORK_ONLY
        assert config.cache_dir == str(isolated_config / "elsewhere")

    def test_cli_overrides_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NETRESPONSE_CACHE_STRATEGY", "network_only")

        config = resolve_config(cli_strategy=CacheStrategy.CACHE_WITH_EXPIRY, cli_format="json")

        assert config.cache.strategy is CacheStrategy.CACHE_WITH_EXPIRY
        assert config.output.format == "json"

    def test_invalid_env_value_raises(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NETRESPONSE_CACHE_STRATEGY", "sometimes")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            resolve_config()


class TestResolveCacheDir:
    def test_default_is_xdg_cache_dir(self, isolated_config: Path) -> None:
        assert resolve_cache_dir(GlobalConfig()) == isolated_config / "cache" / "netresponse"

    def test_override_is_created(self, isolated_config: Path) -> None:
        target = isolated_config / "custom-cache"
        assert resolve_cache_dir(GlobalConfig(cache_dir=str(target))) == target
        assert target.is_dir()
