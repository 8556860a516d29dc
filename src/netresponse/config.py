"""Configuration management with XDG paths, atomic writes, and precedence resolution.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.netresponse/`` on macOS and Windows.  See :func:`get_config_dir`
  and :func:`get_cache_dir`.
* **Global config** -- a single :class:`~netresponse.models.GlobalConfig`
  JSON file with the default cache policy, retry policy, request settings
  and output format.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config and global config.

File writes go through :func:`_atomic_write` (temp file, then rename).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from netresponse.exceptions import ConfigError
from netresponse.models import CacheStrategy, GlobalConfig

_APP_NAME = "netresponse"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "netresponse.json"

ENV_CACHE_STRATEGY = "NETRESPONSE_CACHE_STRATEGY"
ENV_CACHE_DIR = "NETRESPONSE_CACHE_DIR"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from *env_var*, falling back to ``$HOME/<segments>``."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/netresponse/`` (default
    ``~/.config/netresponse/``).  Elsewhere: ``~/.netresponse/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the response cache directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CACHE_HOME/netresponse/`` (default
    ``~/.cache/netresponse/``).  Elsewhere: ``~/.netresponse/cache/``.
    Its contents can be deleted at any time.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/netresponse/`` (default
    ``~/.local/share/netresponse/``).  Elsewhere: ``~/.netresponse/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* via a temp file in the same directory and ``os.replace``."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration.

    Returns:
        The stored :class:`~netresponse.models.GlobalConfig`, or defaults
        when no file exists.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist *config* atomically."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


def reset_global_config() -> None:
    """Delete the global config file so defaults apply again."""
    path = global_config_path()
    if path.is_file():
        path.unlink()


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load ``./netresponse.json`` if present.

    The file holds a partial :class:`~netresponse.models.GlobalConfig`
    (for example just ``{"cache": {"strategy": "cache_first"}}``) that is
    layered over the global config.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Precedence resolution ---


def resolve_config(
    cli_strategy: Optional[CacheStrategy] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_strategy``, ``cli_format``)
        2. Environment variables (``NETRESPONSE_CACHE_STRATEGY``,
           ``NETRESPONSE_CACHE_DIR``)
        3. Project config (``./netresponse.json``)
        4. User config (``~/.config/netresponse/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any layer holds an invalid value.
    """
    data = load_global_config().model_dump(mode="json")

    project = load_project_config()
    if project is not None:
        data = _deep_merge(data, project)

    env_strategy = os.environ.get(ENV_CACHE_STRATEGY)
    if env_strategy:
        data["cache"]["strategy"] = env_strategy.lower()
    env_cache_dir = os.environ.get(ENV_CACHE_DIR)
    if env_cache_dir:
        data["cache_dir"] = env_cache_dir

    if cli_strategy is not None:
        data["cache"]["strategy"] = CacheStrategy(cli_strategy).value
    if cli_format is not None:
        data["output"]["format"] = cli_format

    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def resolve_cache_dir(config: GlobalConfig) -> Path:
    """Return ``config.cache_dir`` if set, else :func:`get_cache_dir`."""
    if config.cache_dir:
        path = Path(config.cache_dir).expanduser()
        path.mkdir(parents=True, exist_ok=True)
        return path
    return get_cache_dir()
