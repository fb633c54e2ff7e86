"""Configuration management with XDG paths, atomic writes, and env overrides.

This module handles all persistent configuration for dolphin:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.dolphin/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`.
* **Global config** -- A single :class:`~dolphin.models.GlobalConfig`
  JSON file storing the API URL, token source, droplet defaults, and
  request/cache/output settings.
* **Precedence resolution** -- :func:`resolve_config` layers environment
  variables over the stored config.
* **Token resolution** -- :func:`resolve_token` reads the API token from
  the environment, a file, an interactive prompt, or the config itself.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional

from dolphin.exceptions import ConfigError
from dolphin.models import GlobalConfig

_APP_NAME = "dolphin"
_CONFIG_FILENAME = "config.json"

TOKEN_ENV_VARS = ("DOLPHIN_TOKEN", "DO_API_TOKEN")
API_URL_ENV_VAR = "DOLPHIN_API_URL"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/dolphin/`` (default ``~/.config/dolphin/``).
    On macOS/Windows: ``~/.dolphin/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the cache directory, creating it if necessary.

    Holds the response cache. Its contents can be safely deleted at any
    time.

    On Linux/BSD: ``$XDG_CACHE_HOME/dolphin/`` (default ``~/.cache/dolphin/``).
    On macOS/Windows: ``~/.dolphin/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/dolphin/`` (default ``~/.local/share/dolphin/``).
    On macOS/Windows: ``~/.dolphin/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure
    the temp file is removed.
    """
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
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~dolphin.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def resolve_config(cli_format: Optional[str] = None) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_format``)
        2. Environment variables (``DOLPHIN_API_URL``)
        3. User config (``~/.config/dolphin/config.json``)
        4. Defaults
    """
    config = load_global_config()

    env_api_url = os.environ.get(API_URL_ENV_VAR)
    if env_api_url:
        config.api_url = env_api_url

    if cli_format is not None:
        config.output.format = cli_format

    return config


# --- Token resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts the user interactively (requires a TTY)
        - ``"token:VALUE"`` -- the literal value after the prefix

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Token file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read token file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for the API token: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("DigitalOcean API token: ")

    if source.startswith("token:"):
        return source[6:]

    raise ConfigError(f"Unknown token source format: {source}")


def resolve_token(config: GlobalConfig) -> str:
    """Return the API token for *config*.

    ``DOLPHIN_TOKEN`` and ``DO_API_TOKEN`` take precedence over the
    configured ``token_source``.

    Raises:
        ConfigError: If no token can be found, or the token is empty.
    """
    for var in TOKEN_ENV_VARS:
        value = os.environ.get(var)
        if value:
            return value

    if config.token_source is None:
        raise ConfigError(
            "No API token configured. Set DOLPHIN_TOKEN or run "
            "'dolphin config set token_source env:MY_TOKEN_VAR'."
        )

    token = resolve_credential(config.token_source)
    if not token:
        raise ConfigError(f"Empty API token (source: {config.token_source})")
    return token
