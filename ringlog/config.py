from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from ringlog.errors import ConfigError

logger = logging.getLogger(__name__)

MAX_ENTRY_COUNT = 100
MAX_FLUSH_INTERVAL_SECONDS = 60
MAX_FLUSH_INTERVAL_MESSAGES = 10

DEFAULT_APP_NAME = "ringlog"
DEFAULT_FILE_NAME = "Log.txt"

ENV_PREFIX = "RINGLOG_"


# =========================
# MODEL
# =========================


class LogConfig(BaseModel):
    """
    Everything that changes how a Log buffers, flushes and opens its file.

    `path=None` means "<user data dir>/Log.txt" for `app_name`.
    """

    app_name: str = Field(default=DEFAULT_APP_NAME, min_length=1)
    path: Optional[Path] = None
    max_entry_count: int = Field(default=MAX_ENTRY_COUNT, gt=0)
    max_flush_interval_seconds: float = Field(default=MAX_FLUSH_INTERVAL_SECONDS, gt=0)
    max_flush_interval_messages: int = Field(default=MAX_FLUSH_INTERVAL_MESSAGES, gt=0)
    fsync: bool = True
    truncate_on_open: bool = False
    echo_console: bool = False
    encoding: str = "utf-8"

    def resolved_path(self) -> Path:
        if self.path is not None:
            return Path(self.path).expanduser()
        return default_log_path(self.app_name)


# =========================
# DEFAULT PATH
# =========================


def user_data_dir(app_name: str = DEFAULT_APP_NAME) -> Path:
    """Per-user application data directory for `app_name`."""
    if sys.platform.startswith("win"):
        base = os.getenv("APPDATA") or str(Path.home() / "AppData" / "Roaming")
        return Path(base) / app_name
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / app_name
    xdg = os.getenv("XDG_DATA_HOME")
    base_path = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return base_path / app_name


def default_log_path(app_name: str = DEFAULT_APP_NAME) -> Path:
    return user_data_dir(app_name) / DEFAULT_FILE_NAME


# =========================
# LOADER
# =========================

# env var suffix -> config field
_ENV_FIELDS = {
    "APP_NAME": "app_name",
    "PATH": "path",
    "MAX_ENTRY_COUNT": "max_entry_count",
    "MAX_FLUSH_INTERVAL_SECONDS": "max_flush_interval_seconds",
    "MAX_FLUSH_INTERVAL_MESSAGES": "max_flush_interval_messages",
    "FSYNC": "fsync",
    "TRUNCATE_ON_OPEN": "truncate_on_open",
    "ECHO_CONSOLE": "echo_console",
    "ENCODING": "encoding",
}


def _read_raw_yaml(path: Path, *, strict: bool) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError as exc:
        if strict:
            raise ConfigError(f"config file not found: {path}") from exc
        logger.warning("config file not found, using defaults: %s", path)
        return {}
    except (OSError, yaml.YAMLError) as exc:
        if strict:
            raise ConfigError(f"cannot read config file: {path}") from exc
        logger.error("error reading config file, using defaults: %s", path, exc_info=True)
        return {}

    if not isinstance(data, dict):
        if strict:
            raise ConfigError(f"config root must be a mapping: {path}")
        logger.error("config root is not a mapping, using defaults: %s", path)
        return {}

    # Accept both a bare mapping and one nested under "log:".
    section = data.get("log", data)
    if not isinstance(section, dict):
        if strict:
            raise ConfigError(f"'log' section must be a mapping: {path}")
        logger.error("config 'log' section is not a mapping, using defaults: %s", path)
        return {}
    return dict(section)


def _env_overrides() -> Dict[str, str]:
    out: Dict[str, str] = {}
    for suffix, field_name in _ENV_FIELDS.items():
        value = os.getenv(ENV_PREFIX + suffix)
        if value is not None and value != "":
            out[field_name] = value
    return out


def load_config(
    path: Optional[Path | str] = None,
    *,
    env_file: Optional[Path | str] = None,
    strict: bool = False,
) -> LogConfig:
    """
    Build a LogConfig from YAML + environment.

    Precedence: defaults < YAML file < RINGLOG_* env vars.
    `path=None` falls back to $RINGLOG_CONFIG, then to pure defaults.
    With strict=False a broken file or invalid values log and fall back to
    defaults; with strict=True they raise ConfigError.
    """
    if env_file is not None:
        load_dotenv(env_file, override=False)

    raw: Dict[str, Any] = {}
    config_path = path if path is not None else os.getenv(ENV_PREFIX + "CONFIG")
    if config_path:
        raw.update(_read_raw_yaml(Path(config_path), strict=strict))
    raw.update(_env_overrides())

    try:
        cfg = LogConfig.model_validate(raw)
    except ValidationError as exc:
        if strict:
            raise ConfigError(f"invalid log config: {exc}") from exc
        logger.error("invalid log config, using defaults: %s", exc)
        return LogConfig()

    logger.debug("log config loaded from %s", config_path or "<defaults>")
    return cfg
