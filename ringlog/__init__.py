# ringlog/__init__.py
"""
ringlog: embeddable file log with a short in-memory history and debounced fsync.

Rule: no CLI imports here, so `python -m ringlog.cli...` stays warning-free.
"""

from __future__ import annotations

from .app import open_log
from .config import LogConfig, default_log_path, load_config
from .entry import Entry, Severity, severity_label
from .errors import ConfigError, InvalidSeverity, LogError, LogIOError
from .lifecycle import Lifecycle
from .log import Log, LogStats

__all__ = [
    "open_log",
    "LogConfig",
    "default_log_path",
    "load_config",
    "Entry",
    "Severity",
    "severity_label",
    "ConfigError",
    "InvalidSeverity",
    "LogError",
    "LogIOError",
    "Lifecycle",
    "Log",
    "LogStats",
]
