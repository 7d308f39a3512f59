from __future__ import annotations


class LogError(Exception):
    """Base error for ringlog."""


class LogIOError(LogError, OSError):
    """Opening, writing, syncing or closing the log file failed."""


class InvalidSeverity(LogError, ValueError):
    """Raw severity value is not one of Notification/Warning/Error."""


class ConfigError(LogError):
    """Configuration file is unreadable or invalid (strict loading only)."""
