from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

import deal

from ringlog.errors import InvalidSeverity
from ringlog.infra.time_local import now_local

# Positional args: label, hour, minute, second, millisecond, message
DEFAULT_FORMAT = "[{0}] at {1}:{2}:{3}:{4} - {5}"


class Severity(str, Enum):
    NOTIFICATION = "Notification"
    WARNING = "Warning"
    ERROR = "Error"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: Any) -> "Severity":
        """
        Map a raw value from an untrusted boundary (CLI, config) to a Severity.

        Accepts a Severity, its label or member name in any case.
        Raises InvalidSeverity for anything else.
        """
        if isinstance(raw, Severity):
            return raw
        if isinstance(raw, str):
            key = raw.strip().lower()
            for sev in cls:
                if key in (sev.value.lower(), sev.name.lower()):
                    return sev
        raise InvalidSeverity(f"unknown severity: {raw!r}")


@deal.pre(lambda severity: isinstance(severity, Severity), message="severity must be a Severity")
@deal.post(lambda result: isinstance(result, str) and len(result) > 0, message="label must be non-empty")
def severity_label(severity: Severity) -> str:
    return severity.label


@dataclass(frozen=True, slots=True)
class Entry:
    """
    One log record.

    The message is trimmed at construction and the timestamp is the instant the
    entry was created, not the instant it reaches the file.
    """

    message: str
    severity: Severity = Severity.NOTIFICATION
    timestamp: datetime = field(default_factory=now_local)

    def __post_init__(self) -> None:
        object.__setattr__(self, "message", str(self.message).strip())
        if not isinstance(self.severity, Severity):
            object.__setattr__(self, "severity", Severity.parse(self.severity))

    @property
    def millisecond(self) -> int:
        return self.timestamp.microsecond // 1000

    def render(self, fmt: str = DEFAULT_FORMAT) -> str:
        ts = self.timestamp
        return fmt.format(
            severity_label(self.severity),
            ts.hour,
            ts.minute,
            ts.second,
            self.millisecond,
            self.message,
        )

    def __str__(self) -> str:
        return self.render()
