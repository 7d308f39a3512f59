from __future__ import annotations

from datetime import datetime
from typing import Callable

Clock = Callable[[], datetime]


def now_local() -> datetime:
    """Return the local wall-clock time.

    Log lines show the hour a person would read off their own clock, so this is
    naive local time on purpose, not UTC.
    """
    return datetime.now()


def elapsed_seconds(since: datetime, now: datetime) -> float:
    """Seconds from `since` to `now`. Negative when the clock went backwards."""
    return (now - since).total_seconds()
