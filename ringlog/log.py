# ringlog/log.py
from __future__ import annotations

import logging
import os
import threading
import traceback
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import IO, TYPE_CHECKING, Callable, Deque, List, Optional, Tuple, Union

import deal

from ringlog.config import LogConfig
from ringlog.entry import Entry, Severity
from ringlog.errors import LogIOError
from ringlog.infra.console import console_print
from ringlog.infra.time_local import Clock, elapsed_seconds, now_local

if TYPE_CHECKING:
    from ringlog.lifecycle import Lifecycle

logger = logging.getLogger(__name__)

PathInput = Union[str, "os.PathLike[str]"]
Observer = Callable[[Entry], None]


@dataclass(frozen=True, slots=True)
class LogStats:
    path: str
    entries_written: int
    write_failures: int
    flushes: int
    buffered: int
    last_synced_at: datetime


def format_exception(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


class Log:
    """
    Append-only text log with a bounded in-memory history and deferred fsync.

    Every write goes straight to the file (runtime-buffered). The file is only
    synced to disk when one of these holds:
    - `max_flush_interval_messages` entries are buffered since the last sync
    - `max_flush_interval_seconds` have elapsed since the last sync
    - the caller forces it (set_path, flush, close)

    A sync also clears the in-memory history, so `entries` only shows what was
    written since the last sync (capped at `max_entry_count`).

    State rule: file handle, history and last_synced_at change together under
    one lock; a failed sync leaves all three untouched.
    """

    @deal.pre(
        lambda self, path=None, *, config=None, clock=None, console=None: config is None or isinstance(config, LogConfig),
        message="config must be a LogConfig",
    )
    @deal.post(lambda result: result is None)
    @deal.raises(LogIOError)
    def __init__(
        self,
        path: Optional[PathInput] = None,
        *,
        config: Optional[LogConfig] = None,
        clock: Optional[Clock] = None,
        console: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._config: LogConfig = config or LogConfig()
        self._clock: Clock = clock or now_local
        self._console: Callable[[str], None] = console or console_print
        self._lock = threading.RLock()

        self._file: Optional[IO[str]] = None
        self._path: Optional[Path] = None
        # maxlen drops the oldest entry on append
        self._entries: Deque[Entry] = deque(maxlen=self._config.max_entry_count)
        self._last_synced_at: datetime = self._clock()
        self._observers: List[Observer] = []

        self._written = 0
        self._write_failures = 0
        self._flushes = 0

        if path is not None:
            self.set_path(path)

    # --- Path / file lifecycle ---

    @property
    def file_path(self) -> str:
        return self.get_path()

    @file_path.setter
    def file_path(self, value: PathInput) -> None:
        self.set_path(value)

    @deal.post(lambda result: isinstance(result, str))
    def get_path(self) -> str:
        """Absolute path of the open log file, or "" when nothing is open."""
        with self._lock:
            return str(self._path) if self._path is not None else ""

    @deal.pre(lambda self, path: isinstance(path, (str, os.PathLike)), message="path must be str or PathLike")
    @deal.pre(lambda self, path: str(path).strip() != "", message="path must be non-empty")
    @deal.post(lambda result: result is None)
    @deal.raises(LogIOError)
    def set_path(self, path: PathInput) -> None:
        target = Path(path).expanduser().absolute()
        mode = "w" if self._config.truncate_on_open else "a"
        with self._lock:
            if self._file is not None:
                self._close_file()

            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                fh = target.open(mode, encoding=self._config.encoding, newline="\n")
            except (OSError, ValueError) as exc:
                logger.error("cannot open log file %s", target, exc_info=True)
                raise LogIOError(f"cannot open log file: {target}") from exc

            self._file = fh
            self._path = target
            logger.debug("log file opened: %s (mode=%s)", target, mode)

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._file is None

    @deal.post(lambda result: result is None)
    @deal.raises(LogIOError)
    def close(self) -> None:
        """Flush and close the current file. Closing twice is a no-op."""
        with self._lock:
            if self._file is None:
                return
            path = self._path
            self._close_file()
            logger.debug("log file closed: %s", path)

    def _close_file(self) -> None:
        fh = self._file
        if fh is None:
            return
        flush_error: Optional[LogIOError] = None
        try:
            self._maybe_flush(force=True)
        except LogIOError as exc:
            flush_error = exc

        path = self._path
        self._file = None
        self._path = None
        try:
            fh.close()
        except (OSError, ValueError) as exc:
            logger.error("cannot close log file %s", path, exc_info=True)
            raise LogIOError(f"cannot close log file: {path}") from exc
        if flush_error is not None:
            raise flush_error

    # --- Writing ---

    @deal.pre(lambda self, entry: isinstance(entry, Entry), message="write expects an Entry")
    @deal.post(lambda result: result is None)
    @deal.raises(LogIOError)
    def write(self, entry: Entry) -> None:
        line = entry.render()
        if self._config.echo_console:
            self._echo(line)

        with self._lock:
            try:
                self._write_line(line)
            except LogIOError:
                # History must still show the entry even if the file did not get it.
                self._remember(entry)
                self._write_failures += 1
                raise
            self._remember(entry)
            self._maybe_flush()

        self._notify(entry)

    def notification(self, message: str) -> Entry:
        return self._log(message, Severity.NOTIFICATION)

    def warning(self, message: Union[str, BaseException]) -> Entry:
        return self._log(message, Severity.WARNING)

    def error(self, message: Union[str, BaseException]) -> Entry:
        return self._log(message, Severity.ERROR)

    def _log(self, message: Union[str, BaseException], severity: Severity) -> Entry:
        text = format_exception(message) if isinstance(message, BaseException) else message
        entry = Entry(text, severity, timestamp=self._clock())
        self.write(entry)
        return entry

    def _write_line(self, line: str) -> None:
        if self._file is None:
            logger.error("log write with no open file")
            raise LogIOError("log file is not open")
        try:
            self._file.write(line + "\n")
        except (OSError, ValueError) as exc:
            logger.error("log write failed for %s", self._path, exc_info=True)
            raise LogIOError(f"failed to write log entry to {self._path}") from exc

    def _remember(self, entry: Entry) -> None:
        self._entries.append(entry)
        self._written += 1

    # --- Flush policy ---

    @deal.post(lambda result: result is None)
    @deal.raises(LogIOError)
    def flush(self) -> None:
        """Sync the file now regardless of the debounce policy."""
        with self._lock:
            self._maybe_flush(force=True)

    def _maybe_flush(self, force: bool = False) -> bool:
        now = self._clock()
        if (
            not force
            and elapsed_seconds(self._last_synced_at, now) < self._config.max_flush_interval_seconds
            and len(self._entries) < self._config.max_flush_interval_messages
        ):
            return False

        if self._file is not None:
            try:
                self._file.flush()
                if self._config.fsync:
                    os.fsync(self._file.fileno())
            except (OSError, ValueError) as exc:
                logger.error("log sync failed for %s", self._path, exc_info=True)
                raise LogIOError(f"failed to sync log file {self._path}") from exc

        self._entries.clear()
        self._last_synced_at = now
        self._flushes += 1
        return True

    # --- Observers / collaborators ---

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Call `observer(entry)` after every successful write. Returns an unsubscribe function."""
        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    def _notify(self, entry: Entry) -> None:
        for observer in list(self._observers):
            try:
                observer(entry)
            except Exception:  # noqa: BLE001
                logger.error("log observer %r failed", observer, exc_info=True)

    def _echo(self, line: str) -> None:
        try:
            self._console(line)
        except Exception:  # noqa: BLE001
            logger.debug("console echo suppressed", exc_info=True)

    def bind(self, lifecycle: "Lifecycle") -> None:
        """Record fatal errors and close on shutdown."""
        lifecycle.on_fatal(self.error)
        lifecycle.on_shutdown(self.close)

    # --- Diagnostics ---

    @property
    def entries(self) -> Tuple[Entry, ...]:
        with self._lock:
            return tuple(self._entries)

    @property
    def last_synced_at(self) -> datetime:
        with self._lock:
            return self._last_synced_at

    @property
    def config(self) -> LogConfig:
        return self._config

    def stats(self) -> LogStats:
        with self._lock:
            return LogStats(
                path=str(self._path) if self._path is not None else "",
                entries_written=self._written,
                write_failures=self._write_failures,
                flushes=self._flushes,
                buffered=len(self._entries),
                last_synced_at=self._last_synced_at,
            )

    def __enter__(self) -> "Log":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
