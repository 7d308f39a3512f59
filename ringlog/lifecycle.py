from __future__ import annotations

import atexit
import logging
import signal
import sys
import threading
from types import TracebackType
from typing import Any, Callable, List, Optional, Type

import deal

logger = logging.getLogger(__name__)

ShutdownHandler = Callable[[], Any]
FatalHandler = Callable[[BaseException], Any]


class Lifecycle:
    """
    Delivers "about to terminate" and "fatal unhandled error" to registered handlers.

    Each notification fires at most once per instance, whichever path (atexit,
    excepthook, SIGTERM, explicit call) gets there first. A handler that raises
    is logged and the remaining handlers still run.
    """

    def __init__(self) -> None:
        self._shutdown_handlers: List[ShutdownHandler] = []
        self._fatal_handlers: List[FatalHandler] = []
        self._lock = threading.Lock()
        self._terminated = False
        self._fatal_seen = False
        self._installed = False
        self._prev_excepthook: Optional[Callable[..., Any]] = None
        self._prev_sigterm: Any = None

    @deal.pre(lambda self, handler: callable(handler), message="handler must be callable")
    def on_shutdown(self, handler: ShutdownHandler) -> None:
        self._shutdown_handlers.append(handler)

    @deal.pre(lambda self, handler: callable(handler), message="handler must be callable")
    def on_fatal(self, handler: FatalHandler) -> None:
        self._fatal_handlers.append(handler)

    @property
    def terminated(self) -> bool:
        return self._terminated

    @deal.post(lambda result: isinstance(result, bool))
    def terminate(self) -> bool:
        """Run shutdown handlers. Returns False if they already ran."""
        with self._lock:
            if self._terminated:
                return False
            self._terminated = True
        for handler in list(self._shutdown_handlers):
            self._run(handler)
        return True

    @deal.pre(lambda self, exc: isinstance(exc, BaseException), message="exc must be an exception")
    @deal.post(lambda result: isinstance(result, bool))
    def fatal(self, exc: BaseException) -> bool:
        """Run fatal handlers once, then terminate. Returns False if a fatal error was already handled."""
        with self._lock:
            if self._fatal_seen or self._terminated:
                return False
            self._fatal_seen = True
        for handler in list(self._fatal_handlers):
            self._run(handler, exc)
        self.terminate()
        return True

    @staticmethod
    def _run(handler: Callable[..., Any], *args: Any) -> None:
        try:
            handler(*args)
        except Exception:  # noqa: BLE001
            logger.error("lifecycle handler %r failed", handler, exc_info=True)

    # --- Host process wiring ---

    def install(self) -> None:
        """Hook atexit, sys.excepthook and SIGTERM (main thread only)."""
        if self._installed:
            return
        self._installed = True

        atexit.register(self.terminate)

        self._prev_excepthook = sys.excepthook
        sys.excepthook = self._excepthook

        if threading.current_thread() is threading.main_thread() and hasattr(signal, "SIGTERM"):
            try:
                self._prev_sigterm = signal.signal(signal.SIGTERM, self._on_sigterm)
            except (ValueError, OSError):
                logger.debug("SIGTERM hook not installed", exc_info=True)
                self._prev_sigterm = None

    def uninstall(self) -> None:
        if not self._installed:
            return
        self._installed = False

        atexit.unregister(self.terminate)

        if sys.excepthook == self._excepthook and self._prev_excepthook is not None:
            sys.excepthook = self._prev_excepthook
        self._prev_excepthook = None

        if self._prev_sigterm is not None:
            try:
                signal.signal(signal.SIGTERM, self._prev_sigterm)
            except (ValueError, OSError):
                logger.debug("SIGTERM hook not restored", exc_info=True)
            self._prev_sigterm = None

    def _excepthook(
        self,
        exc_type: Type[BaseException],
        exc: BaseException,
        tb: Optional[TracebackType],
    ) -> None:
        if not issubclass(exc_type, KeyboardInterrupt):
            self.fatal(exc)
        prev = self._prev_excepthook or sys.__excepthook__
        prev(exc_type, exc, tb)

    def _on_sigterm(self, signum: int, frame: Any) -> None:
        self.terminate()
        prev = self._prev_sigterm
        if callable(prev):
            prev(signum, frame)
            return
        raise SystemExit(128 + signum)
