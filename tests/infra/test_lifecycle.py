from __future__ import annotations

import sys
from pathlib import Path

import deal
import pytest

from ringlog.app import open_log
from ringlog.config import LogConfig
from ringlog.lifecycle import Lifecycle
from ringlog.log import Log


def test_terminate_runs_handlers_once() -> None:
    lc = Lifecycle()
    calls: list[str] = []
    lc.on_shutdown(lambda: calls.append("close"))
    assert lc.terminate() is True
    assert lc.terminate() is False
    assert calls == ["close"]
    assert lc.terminated is True


def test_fatal_then_terminate_runs_close_once() -> None:
    lc = Lifecycle()
    calls: list[str] = []
    lc.on_fatal(lambda exc: calls.append(f"fatal:{exc}"))
    lc.on_shutdown(lambda: calls.append("close"))

    assert lc.fatal(RuntimeError("x")) is True
    assert lc.terminate() is False
    assert lc.fatal(RuntimeError("y")) is False
    assert calls == ["fatal:x", "close"]


def test_failing_handler_does_not_block_others() -> None:
    lc = Lifecycle()
    calls: list[str] = []

    def _bad() -> None:
        raise RuntimeError("handler down")

    lc.on_shutdown(_bad)
    lc.on_shutdown(lambda: calls.append("ok"))
    lc.terminate()
    assert calls == ["ok"]


def test_handler_must_be_callable() -> None:
    with pytest.raises(deal.PreContractError):
        Lifecycle().on_shutdown("nope")  # type: ignore[arg-type]


def test_bound_log_records_fatal_and_closes(tmp_path: Path) -> None:
    p = tmp_path / "Log.txt"
    lc = Lifecycle()
    log = Log(p)
    log.bind(lc)
    log.notification("before crash")

    try:
        raise ValueError("unhandled")
    except ValueError as exc:
        lc.fatal(exc)

    assert log.closed is True
    text = p.read_text(encoding="utf-8")
    assert "before crash" in text
    assert "[Error] at " in text
    assert "ValueError: unhandled" in text

    # graceful-exit path afterwards must be a no-op
    lc.terminate()
    log.close()


def test_install_and_uninstall_restore_excepthook() -> None:
    lc = Lifecycle()
    before = sys.excepthook
    lc.install()
    try:
        assert sys.excepthook != before
        lc.install()
    finally:
        lc.uninstall()
    assert sys.excepthook == before


def test_excepthook_triggers_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    lc = Lifecycle()
    seen: list[BaseException] = []
    lc.on_fatal(seen.append)
    monkeypatch.setattr(sys, "__excepthook__", lambda *a: None)
    lc._prev_excepthook = None

    exc = RuntimeError("crash")
    lc._excepthook(RuntimeError, exc, None)
    assert seen == [exc]
    assert lc.terminated is True


def test_open_log_composition_root(tmp_path: Path) -> None:
    lc = Lifecycle()
    cfg = LogConfig(path=tmp_path / "app" / "Log.txt")
    log = open_log(cfg, lifecycle=lc)
    assert log.get_path() == str(tmp_path / "app" / "Log.txt")
    e = log.warning("hi")
    lc.terminate()
    assert log.closed is True
    assert e.render() in (tmp_path / "app" / "Log.txt").read_text(encoding="utf-8")


def test_sigterm_without_previous_handler_terminates_and_exits() -> None:
    lc = Lifecycle()
    calls: list[str] = []
    lc.on_shutdown(lambda: calls.append("close"))
    lc._prev_sigterm = None

    with pytest.raises(SystemExit) as info:
        lc._on_sigterm(15, None)

    assert info.value.code == 128 + 15
    assert calls == ["close"]
    assert lc.terminated is True


def test_sigterm_chains_previous_callable_handler() -> None:
    lc = Lifecycle()
    chained: list[int] = []
    lc._prev_sigterm = lambda signum, frame: chained.append(signum)

    lc._on_sigterm(15, None)

    assert chained == [15]
    assert lc.terminated is True
