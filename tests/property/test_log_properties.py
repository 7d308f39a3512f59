from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from tempfile import TemporaryDirectory

from hypothesis import given, settings, strategies as st

from ringlog.config import LogConfig
from ringlog.entry import Entry, Severity
from ringlog.log import Log


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 6, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now


# (seconds to advance before the write, severity)
_STEP = st.tuples(st.floats(min_value=0, max_value=90, allow_nan=False), st.sampled_from(list(Severity)))


@settings(max_examples=60)
@given(st.lists(_STEP, min_size=1, max_size=60))
def test_history_matches_debounce_model(steps: list[tuple[float, Severity]]) -> None:
    """
    Whatever the write/time interleaving, history equals the reference model:
    append, then clear when >= 10 buffered or >= 60 s since last sync.
    """
    # No pytest tmp_path fixture here: Hypothesis runs multiple examples per test.
    with TemporaryDirectory() as td:
        clock = FakeClock()
        log = Log(Path(td) / "Log.txt", config=LogConfig(fsync=False), clock=clock)

        model: list[Entry] = []
        last_sync = clock.now
        flushes = 0
        for i, (delay, sev) in enumerate(steps):
            clock.now = clock.now + timedelta(seconds=delay)
            e = Entry(f"m{i}", sev)
            log.write(e)

            model.append(e)
            if len(model) >= 10 or (clock.now - last_sync).total_seconds() >= 60:
                model.clear()
                last_sync = clock.now
                flushes += 1

            assert log.entries == tuple(model)
            assert log.last_synced_at == last_sync
            assert len(log.entries) <= 100

        assert log.stats().flushes == flushes
        log.close()

        lines = (Path(td) / "Log.txt").read_text(encoding="utf-8").splitlines()
        assert len(lines) == len(steps)


@settings(max_examples=30)
@given(st.integers(min_value=1, max_value=250), st.integers(min_value=1, max_value=40))
def test_history_never_exceeds_capacity(n_writes: int, capacity: int) -> None:
    with TemporaryDirectory() as td:
        cfg = LogConfig(max_entry_count=capacity, max_flush_interval_messages=10_000, fsync=False)
        log = Log(Path(td) / "Log.txt", config=cfg, clock=FakeClock())
        written = []
        for i in range(n_writes):
            e = Entry(f"m{i}", Severity.NOTIFICATION)
            written.append(e)
            log.write(e)
            assert len(log.entries) <= capacity
        assert log.entries == tuple(written[-capacity:])
        log.close()


@settings(max_examples=30)
@given(st.integers(min_value=0, max_value=9), st.integers(min_value=0, max_value=9))
def test_entries_survive_path_change(before: int, after: int) -> None:
    with TemporaryDirectory() as td:
        a = Path(td) / "a.txt"
        b = Path(td) / "b.txt"
        log = Log(a, config=LogConfig(fsync=False), clock=FakeClock())
        first = [log.notification(f"a{i}") for i in range(before)]
        log.set_path(b)
        second = [log.notification(f"b{i}") for i in range(after)]
        log.close()

        assert a.read_text(encoding="utf-8").splitlines() == [e.render() for e in first]
        assert b.read_text(encoding="utf-8").splitlines() == [e.render() for e in second]
