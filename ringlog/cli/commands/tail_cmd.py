from __future__ import annotations

import argparse
from pathlib import Path
from typing import List

from ringlog.cli.commands._config import config_from_args
from ringlog.infra.console import console_print


def register(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("tail", help="Print the last N lines of the log file.")
    p.add_argument("--n", type=int, default=10, help="How many lines to show.")
    p.add_argument("--path", default=None, help="Log file (default: configured or <user data dir>/Log.txt).")
    p.set_defaults(_fn=_run)


def read_tail(path: Path, n: int, *, encoding: str = "utf-8") -> List[str]:
    if n <= 0 or not path.exists():
        return []
    lines = path.read_text(encoding=encoding, errors="replace").splitlines()
    return lines[-n:]


def _run(args: argparse.Namespace) -> int:
    cfg = config_from_args(args)
    path = cfg.resolved_path()
    if not path.exists():
        console_print(f"ringlog: no log file at {path}")
        return 2
    for line in read_tail(path, args.n, encoding=cfg.encoding):
        console_print(line)
    return 0
