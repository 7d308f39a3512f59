from __future__ import annotations

import argparse

from ringlog.cli.commands._config import config_from_args
from ringlog.entry import Entry, Severity
from ringlog.infra.logging_std import configure_logging, get_logger, log_kv
from ringlog.log import Log


def register(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("write", help="Append one entry to the log file.")
    p.add_argument("message", nargs="+", help="Message text (joined with spaces).")
    p.add_argument(
        "--severity",
        default=Severity.NOTIFICATION.value,
        help="Notification | Warning | Error (case-insensitive).",
    )
    p.add_argument("--path", default=None, help="Log file (default: configured or <user data dir>/Log.txt).")
    p.set_defaults(_fn=_run)


def _run(args: argparse.Namespace) -> int:
    configure_logging(level="WARNING")
    lg = get_logger("ringlog.cli.write")

    severity = Severity.parse(args.severity)
    cfg = config_from_args(args)
    entry = Entry(" ".join(args.message), severity)

    with Log(cfg.resolved_path(), config=cfg) as log:
        log.write(entry)
        log_kv(lg, "write: ok", path=log.get_path(), severity=severity.value)
    return 0
