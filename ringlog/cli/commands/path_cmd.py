from __future__ import annotations

import argparse

from ringlog.cli.commands._config import config_from_args
from ringlog.infra.console import console_print


def register(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("path", help="Print the resolved log file path.")
    p.set_defaults(_fn=_run)


def _run(args: argparse.Namespace) -> int:
    console_print(str(config_from_args(args).resolved_path()))
    return 0
