from __future__ import annotations

import argparse
from typing import Sequence

from ringlog.cli.commands import path_cmd, tail_cmd, write_cmd
from ringlog.errors import LogError
from ringlog.infra.console import console_print


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ringlog",
        description="ringlog CLI (write, tail, path).",
    )
    p.add_argument("--config", default=None, help="YAML config file (default: $RINGLOG_CONFIG).")
    p.add_argument("--env-file", default=None, help="dotenv file with RINGLOG_* overrides.")
    sub = p.add_subparsers(dest="command", required=True)

    write_cmd.register(sub)
    tail_cmd.register(sub)
    path_cmd.register(sub)

    return p


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    fn = getattr(args, "_fn", None)
    if fn is None:
        parser.print_help()
        return 2

    try:
        rc = fn(args)
        return rc if isinstance(rc, int) else 0

    except KeyboardInterrupt:
        console_print("ringlog: CANCELLED (KeyboardInterrupt)", flush=True)
        return 130

    except OSError as e:
        console_print(f"ringlog: IO ERROR - {type(e).__name__}: {e}", flush=True)
        return 3

    except LogError as e:
        console_print(f"ringlog: ERROR - {type(e).__name__}: {e}", flush=True)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
