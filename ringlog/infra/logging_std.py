from __future__ import annotations

import logging
from typing import Any


_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s | %(message)s"


def configure_logging(
    *,
    level: str = "INFO",
    fmt: str = _DEFAULT_FMT,
) -> None:
    """
    Idempotent-ish logging config for the CLI.
    Importing ringlog never touches logging config; only this does.
    """
    root = logging.getLogger()
    if root.handlers:
        # Host app or test runner already configured it.
        return
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=fmt)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_kv(logger: logging.Logger, msg: str, *, level: int = logging.INFO, **kv: Any) -> None:
    if not kv:
        logger.log(level, msg)
        return
    extra = " ".join([f"{k}={kv[k]!r}" for k in sorted(kv.keys())])
    logger.log(level, "%s | %s", msg, extra)
