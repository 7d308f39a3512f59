from __future__ import annotations

import logging
from typing import Callable, Optional

from ringlog.config import LogConfig, load_config
from ringlog.infra.time_local import Clock
from ringlog.lifecycle import Lifecycle
from ringlog.log import Log

logger = logging.getLogger(__name__)


def open_log(
    config: Optional[LogConfig] = None,
    *,
    lifecycle: Optional[Lifecycle] = None,
    install: bool = False,
    clock: Optional[Clock] = None,
    console: Optional[Callable[[str], None]] = None,
) -> Log:
    """
    Composition root: build the application's Log and tie it to process lifetime.

    - config=None -> load_config() (RINGLOG_CONFIG / RINGLOG_* env, else defaults)
    - lifecycle=None -> a fresh Lifecycle
    - install=True -> hook atexit/excepthook/SIGTERM so the file is always closed
    """
    cfg = config if config is not None else load_config()
    log = Log(cfg.resolved_path(), config=cfg, clock=clock, console=console)

    lc = lifecycle if lifecycle is not None else Lifecycle()
    log.bind(lc)
    if install:
        lc.install()

    logger.info("ringlog ready: %s", log.get_path())
    return log
