from __future__ import annotations

import argparse

from ringlog.config import LogConfig, load_config


def config_from_args(args: argparse.Namespace) -> LogConfig:
    """Load config from --config/--env-file and apply a per-command --path."""
    cfg = load_config(getattr(args, "config", None), env_file=getattr(args, "env_file", None))
    path = getattr(args, "path", None)
    if path:
        cfg = cfg.model_copy(update={"path": path})
    return cfg
