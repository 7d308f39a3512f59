"""
ringlog.cli.commands

Each module exposes register(sub) and keeps imports light.
"""
__all__ = [
    "write_cmd",
    "tail_cmd",
    "path_cmd",
]
