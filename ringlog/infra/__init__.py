# ringlog/infra/__init__.py
"""
Infra package: logging setup, console output, local clock.

Rule: nothing here imports ringlog.log or the CLI.
"""
