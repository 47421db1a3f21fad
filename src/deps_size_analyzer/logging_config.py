"""Logging setup for the command line."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

# Resolution chatter goes to stderr so `--plain` reports and JSON stay pipeable.
_stderr = Console(stderr=True, emoji=False)


def _level(verbose: bool, log_level: str | None) -> int:
    if log_level:
        return getattr(logging, log_level.upper(), logging.WARNING)
    return logging.INFO if verbose else logging.WARNING


def setup_logging(verbose: bool = False, log_level: str | None = None) -> int:
    """Route `deps_size_analyzer` logs through Rich on stderr.

    Returns:
        The effective level.
    """
    level = _level(verbose, log_level)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=_stderr, show_path=False, markup=False)],
    )
    logging.getLogger("deps_size_analyzer").setLevel(level)
    # urllib3 logs every pooled connection at DEBUG.
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))
    return level
