"""Logging helpers for the CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: int | str = logging.INFO, *, debug: bool = False) -> None:
    """Route log records to stderr through Rich, once per process."""
    root = logging.getLogger()
    if root.handlers:
        return
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=debug,
        rich_tracebacks=debug,
    )
    logging.basicConfig(
        level=logging.DEBUG if debug else level,
        format="%(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[handler],
    )
