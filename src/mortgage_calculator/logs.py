"""Logging setup shared by the CLI and the web server."""
from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str = "WARNING") -> None:
    """Send all log records to stderr through rich, replacing existing handlers."""
    root = logging.getLogger()
    root.setLevel(level.upper())
    root.handlers.clear()

    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
