"""Logging setup shared by the web app and the CLI."""

import logging

from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Route all ``playmates`` loggers through a rich console handler."""
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO, which drowns out our own messages
    logging.getLogger("httpx").setLevel(logging.WARNING)
