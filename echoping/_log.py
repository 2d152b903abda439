from __future__ import annotations

import logging
from typing import Union

from rich.console import Console
from rich.logging import RichHandler

# ------------- Shared console and package logger
console = Console()
FORMAT = "%(message)s"
logger = logging.getLogger("echoping")


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Attach a rich handler to the package logger, replacing any previous one."""
    handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        markup=True,
        show_time=False,
    )
    handler.setFormatter(logging.Formatter(FORMAT, datefmt="[%X]"))
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
