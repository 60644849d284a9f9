from __future__ import annotations

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Configure Rich logging once per process.

    Later calls only adjust the root level so a CLI flag can still take effect
    after library modules have grabbed their loggers.
    """
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return

    console = Console(stderr=True)
    handler = RichHandler(console=console, rich_tracebacks=True, markup=False)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[handler],
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger"]
