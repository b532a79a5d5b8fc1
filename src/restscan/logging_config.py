"""
restscan logging configuration.

Diagnostics go to stderr through rich so they never mix with a JSON
document written to stdout.

- RESTSCAN_DEBUG: enable debug logging (default: false)
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "restscan"


def setup_logging(debug: Optional[bool] = None) -> logging.Logger:
    if debug is None:
        debug = os.environ.get("RESTSCAN_DEBUG", "").lower() in ("true", "1", "yes")

    level = logging.DEBUG if debug else logging.INFO

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=debug,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(name)s] %(message)s"))
    logger.addHandler(handler)

    return logger


def get_logger(component: str) -> logging.Logger:
    """Logger for one component, e.g. get_logger("pipeline") -> restscan.pipeline."""
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")
