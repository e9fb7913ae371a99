"""Logging setup for the command line.

Log records go to stderr through rich so stdout only carries the
version or changelog.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LEVEL = "WARNING"
LEVEL_ENV_VAR = "LOG_LEVEL"


def resolve_level(level: str | None = None) -> int:
    """Map a level name (or ``$LOG_LEVEL``) to a logging level.

    Unknown names fall back to WARNING.
    """
    name = (level or os.environ.get(LEVEL_ENV_VAR) or DEFAULT_LEVEL).upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.WARNING


def setup_logging(level: str | None = None, console: Console | None = None) -> None:
    """Attach a rich handler to the ``vnext`` logger."""
    logger = logging.getLogger("vnext")
    logger.handlers.clear()
    logger.setLevel(resolve_level(level))
    logger.propagate = False

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
