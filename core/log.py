"""
Logging setup: one console handler on the root logger, level from config or CLI.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"

_configured = False


def configure_logging(level: str | int = "INFO") -> None:
    """Install the console handler once; later calls only change the level."""
    global _configured
    root = logging.getLogger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root.setLevel(level)
    if _configured:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root.addHandler(handler)
    # matplotlib's font manager is chatty at DEBUG
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    _configured = True
