"""
Package-wide log setup.

Every module asks ``logger(__file__)`` for its logger; all of them share
one line format and live under the ``fundi_feeds`` namespace, so the CLI
can raise or lower their verbosity together.
"""

import logging
import os
from pathlib import Path

# LOG_LEVEL names a stdlib level; unknown names fall back to INFO
_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def logger(name: str) -> logging.Logger:
    """
    Return the ``fundi_feeds.<name>`` logger, attaching a stderr handler
    the first time it is requested.

    Passing ``__file__`` names the logger after the module, so lines read
    ``fundi_feeds.state`` rather than carrying the whole path.
    """
    if "/" in name or "\\" in name:
        name = Path(name).stem

    log = logging.getLogger(f"fundi_feeds.{name}")

    # Repeat calls must not stack handlers
    if not log.handlers:
        log.setLevel(getattr(logging, _LOG_LEVEL, logging.INFO))
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
        log.addHandler(handler)

    return log


def set_level(level: str | int) -> None:
    """Apply ``level`` to each ``fundi_feeds.*`` logger created so far."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    manager = logging.Logger.manager
    for name, log in list(manager.loggerDict.items()):
        if name.startswith("fundi_feeds.") and isinstance(log, logging.Logger):
            log.setLevel(level)
