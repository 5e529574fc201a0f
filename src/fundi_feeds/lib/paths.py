"""
Path utilities for the Fundi feeds engine.

Provides convenience functions for locating local storage directories.
"""

import os
import tempfile
from pathlib import Path


def temp_dir() -> Path:
    """
    Return the system temporary directory as a Path.

    Returns:
        Path object pointing to the system temp directory.
    """
    return Path(tempfile.gettempdir())


def cache_dir() -> Path:
    """
    Return the directory used for persisted local data.

    Honours FUNDI_FEEDS_CACHE_DIR, otherwise a ``fundi_feeds`` folder in
    the system temp directory.
    """
    configured = os.getenv("FUNDI_FEEDS_CACHE_DIR")
    if configured:
        return Path(configured).expanduser()
    return temp_dir() / "fundi_feeds"
