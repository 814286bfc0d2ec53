"""Send log records to stderr so the JSON bridge keeps stdout clean."""

import logging
import os
import sys

from octatools.utils.config import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV


def configure_logging(default_level: str = DEFAULT_LOG_LEVEL) -> int:
    """Apply the ``LOG_LEVEL`` level (or ``default_level``) and return it."""
    level = logging.getLevelName(os.environ.get(LOG_LEVEL_ENV, default_level).upper())
    if not isinstance(level, int):
        level = logging.getLevelName(default_level.upper())
    logging.basicConfig(
        level=level,
        format="%(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
        force=True,
    )
    return level
