"""
Logging Setup
==============
The game owns the whole terminal, so log output goes to a file.
"""

import os

from loguru import logger

DEFAULT_LOG_FILE = 'box_rush.log'


def setup_logging(path: str = None, level: str = None) -> None:
    """Replace loguru's stderr sink with a rotating file sink."""
    path = path or os.environ.get('BOX_RUSH_LOG', DEFAULT_LOG_FILE)
    level = (level or os.environ.get('BOX_RUSH_LOG_LEVEL', 'INFO')).upper()

    logger.remove()
    logger.add(
        path,
        level=level,
        rotation='1 MB',
        retention=3,
        format='{time:HH:mm:ss.SSS} | {level:<7} | {name}:{function} - {message}',
    )

