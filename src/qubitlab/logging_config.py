"""
Logging setup for command-line runs.

Library modules log through ``logging.getLogger(__name__)`` and never
install handlers themselves.
"""
import logging
import sys
from typing import Union

LOG_FORMAT = '%(asctime)s %(levelname)-7s %(name)s: %(message)s'


def setup_logging(level: Union[int, str] = logging.WARNING) -> logging.Logger:
    """Send ``qubitlab`` records at ``level`` and above to stderr."""
    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger('qubitlab')
    logger.handlers[:] = [handler]
    logger.setLevel(level)
    return logger
