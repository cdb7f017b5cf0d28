"""Logging setup for command-line use.

Library modules only create module-level loggers; installing handlers is left
to the application, which calls ``configure_logging`` once at startup.
"""

import logging
import sys
from typing import Optional

from coachplanner.config import get_config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_NAME = "coachplanner-console"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a console handler to the package logger.

    Calling this more than once only updates the level.

    Args:
        level: Level name such as "DEBUG". Defaults to the configured level.

    Returns:
        The ``coachplanner`` package logger.
    """
    level_name = (level or get_config().log_level).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    package_logger = logging.getLogger("coachplanner")
    package_logger.setLevel(numeric_level)

    handler = next(
        (h for h in package_logger.handlers if h.get_name() == _HANDLER_NAME),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        package_logger.addHandler(handler)
    handler.setLevel(numeric_level)

    return package_logger
