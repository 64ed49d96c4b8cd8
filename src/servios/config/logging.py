"""Logging setup for servios.

Modules log through ``logging.getLogger(__name__)``; this helper only
configures the ``servios`` package logger for applications that do not
configure logging themselves.
"""

import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    level: Union[int, str, None] = None,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """Attach a handler to the package logger and set its level.

    :param level: Logging level name or number; defaults to ``Settings.log_level``
    :param handler: Handler to install, a stderr stream handler if omitted
    :return: The configured ``servios`` logger
    """
    if level is None:
        from .settings import Settings

        level = Settings().log_level

    logger = logging.getLogger("servios")
    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if not any(h is handler for h in logger.handlers):
        logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger
