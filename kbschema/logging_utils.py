"""
Logging setup for kbschema entry points.

Library modules only create loggers; handlers are installed here, by the
application embedding kbschema, or by the command line tool.
"""

from __future__ import annotations

import logging
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Union[str, int] = logging.WARNING) -> None:
    """Send kbschema log records to stderr.

    Args:
        level: Log level name ('DEBUG', 'info', ...) or numeric level
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    package_logger = logging.getLogger("kbschema")
    package_logger.setLevel(level)
    package_logger.handlers = [handler]
    package_logger.propagate = False
