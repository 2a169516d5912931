"""Package logger.

Modules derive their own logger with ``logger.getChild(__name__)`` so that
every record flows through the single ``vaultmd`` logger configured here.
"""

import logging
import sys
from typing import Optional

logger = logging.getLogger("vaultmd")

_FORMAT = "%(levelname)s: %(message)s"
_VERBOSE_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


def setup(level: int = logging.INFO, stream: Optional[object] = None) -> None:
    """Attach a stderr handler to the package logger.

    Safe to call more than once; the previous handler is replaced.

    Args:
        level: Logging level for the package logger.
        stream: Output stream, defaults to ``sys.stderr``.
    """
    for handler in list(logger.handlers):
        if getattr(handler, "_vaultmd_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler._vaultmd_handler = True  # type: ignore[attr-defined]
    handler.setFormatter(
        logging.Formatter(
            _VERBOSE_FORMAT if level <= logging.DEBUG else _FORMAT
        )
    )
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
