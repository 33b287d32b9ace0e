"""
Logging configuration for aic.

Diagnostics go to stderr through the standard logging module so they never
mix with the suggestions printed on stdout. User-facing messages go through
aic.output instead.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure the aic logger hierarchy.

    Args:
        level: Log level name. Defaults to WARNING; unknown names also
               fall back to WARNING.
    """
    log_level = (level or "WARNING").upper()
    if log_level not in VALID_LEVELS:
        sys.stderr.write(f"Warning: Invalid log level '{log_level}', defaulting to WARNING\n")
        log_level = "WARNING"

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger("aic")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, log_level))
    logger.propagate = False

    # The SDK's own request logs are only useful when debugging
    logging.getLogger("anthropic").setLevel(logging.DEBUG if log_level == "DEBUG" else logging.WARNING)