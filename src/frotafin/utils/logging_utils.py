"""Logging setup for the command line entry point."""

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_LEVEL = "WARNING"


def configure_logging(level: Optional[str] = None, verbose: bool = False) -> None:
    """Configure the root ``frotafin`` logger.

    The level comes from ``level``, then FROTAFIN_LOG_LEVEL, then WARNING.
    ``verbose`` forces DEBUG. Log lines go to stderr so command output
    stays clean.
    """
    if verbose:
        resolved = "DEBUG"
    else:
        resolved = (level or os.environ.get("FROTAFIN_LOG_LEVEL") or DEFAULT_LEVEL).upper()

    logger = logging.getLogger("frotafin")
    logger.setLevel(getattr(logging, resolved, logging.WARNING))
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
