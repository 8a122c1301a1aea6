"""Logging setup for reinitkbd.

Adds a TRACE level below DEBUG and a ``setup_logging`` helper shared by
both command-line entry points.

Levels (ascending):
    TRACE =  5  — every raw udev event, every presence scan result
    DEBUG = 10  — command lines, keyboards skipped during a scan
    INFO  = 20  — keyboards initialized, startup/shutdown (default)

Usage:
    import reinitkbd.log  # must be imported once before any logger is used
    logger = logging.getLogger(__name__)
    logger.trace("very noisy message")
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from pathlib import Path

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")

DEFAULT_LOG_FILE = '~/.reinitkbd.log'

LOG_FORMAT = '[%(asctime)s] %(levelname)-8s %(name)s: %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


def _trace(self: logging.Logger, message: object, *args: object, **kwargs: object) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)  # type: ignore[attr-defined]


# Patch Logger class once at import time
logging.Logger.trace = _trace  # type: ignore[attr-defined]


def setup_logging(debug: bool = False, log_file: str | None = None,
                  to_file: bool = True) -> logging.Logger:
    """Configure the ``reinitkbd`` logger.

    Args:
        debug: Show DEBUG messages on the console (TRACE is always filtered
            out of the console unless debug is on).
        log_file: Path to the log file (default: ~/.reinitkbd.log).
        to_file: Attach a rotating file handler. The attach command runs
            once per keyboard and only logs to stderr.
    """
    logger = logging.getLogger('reinitkbd')
    if logger.handlers:
        return logger

    logger.setLevel(TRACE if debug else logging.DEBUG)
    fmt = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    if to_file:
        log_path = Path(os.path.expanduser(log_file or DEFAULT_LOG_FILE))
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=10*1024*1024,  # 10 MB
                backupCount=5
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(fmt)
            logger.addHandler(file_handler)
        except OSError as e:
            print(f"Warning: Could not setup file logging: {e}", file=sys.stderr)

    # Console handler (warnings in production, everything in debug)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(TRACE if debug else logging.WARNING)
    console_handler.setFormatter(fmt)
    logger.addHandler(console_handler)

    return logger
