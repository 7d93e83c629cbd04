"""Logging setup for the finanza package.

All loggers live under the ``finanza`` namespace so one call to
:func:`setup_logging` controls the whole application.
"""

import logging
import sys
import time
from pathlib import Path

ROOT_LOGGER = "finanza"

# Used when setup_logging is called without log_file; "" means no file
DEFAULT_LOG_FILE = "finanza.log"

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    console_output: bool = True,
) -> logging.Logger:
    """Replace the handlers of the ``finanza`` logger.

    Safe to call more than once; the CLI does so after the settings file
    has been read.

    Args:
        level: Level name; unknown names fall back to INFO.
        log_file: File to append to. None uses DEFAULT_LOG_FILE and an
            empty string disables file output.
        console_output: Also log to stderr.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(numeric_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = []
    if log_file is None:
        log_file = DEFAULT_LOG_FILE
    if log_file:
        handlers.append(logging.FileHandler(Path(log_file), encoding="utf-8"))
    if console_output:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name`` inside the ``finanza`` namespace."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


class LogContext:
    """Log the start, duration and failure of an assistant request.

    Exceptions are logged and re-raised.
    """

    def __init__(self, logger: logging.Logger, operation: str, **context: object):
        self.logger = logger
        self.operation = operation
        self.context = context
        self.started = 0.0

    def __enter__(self) -> "LogContext":
        details = ", ".join(f"{k}={v}" for k, v in self.context.items())
        self.logger.debug(f"Starting {self.operation} ({details})")
        self.started = time.monotonic()
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> bool:
        elapsed = time.monotonic() - self.started
        if exc_type is not None:
            self.logger.error(
                f"{self.operation} failed after {elapsed:.1f}s: {exc_type.__name__}: {exc_val}",
                exc_info=True,
            )
        else:
            self.logger.debug(f"Finished {self.operation} in {elapsed:.1f}s")
        return False
