"""
Logging setup for symlistow.

Operator-facing status lines are printed directly. Tracing goes through
the "symlistow" logger: INFO and up to stderr, and everything down to
DEBUG into the optional log file.
"""

import logging
import sys
from pathlib import Path
from typing import Optional


LOGGER_NAME = "symlistow"

CONSOLE_FORMAT = "%(levelname_colored)s %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logger: Optional[logging.Logger] = None


class ColoredFormatter(logging.Formatter):
    """Formatter adding a colored level name for terminals."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[1;31m',
    }
    RESET = '\033[0m'

    def __init__(self, fmt: str, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if self.use_colors and levelname in self.COLORS:
            record.levelname_colored = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        else:
            record.levelname_colored = levelname
        return super().format(record)


def _console_handler(level: int) -> logging.Handler:
    # stdout carries status lines and --json output
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, use_colors=sys.stderr.isatty()))
    return handler


def _file_handler(log_file: str) -> logging.Handler:
    log_path = Path(log_file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, encoding='utf-8')
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
    return handler


def setup_logging(
    verbose: bool = False,
    log_file: Optional[str] = None,
    quiet: bool = False,
    propagate: bool = False,
) -> logging.Logger:
    """
    Configure the symlistow logger.

    Args:
        verbose: Show DEBUG records on the console
        log_file: Optional file receiving every record down to DEBUG
        quiet: No console handler at all
        propagate: Allow log propagation (useful for testing)

    Returns:
        Configured logger instance
    """
    global _logger

    handlers = []
    if not quiet:
        handlers.append(_console_handler(logging.DEBUG if verbose else logging.INFO))
    if log_file:
        handlers.append(_file_handler(log_file))

    logger = logging.getLogger(LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        logger.addHandler(handler)

    # The logger lets through whatever its most detailed handler wants
    logger.setLevel(min((h.level for h in handlers), default=logging.WARNING))
    logger.propagate = propagate

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the configured logger, setting up defaults on first use."""
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger
