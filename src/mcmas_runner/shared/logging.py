"""Logging setup shared by the CLI and the library."""

import logging
import sys
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = 'mcmas_runner'
DEFAULT_FORMAT = '[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s'


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Install console and optional file handlers on ``name``.

    Console output goes to stderr at ``level`` so the batch log printed on
    stdout stays clean. The log file, when given, records everything from
    DEBUG up. Calling this again replaces the previous handlers.

    Args:
        name: Logger name (the package logger by default)
        level: Console level
        log_file: Optional file to write logs to; parent folders are created
        format_string: Custom format string

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt='%H:%M:%S')

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.setLevel(logging.DEBUG if log_file else level)
    # Children (mcmas_runner.*) log through these handlers only
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Loggers inside the package namespace inherit the handlers installed by
    ``setup_logger()``; any other name gets its own console handler on first use.
    """
    logger = logging.getLogger(name)
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + '.'):
        return logger
    if not logger.handlers:
        return setup_logger(name)
    return logger


class LoggerAdapter:
    """Wraps a standard logger as an ILogger; keyword arguments become record extras."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    @property
    def name(self) -> str:
        return self._logger.name

    def debug(self, message: str, **kwargs) -> None:
        self._logger.debug(message, extra=kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._logger.warning(message, extra=kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._logger.error(message, extra=kwargs)

    def exception(self, message: str, **kwargs) -> None:
        self._logger.exception(message, extra=kwargs)
