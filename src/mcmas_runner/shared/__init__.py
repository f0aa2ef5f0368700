"""Shared utilities package."""

from mcmas_runner.shared.logging import setup_logger, get_logger, LoggerAdapter
from mcmas_runner.shared.metrics import MetricsCollector
from mcmas_runner.shared.types import PathLike, LogListener

__all__ = [
    "setup_logger",
    "get_logger",
    "LoggerAdapter",
    "MetricsCollector",
    "PathLike",
    "LogListener",
]
