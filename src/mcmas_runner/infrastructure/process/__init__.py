"""Subprocess supervision package."""

from mcmas_runner.infrastructure.process.runner import ProcessRunner

__all__ = ["ProcessRunner"]
