"""Model catalog package."""

from mcmas_runner.infrastructure.catalog.scanner import ModelScanner

__all__ = ["ModelScanner"]
