"""Configuration package."""

from mcmas_runner.infrastructure.config.loader import ConfigLoader, VerifierConfig
from mcmas_runner.infrastructure.config.paths import ResolvedPaths, resolve_paths

__all__ = ["ConfigLoader", "VerifierConfig", "ResolvedPaths", "resolve_paths"]
