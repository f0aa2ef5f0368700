"""Infrastructure layer package."""

from mcmas_runner.infrastructure.config import ConfigLoader, VerifierConfig, ResolvedPaths, resolve_paths
from mcmas_runner.infrastructure.process import ProcessRunner
from mcmas_runner.infrastructure.storage import CaptureStorage, VerificationRecordStore
from mcmas_runner.infrastructure.catalog import ModelScanner

__all__ = [
    "ConfigLoader",
    "VerifierConfig",
    "ResolvedPaths",
    "resolve_paths",
    "ProcessRunner",
    "CaptureStorage",
    "VerificationRecordStore",
    "ModelScanner",
]
