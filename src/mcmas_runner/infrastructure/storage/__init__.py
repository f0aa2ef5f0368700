"""Storage package."""

from mcmas_runner.infrastructure.storage.capture_storage import CaptureStorage
from mcmas_runner.infrastructure.storage.record_store import VerificationRecordStore

__all__ = ["CaptureStorage", "VerificationRecordStore"]
