"""Temporary capture files for verifier output."""

import tempfile
from pathlib import Path
from typing import List, Optional

from mcmas_runner.shared.logging import get_logger

logger = get_logger(__name__)


class CaptureStorage:
    """Manages the per-invocation files that collect a verifier's combined output.

    Output goes to a file rather than a pipe so nothing is lost when the
    process is killed mid-write.
    """

    PREFIX = "mcmas_output_"
    SUFFIX = ".txt"

    def __init__(self, base_dir: Optional[Path] = None):
        """
        Initialize capture storage.

        Args:
            base_dir: Scratch directory for capture files (defaults to system temp)
        """
        self.base_dir = Path(base_dir) if base_dir else Path(tempfile.gettempdir())
        self._logger = get_logger(__name__)

    def create_capture(self) -> Path:
        """
        Create a new, uniquely named, empty capture file.

        Returns:
            Path to the capture file

        Raises:
            OSError: If the scratch directory is not writable
        """
        self.base_dir.mkdir(parents=True, exist_ok=True)
        handle = tempfile.NamedTemporaryFile(
            prefix=self.PREFIX,
            suffix=self.SUFFIX,
            dir=self.base_dir,
            delete=False,
        )
        handle.close()
        path = Path(handle.name)
        self._logger.debug(f"Created capture file: {path}")
        return path

    def read_capture(self, path: Path) -> str:
        """
        Read the full text of a capture file.

        A missing or unreadable file yields an empty string.
        """
        try:
            return path.read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            self._logger.warning(f"Failed to read capture file {path}: {e}")
            return ""

    def discard(self, path: Path) -> None:
        """Delete a capture file if it still exists."""
        try:
            path.unlink(missing_ok=True)
            self._logger.debug(f"Removed capture file: {path}")
        except OSError as e:
            self._logger.error(f"Failed to remove capture file {path}: {e}")

    def list_captures(self) -> List[Path]:
        """List capture files currently present in the scratch directory."""
        if not self.base_dir.exists():
            return []
        return sorted(self.base_dir.glob(f"{self.PREFIX}*{self.SUFFIX}"))
