"""Discovery of verifiable model files."""

from pathlib import Path
from typing import List

from mcmas_runner.domain.exceptions import CatalogError
from mcmas_runner.domain.models import VerifiableItem
from mcmas_runner.shared.logging import get_logger

logger = get_logger(__name__)


class ModelScanner:
    """Lists model files with a given extension in one folder (non-recursive)."""

    def __init__(self, extension: str = ".ispl"):
        if not extension:
            raise ValueError("Extension cannot be empty")
        self.extension = extension if extension.startswith('.') else f".{extension}"
        self._logger = get_logger(__name__)

    def scan(self, folder: Path) -> List[VerifiableItem]:
        """
        Scan a folder for model files.

        Args:
            folder: Models folder

        Returns:
            Fresh, unselected items sorted by file name

        Raises:
            CatalogError: If the folder is missing or unreadable
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise CatalogError(f"Models folder not found at: {folder}")

        try:
            paths = [
                entry for entry in folder.iterdir()
                if entry.suffix == self.extension and entry.is_file()
            ]
        except OSError as e:
            raise CatalogError(f"Error loading files from {folder}: {e}") from e

        items = [
            VerifiableItem(name=path.name, path=path.resolve())
            for path in sorted(paths, key=lambda p: p.name)
        ]
        self._logger.debug(f"Found {len(items)} *{self.extension} file(s) in {folder}")
        return items
