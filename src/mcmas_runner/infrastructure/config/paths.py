"""Resolution of the verifier binary and models folder, done once at startup."""

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from mcmas_runner.infrastructure.config.loader import VerifierConfig
from mcmas_runner.shared.logging import get_logger

logger = get_logger(__name__)

EXECUTABLE_NAME = "mcmas"
SYSTEM_FILES_DIR = "System Files"
MODELS_DIR = "Verification Models"


@dataclass(frozen=True)
class ResolvedPaths:
    """Concrete locations handed to the orchestrator and scanner."""

    executable: Path
    models_dir: Path
    warnings: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.warnings


def executable_candidates(base_dir: Path) -> List[Path]:
    """Fallback locations for the verifier binary, in search order."""
    candidates = [
        base_dir / EXECUTABLE_NAME,
        base_dir / SYSTEM_FILES_DIR / EXECUTABLE_NAME,
    ]
    on_path = shutil.which(EXECUTABLE_NAME)
    if on_path:
        candidates.append(Path(on_path))
    return candidates


def resolve_paths(config: VerifierConfig, base_dir: Optional[Path] = None) -> ResolvedPaths:
    """
    Resolve where the verifier and models live.

    Explicit configuration always wins. Otherwise the bundled layout
    (``<base>/mcmas`` or ``<base>/System Files/mcmas`` next to
    ``<base>/Verification Models``) is tried, then ``mcmas`` on PATH.
    Missing locations are reported as warnings; they never raise.

    Args:
        config: Loaded configuration
        base_dir: Root of the bundled layout (defaults to the working directory)

    Returns:
        ResolvedPaths with any warnings
    """
    base_dir = Path(base_dir) if base_dir else Path.cwd()
    warnings: List[str] = []

    if config.executable is not None:
        executable = config.executable
    else:
        candidates = executable_candidates(base_dir)
        executable = next((c for c in candidates if c.is_file()), candidates[1])

    models_dir = config.models_dir if config.models_dir is not None else base_dir / MODELS_DIR

    if not models_dir.is_dir():
        warnings.append(f"Models folder not found at: {models_dir}")
    if not executable.is_file():
        warnings.append(f"MCMAS binary not found at: {executable}")

    for message in warnings:
        logger.warning(message)

    return ResolvedPaths(executable=executable, models_dir=models_dir, warnings=tuple(warnings))
