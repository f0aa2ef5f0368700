"""Protocol definitions for dependency inversion."""

import threading
from typing import Protocol, List, Optional, Sequence
from pathlib import Path

from .models import RunResult, Verdict, VerifiableItem


class IProcessRunner(Protocol):
    """Interface for running the external verifier once."""

    def run(
        self,
        executable: Path,
        input_path: Path,
        timeout: float,
        cancel_event: Optional[threading.Event] = None
    ) -> RunResult:
        """Run ``executable <input_path>`` and capture its combined output."""
        ...


class IOutcomeClassifier(Protocol):
    """Interface for turning a run result into a verdict."""

    def classify(self, result: RunResult) -> Verdict:
        """Derive a verdict. Must be pure."""
        ...


class IRecordStore(Protocol):
    """Interface for the store owning item records and the batch log."""

    def reset_all(self) -> None:
        """Set every item to pending with empty output."""
        ...

    def mark_running(self, item_id: str) -> None:
        """Move one item to running; no-op if the id is gone."""
        ...

    def mark_result(self, item_id: str, verdict: Verdict, output: str) -> None:
        """Store a verdict and its output; no-op if the id is gone."""
        ...

    def mark_pending(self, item_id: str) -> None:
        """Return one item to pending; no-op if the id is gone."""
        ...

    def append_log(self, text: str) -> None:
        """Append text to the cumulative batch log."""
        ...

    def clear_log(self) -> None:
        """Start a fresh batch log."""
        ...

    @property
    def log(self) -> str:
        """The batch log so far."""
        ...

    def items(self) -> List[VerifiableItem]:
        """Snapshot of all records."""
        ...

    def selected(self) -> List[VerifiableItem]:
        """Snapshot of the selected records, in display order."""
        ...


class ICatalogScanner(Protocol):
    """Interface for discovering verifiable files in a folder."""

    def scan(self, folder: Path) -> Sequence[VerifiableItem]:
        """Return fresh, unselected items for each matching file."""
        ...


class ILogger(Protocol):
    """Interface for logging."""

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, **kwargs) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, **kwargs) -> None:
        """Log error message."""
        ...

    def exception(self, message: str, **kwargs) -> None:
        """Log exception with traceback."""
        ...


class IMetricsCollector(Protocol):
    """Interface for collecting metrics."""

    def start_timer(self, name: str) -> None:
        """Start a named timer."""
        ...

    def stop_timer(self, name: str) -> float:
        """Stop a named timer and return elapsed time."""
        ...

    def increment_counter(self, name: str, amount: int = 1) -> None:
        """Increment a counter."""
        ...

    def get_summary(self) -> dict:
        """Get summary of all metrics."""
        ...

    def format_summary(self) -> str:
        """Render the summary as text."""
        ...

    def elapsed_time(self) -> float:
        """Get total elapsed time since start."""
        ...
