"""Domain models for batch model verification."""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class Verdict(str, Enum):
    """Terminal classification of one verifier run."""

    PASSED = "passed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class ItemStatus(str, Enum):
    """Lifecycle state of a verifiable item."""

    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @classmethod
    def from_verdict(cls, verdict: Verdict) -> "ItemStatus":
        return cls(verdict.value)

    @property
    def is_terminal(self) -> bool:
        return self in (ItemStatus.PASSED, ItemStatus.FAILED, ItemStatus.TIMED_OUT)


def new_item_id() -> str:
    return uuid.uuid4().hex


@dataclass
class VerifiableItem:
    """One input file tracked through pending -> running -> verdict.

    The ``item_id`` is independent of ``name``: names may repeat across
    rescans, identities never do.
    """

    name: str
    path: Path
    item_id: str = field(default_factory=new_item_id)
    selected: bool = False
    status: ItemStatus = ItemStatus.PENDING
    output: str = ""

    def __post_init__(self):
        if not self.name:
            raise ValueError("Item name cannot be empty")
        self.path = Path(self.path)


@dataclass(frozen=True)
class RunResult:
    """Outcome of one verifier invocation. Never stored."""

    output: str
    exit_code: Optional[int]
    elapsed_seconds: float
    timed_out: bool = False
    cancelled: bool = False

    @property
    def launch_failed(self) -> bool:
        """True if the executable could not be started at all."""
        return self.exit_code is None and not self.timed_out and not self.cancelled


@dataclass(frozen=True)
class BatchConfig:
    """Per-batch settings handed to the orchestrator."""

    timeout_seconds: float = 10.0
    success_marker: str = "parsed successfully"
    failure_marker: str = "syntax error"
    success_exit_code: int = 0
    timeout_slack_seconds: Optional[float] = None
    reset_delay_seconds: float = 0.0

    def __post_init__(self):
        if self.timeout_seconds <= 0:
            raise ValueError("Timeout must be positive")
        if not self.success_marker:
            raise ValueError("Success marker cannot be empty")
        if not self.failure_marker:
            raise ValueError("Failure marker cannot be empty")
        if self.timeout_slack_seconds is not None and self.timeout_slack_seconds < 0:
            raise ValueError("Timeout slack cannot be negative")
        if self.reset_delay_seconds < 0:
            raise ValueError("Reset delay cannot be negative")


@dataclass
class BatchSummary:
    """Aggregate result of one batch run, rebuilt from scratch every run."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    timed_out: int = 0
    elapsed_seconds: float = 0.0
    log: str = ""
    cancelled: bool = False

    @property
    def processed(self) -> int:
        return self.passed + self.failed + self.timed_out

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    @property
    def all_passed(self) -> bool:
        return not self.is_empty and not self.cancelled and self.passed == self.total

    def record(self, verdict: Verdict) -> None:
        """Count one processed item."""
        if verdict is Verdict.PASSED:
            self.passed += 1
        elif verdict is Verdict.TIMED_OUT:
            self.timed_out += 1
        else:
            self.failed += 1
