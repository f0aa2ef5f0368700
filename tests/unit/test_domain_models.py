"""
Unit tests for domain models.
"""

import pytest
from pathlib import Path

from mcmas_runner.domain.models import (
    BatchConfig,
    BatchSummary,
    ItemStatus,
    RunResult,
    Verdict,
    VerifiableItem,
)


class TestVerifiableItem:
    """Test VerifiableItem model."""

    def test_defaults(self):
        item = VerifiableItem(name="bit.ispl", path="/models/bit.ispl")

        assert item.path == Path("/models/bit.ispl")
        assert item.status is ItemStatus.PENDING
        assert item.output == ""
        assert not item.selected

    def test_ids_are_unique_for_equal_names(self):
        first = VerifiableItem(name="bit.ispl", path="/a/bit.ispl")
        second = VerifiableItem(name="bit.ispl", path="/a/bit.ispl")

        assert first.item_id != second.item_id

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            VerifiableItem(name="", path="/a/x.ispl")


class TestItemStatus:
    """Test status/verdict mapping."""

    @pytest.mark.parametrize("verdict", list(Verdict))
    def test_from_verdict_is_terminal(self, verdict):
        status = ItemStatus.from_verdict(verdict)
        assert status.value == verdict.value
        assert status.is_terminal

    def test_pending_and_running_not_terminal(self):
        assert not ItemStatus.PENDING.is_terminal
        assert not ItemStatus.RUNNING.is_terminal


class TestRunResult:
    def test_launch_failed_when_no_exit_code(self):
        result = RunResult(output="Error: missing", exit_code=None, elapsed_seconds=0.0)
        assert result.launch_failed

    def test_normal_exit_is_not_launch_failure(self):
        result = RunResult(output="", exit_code=1, elapsed_seconds=0.1)
        assert not result.launch_failed


class TestBatchConfig:
    def test_defaults_match_mcmas(self):
        config = BatchConfig()
        assert config.timeout_seconds == 10.0
        assert config.success_marker == "parsed successfully"
        assert config.failure_marker == "syntax error"
        assert config.success_exit_code == 0
        assert config.timeout_slack_seconds is None

    @pytest.mark.parametrize("kwargs", [
        {"timeout_seconds": 0},
        {"timeout_seconds": -1},
        {"success_marker": ""},
        {"failure_marker": ""},
        {"timeout_slack_seconds": -0.5},
        {"reset_delay_seconds": -1},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            BatchConfig(**kwargs)


class TestBatchSummary:
    def test_empty_summary(self):
        summary = BatchSummary()
        assert summary.is_empty
        assert summary.processed == 0
        assert not summary.all_passed

    def test_record_counts_each_verdict(self):
        summary = BatchSummary(total=4)
        for verdict in (Verdict.PASSED, Verdict.PASSED, Verdict.FAILED, Verdict.TIMED_OUT):
            summary.record(verdict)

        assert (summary.passed, summary.failed, summary.timed_out) == (2, 1, 1)
        assert summary.processed == summary.total
        assert not summary.all_passed

    def test_cancelled_is_never_all_passed(self):
        summary = BatchSummary(total=1, cancelled=True)
        summary.record(Verdict.PASSED)
        assert not summary.all_passed
