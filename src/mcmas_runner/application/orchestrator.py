"""Sequential batch verification."""

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Sequence

from mcmas_runner.application.classifier import OutcomeClassifier
from mcmas_runner.domain.exceptions import BatchInProgressError, ProcessLaunchError
from mcmas_runner.domain.models import (
    BatchConfig, BatchSummary, RunResult, Verdict, VerifiableItem
)
from mcmas_runner.domain.protocols import (
    IOutcomeClassifier, IProcessRunner, IRecordStore, ILogger, IMetricsCollector
)

RULE = "━" * 40

TIMEOUT_NOTICE = (
    "⏱️ TIMEOUT: Process exceeded {timeout:g} seconds and was terminated.\n\n"
    "This file may cause the verifier to hang."
)
NO_OUTPUT_NOTICE = "(verifier produced no output, exit code {exit_code})"

STATUS_LABELS = {
    Verdict.PASSED: "✅ PASSED",
    Verdict.FAILED: "❌ FAILED",
    Verdict.TIMED_OUT: "⏱️  TIMEOUT",
}


class BatchOrchestrator:
    """
    Verifies a selection of items one at a time.

    The calling thread owns all record-store writes. Each verifier run
    executes on a single worker thread and hands its RunResult back through
    a Future, so exactly one subprocess is in flight per batch and log lines
    for item i always precede those for item i+1.
    """

    def __init__(
        self,
        executable: Path,
        runner: IProcessRunner,
        store: IRecordStore,
        logger: ILogger,
        metrics: IMetricsCollector,
        classifier: Optional[IOutcomeClassifier] = None
    ):
        """
        Args:
            classifier: Fixed verdict policy; when omitted each batch builds
                one from the markers in its BatchConfig
        """
        self._executable = Path(executable)
        self._runner = runner
        self._store = store
        self._logger = logger
        self._metrics = metrics
        self._classifier = classifier
        self._cancel_event = threading.Event()
        self._batch_lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._batch_lock.locked()

    def cancel(self) -> None:
        """Abort the in-flight run and skip the rest of the queue."""
        if self.is_running:
            self._logger.warning("Cancellation requested")
        self._cancel_event.set()

    def run_batch(self, items: Sequence[VerifiableItem], config: BatchConfig) -> BatchSummary:
        """
        Verify ``items`` strictly in the given order.

        Per-item problems become verdicts; only a fatal spawn failure
        (ProcessLaunchError) escapes.

        Returns:
            BatchSummary; all-zero when ``items`` is empty

        Raises:
            BatchInProgressError: If another batch is already running
            ProcessLaunchError: If the OS cannot spawn processes
        """
        if not self._batch_lock.acquire(blocking=False):
            raise BatchInProgressError("A verification batch is already running")

        try:
            if not items:
                self._logger.warning("No files selected")
                self._store.append_log("\n⚠️  No files selected!\n")
                return BatchSummary(log=self._store.log)

            return self._run(list(items), config)
        finally:
            # Reset only after the batch so a cancel() issued just before it still applies
            self._cancel_event.clear()
            self._batch_lock.release()

    def _run(self, items: Sequence[VerifiableItem], config: BatchConfig) -> BatchSummary:
        classifier = self._classifier or OutcomeClassifier.from_batch_config(config)
        summary = BatchSummary(total=len(items))

        # Clear every displayed verdict at once before any run starts
        self._store.reset_all()
        if config.reset_delay_seconds > 0:
            time.sleep(config.reset_delay_seconds)

        self._logger.info(f"Starting batch of {len(items)} item(s), timeout={config.timeout_seconds:g}s")
        self._metrics.start_timer('batch')

        self._store.clear_log()
        self._store.append_log(
            f"🚀 Starting verification of {len(items)} file(s)...\n"
            f"⏱️  Timeout: {config.timeout_seconds:g} seconds per file\n\n"
        )

        aborted = True
        try:
            self._verify_items(items, config, classifier, summary)
            aborted = False
        finally:
            summary.elapsed_seconds = self._metrics.stop_timer('batch')
            self._append_final_summary(summary, aborted=aborted)
            summary.log = self._store.log

        self._logger.info(
            f"Batch finished in {summary.elapsed_seconds:.2f}s: passed={summary.passed} "
            f"failed={summary.failed} timed_out={summary.timed_out} cancelled={summary.cancelled}"
        )
        self._logger.debug(self._metrics.format_summary())
        return summary

    def _verify_items(
        self,
        items: Sequence[VerifiableItem],
        config: BatchConfig,
        classifier: IOutcomeClassifier,
        summary: BatchSummary
    ) -> None:
        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="mcmas-verify") as worker:
            for index, item in enumerate(items, start=1):
                if self._cancel_event.is_set():
                    summary.cancelled = True
                    break

                self._store.append_log(f"\n[{index}/{len(items)}] 🔄 Processing: {item.name}...\n")
                self._store.mark_running(item.item_id)

                self._metrics.start_timer('item')
                try:
                    result = self._await(worker.submit(
                        self._runner.run,
                        self._executable,
                        item.path,
                        config.timeout_seconds,
                        self._cancel_event,
                    ))
                except ProcessLaunchError as e:
                    self._metrics.stop_timer('item')
                    self._logger.error(f"Aborting batch: {e}")
                    self._store.mark_pending(item.item_id)
                    self._store.append_log(f"\n❌ FATAL: {e}\n")
                    raise
                elapsed = self._metrics.stop_timer('item')

                if result.cancelled:
                    self._store.mark_pending(item.item_id)
                    self._store.append_log(f"   ⛔ Cancelled after {elapsed:.2f}s\n")
                    summary.cancelled = True
                    break

                self._complete_item(item, result, elapsed, classifier, config, summary)

    def _await(self, future: Future) -> RunResult:
        """Suspend until the worker reports; Ctrl-C turns into a cancellation."""
        while True:
            try:
                return future.result()
            except KeyboardInterrupt:
                self.cancel()

    def _complete_item(
        self,
        item: VerifiableItem,
        result: RunResult,
        elapsed: float,
        classifier: IOutcomeClassifier,
        config: BatchConfig,
        summary: BatchSummary
    ) -> None:
        verdict = classifier.classify(result)
        output = self._record_output(result, config)
        self._store.mark_result(item.item_id, verdict, output)

        if result.launch_failed:
            self._metrics.increment_counter('launch_errors')
            self._store.append_log(f"\n❌ ERROR: {item.name}\n{output}\n")
        else:
            self._store.append_log(
                f"\n{RULE}\n"
                f"File: {item.name}\n"
                f"Status: {STATUS_LABELS[verdict]}\n"
                f"{RULE}\n"
                f"{output}\n"
            )

        reported = self._reported_verdict(verdict, elapsed, config)
        summary.record(reported)
        self._metrics.increment_counter(reported.value)

        if reported is Verdict.PASSED:
            self._store.append_log(f"   ✅ {item.name} passed in {elapsed:.2f}s\n")
        elif reported is Verdict.TIMED_OUT:
            self._store.append_log(f"   ⏱️  {item.name} timed out after {elapsed:.2f}s\n")
        else:
            self._store.append_log(f"   ❌ {item.name} failed after {elapsed:.2f}s\n")

    def _record_output(self, result: RunResult, config: BatchConfig) -> str:
        """Output stored on the record; never empty for a terminal status."""
        if result.timed_out:
            return TIMEOUT_NOTICE.format(timeout=config.timeout_seconds)
        if not result.output.strip():
            return NO_OUTPUT_NOTICE.format(exit_code=result.exit_code)
        return result.output

    def _reported_verdict(self, verdict: Verdict, elapsed: float, config: BatchConfig) -> Verdict:
        """
        Verdict used for counting. With ``timeout_slack_seconds`` set, a
        failure that ran right up to the deadline counts as a timeout.
        """
        if (
            verdict is Verdict.FAILED
            and config.timeout_slack_seconds is not None
            and elapsed > config.timeout_seconds - config.timeout_slack_seconds
        ):
            return Verdict.TIMED_OUT
        return verdict

    def _append_final_summary(self, summary: BatchSummary, aborted: bool = False) -> None:
        if aborted:
            headline = "❌ Verification aborted!"
        elif summary.cancelled:
            headline = "⛔ Verification cancelled!"
        else:
            headline = "✅ Verification complete!"
        self._store.append_log(
            f"\n{RULE}\n"
            f"{headline}\n"
            f"   Total time: {summary.elapsed_seconds:.2f}s\n"
            f"   Passed: {summary.passed} | Failed: {summary.failed} | Timeout: {summary.timed_out}\n"
            f"{RULE}\n"
        )
