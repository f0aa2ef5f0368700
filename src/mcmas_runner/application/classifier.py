"""Verdict derivation from a verifier run."""

from mcmas_runner.domain.models import BatchConfig, RunResult, Verdict


def classify(
    result: RunResult,
    success_marker: str,
    failure_marker: str,
    success_exit_code: int = 0
) -> Verdict:
    """
    Classify one run. Pure: no I/O, same input gives the same verdict.

    - TIMED_OUT whenever the run hit its deadline, whatever else happened
    - PASSED only if the exit code is the success code, the output contains
      the success marker and does not contain the failure marker
    - FAILED otherwise, including launch failures and cancelled runs

    The verifier may exit 0 while printing a syntax error, and truncated
    output must never read as success, so all three signals have to agree.
    """
    if result.timed_out:
        return Verdict.TIMED_OUT

    if (
        result.exit_code is not None
        and result.exit_code == success_exit_code
        and success_marker in result.output
        and failure_marker not in result.output
    ):
        return Verdict.PASSED

    return Verdict.FAILED


class OutcomeClassifier:
    """Classifier bound to one verifier's markers. Implements IOutcomeClassifier."""

    def __init__(
        self,
        success_marker: str = "parsed successfully",
        failure_marker: str = "syntax error",
        success_exit_code: int = 0
    ):
        self.success_marker = success_marker
        self.failure_marker = failure_marker
        self.success_exit_code = success_exit_code

    @classmethod
    def from_batch_config(cls, config: BatchConfig) -> "OutcomeClassifier":
        return cls(
            success_marker=config.success_marker,
            failure_marker=config.failure_marker,
            success_exit_code=config.success_exit_code,
        )

    def classify(self, result: RunResult) -> Verdict:
        return classify(
            result,
            success_marker=self.success_marker,
            failure_marker=self.failure_marker,
            success_exit_code=self.success_exit_code,
        )
