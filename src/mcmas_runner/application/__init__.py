"""Application layer package."""

from mcmas_runner.application.classifier import OutcomeClassifier, classify
from mcmas_runner.application.orchestrator import BatchOrchestrator

__all__ = ["BatchOrchestrator", "OutcomeClassifier", "classify"]
