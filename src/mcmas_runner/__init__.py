"""Batch orchestration of an external model checker (MCMAS and compatible verifiers)."""

__version__ = "2.2.0"
