"""Domain exceptions for the verification orchestrator.

Per-item verifier problems (missing binary, bad exit code, timeouts) are
never raised; they are folded into verdicts. These exceptions cover the
conditions that stop the tool itself.
"""


class DomainException(Exception):
    """Base exception for all domain errors."""
    pass


class ConfigurationError(DomainException):
    """Raised when configuration is invalid."""
    pass


class ProcessLaunchError(DomainException):
    """Raised when the system cannot spawn processes at all (resource exhaustion)."""
    pass


class CatalogError(DomainException):
    """Raised when the models folder cannot be scanned."""
    pass


class BatchInProgressError(DomainException):
    """Raised when a batch is started while another is still running."""
    pass
