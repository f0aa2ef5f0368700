"""Domain layer package."""

from .models import (
    Verdict,
    ItemStatus,
    VerifiableItem,
    RunResult,
    BatchConfig,
    BatchSummary,
    new_item_id,
)
from .exceptions import (
    DomainException,
    ConfigurationError,
    ProcessLaunchError,
    CatalogError,
    BatchInProgressError,
)
from .protocols import (
    IProcessRunner,
    IOutcomeClassifier,
    IRecordStore,
    ICatalogScanner,
    ILogger,
    IMetricsCollector,
)

__all__ = [
    # Models
    "Verdict",
    "ItemStatus",
    "VerifiableItem",
    "RunResult",
    "BatchConfig",
    "BatchSummary",
    "new_item_id",
    # Exceptions
    "DomainException",
    "ConfigurationError",
    "ProcessLaunchError",
    "CatalogError",
    "BatchInProgressError",
    # Protocols
    "IProcessRunner",
    "IOutcomeClassifier",
    "IRecordStore",
    "ICatalogScanner",
    "ILogger",
    "IMetricsCollector",
]
