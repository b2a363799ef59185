from __future__ import annotations

from specref.models.live import FetchCacheEntry, LiveTermEntry
from specref.models.outcome import (
    Changed,
    Error,
    Missing,
    OutcomeKind,
    ReferenceResult,
    Valid,
    ValidationOutcome,
    ValidationReport,
)
from specref.models.reference import (
    ExternalSpecDescriptor,
    ReferenceIndex,
    ReferenceIndexEntry,
    SourceFile,
)

__all__ = [
    # reference index
    "SourceFile",
    "ReferenceIndexEntry",
    "ReferenceIndex",
    "ExternalSpecDescriptor",
    # live data
    "LiveTermEntry",
    "FetchCacheEntry",
    # outcomes
    "OutcomeKind",
    "Missing",
    "Changed",
    "Error",
    "Valid",
    "ValidationOutcome",
    "ReferenceResult",
    "ValidationReport",
]
