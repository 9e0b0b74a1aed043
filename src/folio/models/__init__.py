"""Data models for revisions, diffs and revenue splits."""

from folio.models.diff import DiffSegment, DiffStats, SegmentType
from folio.models.revision import (
    EventKind,
    Revision,
    RevisionKind,
    RevisionQuery,
    RevisionRecord,
)
from folio.models.split import (
    Contributor,
    PaymentResult,
    SplitOutcome,
    SplitResult,
    SplitStatus,
)
from folio.models.stats import EngagementStats

__all__ = [
    "Contributor",
    "DiffSegment",
    "DiffStats",
    "EngagementStats",
    "EventKind",
    "PaymentResult",
    "Revision",
    "RevisionKind",
    "RevisionQuery",
    "RevisionRecord",
    "SegmentType",
    "SplitOutcome",
    "SplitResult",
    "SplitStatus",
]
