"""Diff segment models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class SegmentType(StrEnum):
    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


class DiffSegment(BaseModel):
    """A contiguous run of one or more lines sharing a change type."""

    model_config = ConfigDict(frozen=True)

    type: SegmentType
    value: str


class DiffStats(BaseModel):
    """Non-empty line counts per segment type."""

    model_config = ConfigDict(frozen=True)

    added: int = 0
    removed: int = 0
    unchanged: int = 0

    @property
    def changes(self) -> int:
        return self.added + self.removed
