"""Revision models — immutable article snapshots and the raw records they come from."""

from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventKind(IntEnum):
    """Wire event kinds the library reads or writes."""

    REPOST = 6
    REACTION = 7
    GENERIC_REPOST = 16
    COMMENT = 1111
    ZAP_REQUEST = 9734
    ZAP_RECEIPT = 9735
    LONG_FORM = 30023
    LONG_FORM_DRAFT = 30024


class RevisionKind(StrEnum):
    DRAFT = "draft"
    PUBLISHED = "published"

    @property
    def event_kind(self) -> EventKind:
        if self is RevisionKind.PUBLISHED:
            return EventKind.LONG_FORM
        return EventKind.LONG_FORM_DRAFT

    @classmethod
    def from_event_kind(cls, kind: int) -> RevisionKind | None:
        """Map a wire kind to a revision kind, or None for non-article kinds."""
        if kind == EventKind.LONG_FORM:
            return cls.PUBLISHED
        if kind == EventKind.LONG_FORM_DRAFT:
            return cls.DRAFT
        return None


class RevisionRecord(BaseModel):
    """A raw revision record as returned by an untrusted source."""

    id: str = Field(min_length=1)
    pubkey: str = Field(min_length=1)
    created_at: int
    kind: int
    content: str = ""
    tags: list[list[str]] = Field(default_factory=list)


class Revision(BaseModel):
    """An immutable snapshot of an article's content and metadata."""

    model_config = ConfigDict(frozen=True)

    id: str
    author_id: str
    document_id: str
    created_at: int
    kind: RevisionKind
    content: str = ""
    title: str = ""
    tags: tuple[tuple[str, ...], ...] = ()

    @property
    def is_draft(self) -> bool:
        return self.kind == RevisionKind.DRAFT


class RevisionQuery(BaseModel):
    """Filter sent to a revision source."""

    kinds: list[int] = Field(
        default_factory=lambda: [EventKind.LONG_FORM, EventKind.LONG_FORM_DRAFT]
    )
    document_id: str | None = None
    authors: list[str] | None = None
    limit: int = Field(default=100, gt=0)

    def to_filter(self) -> dict[str, Any]:
        """Render the query as a wire filter."""
        wire: dict[str, Any] = {"kinds": [int(kind) for kind in self.kinds]}
        if self.document_id is not None:
            wire["#d"] = [self.document_id]
        if self.authors:
            wire["authors"] = list(self.authors)
        wire["limit"] = self.limit
        return wire
