"""Shared fixtures for revision records, revisions and payment transports."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from folio.models.revision import EventKind, Revision, RevisionKind
from folio.models.split import PaymentResult

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture
def make_record() -> Callable[..., dict[str, Any]]:
    """Return a factory for raw wire records."""

    def _make(  # noqa: PLR0913
        record_id: str = "rev-1",
        *,
        pubkey: str = "alice",
        created_at: int = 1_700_000_000,
        kind: int = EventKind.LONG_FORM,
        content: str = "",
        document_id: str | None = "doc-1",
        title: str | None = None,
        extra_tags: list[list[str]] | None = None,
    ) -> dict[str, Any]:
        tags: list[list[str]] = []
        if document_id is not None:
            tags.append(["d", document_id])
        if title is not None:
            tags.append(["title", title])
        tags.extend(extra_tags or [])
        return {
            "id": record_id,
            "pubkey": pubkey,
            "created_at": created_at,
            "kind": int(kind),
            "content": content,
            "tags": tags,
        }

    return _make


@pytest.fixture
def make_revision() -> Callable[..., Revision]:
    """Return a factory for assembled revisions."""

    def _make(
        revision_id: str,
        author_id: str,
        created_at: int,
        content: str = "",
        *,
        kind: RevisionKind = RevisionKind.PUBLISHED,
    ) -> Revision:
        return Revision(
            id=revision_id,
            author_id=author_id,
            document_id="doc-1",
            created_at=created_at,
            kind=kind,
            content=content,
        )

    return _make


@pytest.fixture
def transport() -> MagicMock:
    """A payment transport whose payments always succeed."""
    stub = MagicMock()
    stub.pay_invoice = AsyncMock(return_value=PaymentResult(success=True))
    return stub
