"""Version history assembly from untrusted revision records."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import ValidationError

from folio import tags as article_tags
from folio.models.revision import Revision, RevisionKind, RevisionQuery, RevisionRecord

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


@runtime_checkable
class RevisionSource(Protocol):
    """Protocol for querying raw revision records from one or more relays."""

    async def query(self, query: RevisionQuery) -> list[dict[str, Any]]:
        """Return raw records matching the query, possibly with duplicates."""
        ...


def parse_revision(record: dict[str, Any] | RevisionRecord) -> Revision | None:
    """Validate a raw record and convert it to a Revision.

    Returns None for malformed records, non-article kinds and records without
    a document identifier.
    """
    try:
        raw = (
            record
            if isinstance(record, RevisionRecord)
            else RevisionRecord.model_validate(record)
        )
    except ValidationError:
        logger.debug("Dropping malformed revision record", exc_info=True)
        return None

    kind = RevisionKind.from_event_kind(raw.kind)
    if kind is None:
        logger.debug("Dropping record id=%s with kind=%d", raw.id, raw.kind)
        return None

    document_id = article_tags.find_tag_value(raw.tags, article_tags.DOCUMENT_ID)
    if not document_id:
        logger.debug("Dropping record id=%s without a document identifier", raw.id)
        return None

    return Revision(
        id=raw.id,
        author_id=raw.pubkey,
        document_id=document_id,
        created_at=raw.created_at,
        kind=kind,
        content=raw.content,
        title=article_tags.find_tag_value(raw.tags, article_tags.TITLE) or "",
        tags=tuple(tuple(tag) for tag in raw.tags),
    )


def _newest_first(revisions: Iterable[Revision]) -> list[Revision]:
    return sorted(revisions, key=lambda revision: (-revision.created_at, revision.id))


def _unique(revisions: Iterable[Revision]) -> list[Revision]:
    """Drop repeated ids; the first copy seen is kept."""
    seen: dict[str, Revision] = {}
    for revision in revisions:
        seen.setdefault(revision.id, revision)
    return list(seen.values())


def assemble(
    raw_records: Iterable[dict[str, Any] | RevisionRecord],
    document_id: str,
    author_filter: str | None = None,
) -> list[Revision]:
    """Build the newest-first version history of one document.

    Records that fail validation or belong to another document or author are
    dropped silently.
    """
    matching = []
    for record in raw_records:
        revision = parse_revision(record)
        if revision is None or revision.document_id != document_id:
            continue
        if author_filter is not None and revision.author_id != author_filter:
            continue
        matching.append(revision)
    return _newest_first(_unique(matching))


def assemble_feed(
    raw_records: Iterable[dict[str, Any] | RevisionRecord],
    kinds: Iterable[RevisionKind] = (RevisionKind.PUBLISHED,),
) -> list[Revision]:
    """Build a newest-first feed of articles across all documents."""
    wanted = set(kinds)
    revisions = (parse_revision(record) for record in raw_records)
    return _newest_first(
        _unique(r for r in revisions if r is not None and r.kind in wanted)
    )


async def fetch_version_history(
    source: RevisionSource,
    document_id: str,
    *,
    author_id: str | None = None,
    timeout: float = 3.0,  # noqa: ASYNC109
    limit: int = 100,
) -> list[Revision]:
    """Query ``source`` for a document's revisions and assemble its history.

    Source failures and timeouts yield an empty history rather than an error.
    """
    if not document_id:
        return []

    query = RevisionQuery(
        document_id=document_id,
        authors=[author_id] if author_id else None,
        limit=limit,
    )
    try:
        records = await asyncio.wait_for(source.query(query), timeout)
    except TimeoutError:
        logger.warning(
            "Revision query timed out after %.1fs — document=%s", timeout, document_id
        )
        return []
    except Exception:  # noqa: BLE001
        logger.warning(
            "Revision query failed — document=%s", document_id, exc_info=True
        )
        return []

    history = assemble(records, document_id, author_id)
    logger.info(
        "Assembled %d versions from %d records — document=%s",
        len(history),
        len(records),
        document_id,
    )
    return history
