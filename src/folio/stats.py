"""Engagement statistics for a published revision."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from folio import tags as article_tags
from folio.models.revision import EventKind
from folio.models.stats import EngagementStats

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

_HRP_PATTERN = re.compile(r"^ln(?:bcrt|bc|tbs|tb)(?P<amount>\d+)?(?P<unit>[munp])?$")

# Millisatoshis per unit of the amount in a bolt11 human-readable part.
_MSATS_PER_BTC = 100_000_000_000
_UNIT_MSATS = {
    None: _MSATS_PER_BTC,
    "m": _MSATS_PER_BTC // 1_000,
    "u": _MSATS_PER_BTC // 1_000_000,
    "n": _MSATS_PER_BTC // 1_000_000_000,
}
_PICO_PER_MSAT = 10

_QUALITY_WEIGHTS = {"reactions": 2, "comments": 3, "reposts": 5, "zaps": 10}
_MAX_QUALITY_SCORE = 100

ENGAGEMENT_KINDS = (
    EventKind.ZAP_RECEIPT,
    EventKind.REACTION,
    EventKind.REPOST,
    EventKind.GENERIC_REPOST,
    EventKind.COMMENT,
)


def parse_bolt11_msats(invoice: str) -> int | None:
    """Return the amount encoded in a bolt11 invoice, in millisatoshis.

    Returns None for invoices without an amount or that cannot be parsed.
    """
    normalized = invoice.strip().lower()
    separator = normalized.rfind("1")
    if separator <= 0:
        return None
    match = _HRP_PATTERN.match(normalized[:separator])
    if match is None or match.group("amount") is None:
        return None

    amount = int(match.group("amount"))
    unit = match.group("unit")
    if unit == "p":
        return amount // _PICO_PER_MSAT
    return amount * _UNIT_MSATS[unit]


def engagement_query(revision_id: str, limit: int = 500) -> dict[str, Any]:
    """Build the wire filter for engagement events referencing a revision."""
    return {
        "kinds": [int(kind) for kind in ENGAGEMENT_KINDS],
        "#e": [revision_id],
        "limit": limit,
    }


def _zap_msats(event: dict[str, Any]) -> int:
    invoice = article_tags.find_tag_value(event.get("tags") or [], "bolt11")
    if not invoice:
        return 0
    msats = parse_bolt11_msats(invoice)
    if msats is None:
        logger.debug("Ignoring unparseable bolt11 on zap id=%s", event.get("id"))
        return 0
    return msats


def quality_score(
    *, reactions: int = 0, comments: int = 0, reposts: int = 0, zaps: int = 0
) -> int:
    """Score engagement on a 0-100 scale."""
    score = (
        reactions * _QUALITY_WEIGHTS["reactions"]
        + comments * _QUALITY_WEIGHTS["comments"]
        + reposts * _QUALITY_WEIGHTS["reposts"]
        + zaps * _QUALITY_WEIGHTS["zaps"]
    )
    return min(_MAX_QUALITY_SCORE, score)


def summarize_engagement(events: Iterable[dict[str, Any]]) -> EngagementStats:
    """Group engagement events by type and total the zapped amount."""
    zaps: list[dict[str, Any]] = []
    reactions: list[dict[str, Any]] = []
    reposts: list[dict[str, Any]] = []
    comments: list[dict[str, Any]] = []

    for event in events:
        kind = event.get("kind")
        if kind == EventKind.ZAP_RECEIPT:
            zaps.append(event)
        elif kind == EventKind.REACTION:
            reactions.append(event)
        elif kind in (EventKind.REPOST, EventKind.GENERIC_REPOST):
            reposts.append(event)
        elif kind == EventKind.COMMENT:
            comments.append(event)

    return EngagementStats(
        zaps=zaps,
        reactions=reactions,
        reposts=reposts,
        comments=comments,
        total_zap_msats=sum(_zap_msats(zap) for zap in zaps),
        quality_score=quality_score(
            reactions=len(reactions),
            comments=len(comments),
            reposts=len(reposts),
            zaps=len(zaps),
        ),
    )
