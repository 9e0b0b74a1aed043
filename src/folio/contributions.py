"""Contribution weights derived from a document's diff history."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from folio.diff import compute_diff, get_diff_stats
from folio.models.split import Contributor

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from folio.models.revision import Revision

logger = logging.getLogger(__name__)


def _chronological(versions: Iterable[Revision]) -> list[Revision]:
    return sorted(versions, key=lambda version: (version.created_at, version.id))


def _change_volumes(versions: Iterable[Revision]) -> list[tuple[str, int]]:
    """Return ``(author_id, volume)`` for every adjacent pair, oldest first.

    Each step's volume is credited to the author of the earlier revision.
    """
    ordered = _chronological(versions)
    volumes: list[tuple[str, int]] = []
    for earlier, later in zip(ordered, ordered[1:], strict=False):
        stats = get_diff_stats(compute_diff(earlier.content, later.content))
        volumes.append((earlier.author_id, stats.changes))
    return volumes


def calculate_contribution_weight(
    author_id: str, versions: Sequence[Revision]
) -> float:
    """Return ``author_id``'s share of total change volume, 0.0 when nothing changed."""
    total = 0
    authored = 0
    for credited, volume in _change_volumes(versions):
        total += volume
        if credited == author_id:
            authored += volume
    if total == 0:
        return 0.0
    return authored / total


def calculate_contribution_weights(versions: Sequence[Revision]) -> dict[str, float]:
    """Return the weight of every author with a non-zero share, largest first."""
    per_author: defaultdict[str, int] = defaultdict(int)
    total = 0
    for credited, volume in _change_volumes(versions):
        per_author[credited] += volume
        total += volume
    if total == 0:
        return {}

    weights = {
        author: volume / total for author, volume in per_author.items() if volume > 0
    }
    logger.debug(
        "Derived contribution weights for %d authors over %d versions",
        len(weights),
        len(versions),
    )
    return dict(sorted(weights.items(), key=lambda item: (-item[1], item[0])))


def count_edits(author_id: str, versions: Iterable[Revision]) -> int:
    return sum(1 for version in versions if version.author_id == author_id)


def normalize_weights(weights: Mapping[str, float]) -> dict[str, float]:
    """Scale declared weights so they sum to 1.0.

    All weights become 0.0 when they sum to zero. Negative weights are rejected.
    """
    negative = [key for key, weight in weights.items() if weight < 0]
    if negative:
        msg = f"Contribution weights must be non-negative: {', '.join(negative)}"
        raise ValueError(msg)
    total = sum(weights.values())
    if total == 0:
        return dict.fromkeys(weights, 0.0)
    return {key: weight / total for key, weight in weights.items()}


def contributors_from_history(
    versions: Sequence[Revision],
    payout_addresses: Mapping[str, str | None] | None = None,
) -> list[Contributor]:
    """Build derived-weight contributors for a revenue split."""
    addresses = payout_addresses or {}
    return [
        Contributor(
            contributor_id=author_id,
            weight=weight,
            payout_address=addresses.get(author_id),
        )
        for author_id, weight in calculate_contribution_weights(versions).items()
    ]
