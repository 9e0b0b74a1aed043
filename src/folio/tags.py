"""Persisted tag encoding for article revisions.

Tags are an ordered list of ``[name, value, ...]`` string lists. The names
read here are ``d`` (document identifier), ``p`` (contributor),
``contribution_weight`` (``[name, contributor, weight]``), ``title`` and
``published_at`` (unix seconds).
"""

from __future__ import annotations

import logging
import math
import time
from typing import TYPE_CHECKING

from folio.models.split import Contributor

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

logger = logging.getLogger(__name__)

DOCUMENT_ID = "d"
CONTRIBUTOR = "p"
CONTRIBUTION_WEIGHT = "contribution_weight"
TITLE = "title"
SUMMARY = "summary"
IMAGE = "image"
TOPIC = "t"
PUBLISHED_AT = "published_at"
ALT = "alt"

DEFAULT_WEIGHT = 1.0


def find_tag_value(tags: Sequence[Sequence[str]], name: str) -> str | None:
    """Return the first value of the first tag called ``name``."""
    for tag in tags:
        if len(tag) >= 2 and tag[0] == name:  # noqa: PLR2004
            return tag[1]
    return None


def tag_values(tags: Sequence[Sequence[str]], name: str) -> list[str]:
    """Return the first value of every tag called ``name``, in order."""
    return [tag[1] for tag in tags if len(tag) >= 2 and tag[0] == name]  # noqa: PLR2004


def _parse_weight(raw: str, contributor_id: str) -> float:
    try:
        weight = float(raw)
    except ValueError:
        logger.debug("Ignoring unparseable weight %r for %s", raw, contributor_id)
        return DEFAULT_WEIGHT
    if not math.isfinite(weight) or weight < 0:
        logger.debug("Ignoring out-of-range weight %r for %s", raw, contributor_id)
        return DEFAULT_WEIGHT
    return weight


def declared_weight(tags: Sequence[Sequence[str]], contributor_id: str) -> float:
    """Return the declared weight for a contributor, defaulting to 1."""
    for tag in tags:
        if (
            len(tag) >= 3  # noqa: PLR2004
            and tag[0] == CONTRIBUTION_WEIGHT
            and tag[1] == contributor_id
        ):
            return _parse_weight(tag[2], contributor_id)
    return DEFAULT_WEIGHT


def contributors_from_tags(
    tags: Sequence[Sequence[str]],
    payout_addresses: Mapping[str, str | None] | None = None,
) -> list[Contributor]:
    """Build explicit-weight contributors from ``p`` and weight tags."""
    addresses = payout_addresses or {}
    return [
        Contributor(
            contributor_id=contributor_id,
            weight=declared_weight(tags, contributor_id),
            payout_address=addresses.get(contributor_id),
        )
        for contributor_id in tag_values(tags, CONTRIBUTOR)
    ]


def parse_published_at(tags: Sequence[Sequence[str]]) -> int | None:
    raw = find_tag_value(tags, PUBLISHED_AT)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def format_weight(weight: float) -> str:
    """Encode a weight the way it is written to the ``contribution_weight`` tag."""
    if float(weight).is_integer():
        return str(int(weight))
    return repr(float(weight))


def build_article_tags(  # noqa: PLR0913
    document_id: str,
    title: str,
    *,
    summary: str = "",
    image: str = "",
    topics: Iterable[str] = (),
    collaborators: Iterable[str] = (),
    weights: Mapping[str, float] | None = None,
    published_at: int | None = None,
    draft: bool = True,
    now: int | None = None,
) -> list[list[str]]:
    """Build the tag list for a new revision of an article.

    ``published_at`` is stamped with ``now`` on the first non-draft save and
    carried forward unchanged afterwards.
    """
    tags: list[list[str]] = [[DOCUMENT_ID, document_id], [TITLE, title]]
    if summary.strip():
        tags.append([SUMMARY, summary])
    if image.strip():
        tags.append([IMAGE, image])

    tags.extend([TOPIC, topic.strip()] for topic in topics if topic.strip())

    declared = weights or {}
    for collaborator in (c.strip() for c in collaborators):
        if not collaborator:
            continue
        tags.append([CONTRIBUTOR, collaborator])
        tags.append(
            [
                CONTRIBUTION_WEIGHT,
                collaborator,
                format_weight(declared.get(collaborator, DEFAULT_WEIGHT)),
            ]
        )

    if published_at is None and not draft:
        published_at = now if now is not None else int(time.time())
    if published_at is not None:
        tags.append([PUBLISHED_AT, str(published_at)])

    tags.append([ALT, f"Article: {title}"])
    return tags
