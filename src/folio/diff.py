"""Greedy line-oriented text diff.

The walk keeps one cursor per input. On a mismatch it looks ahead for the
next occurrence of each cursor's line in the other input and jumps to the
nearer one, so the result is deterministic but not a minimal edit script.

Lines are compared without their newline, but every segment value carries
the newlines of the text it came from: joining every non-removed segment
yields the new text and joining every non-added segment yields the old
text. When an unchanged line is terminated on only one side, that newline
opens the next segment of that side.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from folio.models.diff import DiffSegment, DiffStats, SegmentType

if TYPE_CHECKING:
    from collections.abc import Iterable

_NOT_FOUND = -1


def split_lines(text: str) -> list[str]:
    """Split on newlines; a trailing newline leaves a final empty line."""
    return text.split("\n")


def _find(lines: list[str], line: str, start: int) -> int:
    try:
        return lines.index(line, start)
    except ValueError:
        return _NOT_FOUND


def _block(lines: list[str], start: int, stop: int, *, lead: bool = False) -> str:
    """Join ``lines[start:stop]`` as they appear in their text."""
    value = "\n".join(lines[start:stop])
    if stop < len(lines):
        value += "\n"
    return "\n" + value if lead else value


def compute_diff(old_text: str, new_text: str) -> list[DiffSegment]:
    """Compute the ordered segments turning ``old_text`` into ``new_text``."""
    old_lines = split_lines(old_text)
    new_lines = split_lines(new_text)
    segments: list[DiffSegment] = []
    old_owed = False
    new_owed = False
    i = 0
    j = 0

    while i < len(old_lines) or j < len(new_lines):
        if i >= len(old_lines):
            segments.append(
                DiffSegment(
                    type=SegmentType.ADDED,
                    value=_block(new_lines, j, len(new_lines), lead=new_owed),
                )
            )
            break
        if j >= len(new_lines):
            segments.append(
                DiffSegment(
                    type=SegmentType.REMOVED,
                    value=_block(old_lines, i, len(old_lines), lead=old_owed),
                )
            )
            break

        old_line = old_lines[i]
        new_line = new_lines[j]
        if old_line == new_line:
            # A side whose line is unterminated has no lines left, so only
            # the other side can be owed a newline.
            old_terminated = i < len(old_lines) - 1
            new_terminated = j < len(new_lines) - 1
            shared = old_terminated and new_terminated
            segments.append(
                DiffSegment(
                    type=SegmentType.UNCHANGED,
                    value=old_line + "\n" if shared else old_line,
                )
            )
            old_owed = old_terminated and not shared
            new_owed = new_terminated and not shared
            i += 1
            j += 1
            continue

        old_in_new = _find(new_lines, old_line, j)
        new_in_old = _find(old_lines, new_line, i)

        # Strictly nearer look-ahead wins; ties resolve as removals.
        if old_in_new != _NOT_FOUND and (
            new_in_old == _NOT_FOUND or old_in_new - j < new_in_old - i
        ):
            segments.append(
                DiffSegment(
                    type=SegmentType.ADDED, value=_block(new_lines, j, old_in_new)
                )
            )
            j = old_in_new
        elif new_in_old != _NOT_FOUND:
            segments.append(
                DiffSegment(
                    type=SegmentType.REMOVED, value=_block(old_lines, i, new_in_old)
                )
            )
            i = new_in_old
        else:
            segments.append(
                DiffSegment(type=SegmentType.REMOVED, value=_block(old_lines, i, i + 1))
            )
            segments.append(
                DiffSegment(type=SegmentType.ADDED, value=_block(new_lines, j, j + 1))
            )
            i += 1
            j += 1

    return segments


def _count_lines(value: str) -> int:
    return sum(1 for line in value.split("\n") if line)


def get_diff_stats(segments: Iterable[DiffSegment]) -> DiffStats:
    """Count non-empty lines per segment type."""
    counts = dict.fromkeys(SegmentType, 0)
    for segment in segments:
        counts[segment.type] += _count_lines(segment.value)
    return DiffStats(
        added=counts[SegmentType.ADDED],
        removed=counts[SegmentType.REMOVED],
        unchanged=counts[SegmentType.UNCHANGED],
    )


def has_changes(segments: Iterable[DiffSegment]) -> bool:
    return any(segment.type != SegmentType.UNCHANGED for segment in segments)


def reconstruct(segments: Iterable[DiffSegment], *, side: SegmentType) -> str:
    """Rebuild one side of a diff.

    ``side`` is ``SegmentType.ADDED`` for the new text or
    ``SegmentType.REMOVED`` for the old text.
    """
    if side == SegmentType.UNCHANGED:
        msg = "side must be ADDED (new text) or REMOVED (old text)"
        raise ValueError(msg)
    skip = SegmentType.REMOVED if side == SegmentType.ADDED else SegmentType.ADDED
    return "".join(segment.value for segment in segments if segment.type != skip)
