"""Tests for version history assembly from raw records."""

from __future__ import annotations

import random

import pytest

from folio.history import assemble, assemble_feed, parse_revision
from folio.models.revision import EventKind, RevisionKind, RevisionRecord

_EXPECTED_VERSION_COUNT = 2


class TestParseRevision:
    """Test validation of a single raw record."""

    def test_maps_wire_fields(self, make_record) -> None:
        """Verify wire fields map onto the revision."""
        record = make_record(
            "rev-1",
            pubkey="alice",
            content="# Hello",
            title="Hello",
            extra_tags=[["t", "nostr"]],
        )

        revision = parse_revision(record)

        assert revision is not None
        assert revision.id == "rev-1"
        assert revision.author_id == "alice"
        assert revision.document_id == "doc-1"
        assert revision.kind == RevisionKind.PUBLISHED
        assert revision.title == "Hello"
        assert revision.content == "# Hello"
        assert revision.tags == (("d", "doc-1"), ("title", "Hello"), ("t", "nostr"))

    def test_accepts_validated_record(self, make_record) -> None:
        """Verify an already validated record is accepted as-is."""
        record = RevisionRecord.model_validate(make_record())

        assert parse_revision(record) is not None

    def test_draft_kind(self, make_record) -> None:
        """Verify draft records become draft revisions."""
        revision = parse_revision(make_record(kind=EventKind.LONG_FORM_DRAFT))

        assert revision is not None
        assert revision.is_draft is True

    @pytest.mark.parametrize("document_id", [None, ""])
    def test_rejects_missing_document_id(self, make_record, document_id) -> None:
        """Verify records without a usable document identifier are dropped."""
        assert parse_revision(make_record(document_id=document_id)) is None

    def test_rejects_other_kinds(self, make_record) -> None:
        """Verify non-article kinds are dropped."""
        assert parse_revision(make_record(kind=1)) is None

    @pytest.mark.parametrize(
        "broken",
        [
            {"id": ""},
            {"pubkey": None},
            {"created_at": "yesterday"},
            {"tags": "d=doc-1"},
        ],
    )
    def test_rejects_malformed_records(self, make_record, broken) -> None:
        """Verify malformed records are dropped without raising."""
        record = {**make_record(), **broken}

        assert parse_revision(record) is None


class TestAssemble:
    """Test the assembled history for one document."""

    def test_filters_by_document_and_kind(self, make_record) -> None:
        """Verify only article records for the document are kept."""
        records = [
            make_record("rev-1", created_at=100),
            make_record("rev-2", created_at=200, kind=EventKind.LONG_FORM_DRAFT),
            make_record("rev-3", created_at=300, document_id="doc-2"),
            make_record("rev-4", created_at=400, kind=1),
            make_record("rev-5", created_at=500, document_id=None),
        ]

        history = assemble(records, "doc-1")

        assert [r.id for r in history] == ["rev-2", "rev-1"]

    def test_author_filter(self, make_record) -> None:
        """Verify the author filter keeps one author's revisions."""
        records = [
            make_record("rev-1", pubkey="alice", created_at=100),
            make_record("rev-2", pubkey="bob", created_at=200),
        ]

        history = assemble(records, "doc-1", author_filter="alice")

        assert [r.id for r in history] == ["rev-1"]

    def test_duplicate_ids_collapse(self, make_record) -> None:
        """Verify copies of one record from several sources collapse to one."""
        record = make_record("rev-1", created_at=100)
        records = [record, dict(record), make_record("rev-2", created_at=50)]

        history = assemble(records, "doc-1")

        assert len(history) == _EXPECTED_VERSION_COUNT
        assert [r.id for r in history] == ["rev-1", "rev-2"]

    def test_newest_first(self, make_record) -> None:
        """Verify versions are ordered by creation time, newest first."""
        records = [
            make_record("rev-b", created_at=100),
            make_record("rev-c", created_at=300),
            make_record("rev-a", created_at=200),
        ]

        assert [r.id for r in assemble(records, "doc-1")] == ["rev-c", "rev-a", "rev-b"]

    def test_equal_timestamps_ordered_by_id(self, make_record) -> None:
        """Verify ordering is deterministic under shuffled equal timestamps."""
        rng = random.Random(42)
        records = [
            make_record(f"rev-{n:02d}", created_at=rng.choice([100, 200, 300]))
            for n in range(30)
        ]
        expected = [
            record["id"]
            for record in sorted(records, key=lambda r: (-r["created_at"], r["id"]))
        ]

        for _ in range(20):
            shuffled = records[:]
            rng.shuffle(shuffled)
            history = assemble(shuffled, "doc-1")
            assert [r.id for r in history] == expected
            assert all(
                earlier.created_at >= later.created_at
                for earlier, later in zip(history, history[1:], strict=False)
            )

    def test_never_raises_on_garbage(self, make_record) -> None:
        """Verify unusable input is dropped rather than raised."""
        records = [{}, {"id": 5}, {"kind": "x"}, make_record("rev-1")]

        assert [r.id for r in assemble(records, "doc-1")] == ["rev-1"]


class TestAssembleFeed:
    """Test the cross-document article feed."""

    def test_published_only_by_default(self, make_record) -> None:
        """Verify drafts are excluded from the default feed."""
        records = [
            make_record("rev-1", created_at=100, document_id="doc-1"),
            make_record("rev-2", created_at=200, document_id="doc-2"),
            make_record(
                "rev-3", created_at=300, kind=EventKind.LONG_FORM_DRAFT
            ),
            make_record("rev-1", created_at=100, document_id="doc-1"),
        ]

        feed = assemble_feed(records)

        assert [r.id for r in feed] == ["rev-2", "rev-1"]

    def test_explicit_kinds(self, make_record) -> None:
        """Verify the feed can include drafts."""
        records = [
            make_record("rev-1", created_at=100),
            make_record("rev-2", created_at=200, kind=EventKind.LONG_FORM_DRAFT),
        ]

        feed = assemble_feed(records, kinds=list(RevisionKind))

        assert [r.id for r in feed] == ["rev-2", "rev-1"]
