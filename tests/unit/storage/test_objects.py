"""Unit tests for typed stored objects."""

from datetime import datetime, timedelta, timezone

import pytest

from snapvcs.errors import FormatError
from snapvcs.storage.objects import (
    Blob,
    CommitRecord,
    Tree,
    decode_object,
    encode_object,
    split_header,
)


class TestFraming:
    """Test the <type> <size>\\0 header."""

    def test_blob_header(self) -> None:
        assert encode_object(Blob(b"abc")) == b"blob 3\x00abc"

    def test_decode_dispatches_on_type(self) -> None:
        record = CommitRecord("alice", "a@x.com", "d1", "d2", "msg")
        tree = Tree((("100644", "a.txt", "f" * 40),))

        assert decode_object(encode_object(Blob(b"x"))) == Blob(b"x")
        assert decode_object(encode_object(record)) == record
        assert decode_object(encode_object(tree)) == tree

    def test_blob_starting_with_commit_is_still_a_blob(self) -> None:
        raw = encode_object(Blob(b"commit this file please\n"))
        assert isinstance(decode_object(raw), Blob)

    @pytest.mark.parametrize(
        "raw",
        [
            b"no header at all",
            b"blob\x00abc",
            b"blob x\x00abc",
            b"widget 3\x00abc",
            b"blob 5\x00abc",
        ],
    )
    def test_malformed_headers(self, raw: bytes) -> None:
        with pytest.raises(FormatError):
            split_header(raw)


class TestCommitRecord:
    """Test commit record text."""

    @pytest.fixture
    def when(self) -> datetime:
        return datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone(timedelta(hours=-7), "MST"))

    def test_create_formats_both_dates(self, when: datetime) -> None:
        record = CommitRecord.create("alice", "a@x.com", "first", when)
        assert record.local_date == "Tue Jan 2 15:04:05 2024 -0700"
        assert record.rfc_date == "Tue, 02 Jan 2024 15:04:05 MST"

    def test_unnamed_offset_uses_numeric_zone(self) -> None:
        when = datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone(timedelta(hours=-7)))
        record = CommitRecord.create("alice", "a@x.com", "first", when)
        assert record.rfc_date == "Tue, 02 Jan 2024 15:04:05 -0700"

    def test_utc_keeps_abbreviation(self) -> None:
        when = datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone.utc)
        record = CommitRecord.create("alice", "a@x.com", "first", when)
        assert record.rfc_date == "Tue, 02 Jan 2024 15:04:05 UTC"

    def test_text_layout(self, when: datetime) -> None:
        record = CommitRecord.create("alice", "a@x.com", "first", when)
        assert record.to_text() == (
            "commit Tue Jan 2 15:04:05 2024 -0700\n"
            "Author: alice <a@x.com>\n"
            "Date: Tue, 02 Jan 2024 15:04:05 MST\n"
            "\n"
            "first\n"
        )

    def test_multiline_message_roundtrip(self, when: datetime) -> None:
        record = CommitRecord.create("alice", "a@x.com", "subject\n\nbody line", when)
        assert CommitRecord.deserialize(record.serialize()) == record

    def test_timestamp_parses_local_date(self, when: datetime) -> None:
        record = CommitRecord.create("alice", "a@x.com", "first", when)
        assert record.timestamp == when

    def test_bad_timestamp(self) -> None:
        record = CommitRecord("a", "b", "yesterday", "d2", "m")
        with pytest.raises(FormatError):
            record.timestamp

    def test_malformed_commit_payload(self) -> None:
        with pytest.raises(FormatError):
            CommitRecord.deserialize(b"commit only one line")


class TestTree:
    """Test the reserved tree type."""

    def test_bad_entry(self) -> None:
        with pytest.raises(FormatError):
            Tree.deserialize(b"100644 onlytwo\n")

    def test_path_with_spaces(self) -> None:
        tree = Tree((("100644", "my file.txt", "a" * 40),))
        assert Tree.deserialize(tree.serialize()) == tree
