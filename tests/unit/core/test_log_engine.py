"""Unit tests for the log engine."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from snapvcs.config import Config
from snapvcs.core.log import iter_commits, logs
from snapvcs.errors import FormatError
from snapvcs.storage import Blob, CommitBuilder, ObjectStore, RefStore


@pytest.fixture
def store(workspace: Path) -> ObjectStore:
    return ObjectStore(workspace / ".snapvcs")


@pytest.fixture
def builder(workspace: Path, store: ObjectStore) -> CommitBuilder:
    return CommitBuilder(store, RefStore(workspace / ".snapvcs"))


class TestLogs:
    """Test history rendering."""

    def test_empty_store(self, store: ObjectStore) -> None:
        assert logs(store) == ""

    def test_blobs_are_not_commits(self, store: ObjectStore) -> None:
        store.write_object(Blob(b"commit lookalike\n"))
        assert logs(store) == ""

    def test_every_commit_appears(
        self, store: ObjectStore, builder: CommitBuilder, alice: Config, fixed_time: datetime
    ) -> None:
        hashes = [
            builder.create_commit(f"message {i}", alice, now=fixed_time) for i in range(4)
        ]
        store.write_object(Blob(b"some file"))

        output = logs(store)

        for commit_hash in hashes:
            assert f"commit {commit_hash}\n" in output
        for i in range(4):
            assert f"message {i}" in output

    def test_block_layout(
        self, store: ObjectStore, builder: CommitBuilder, alice: Config, fixed_time: datetime
    ) -> None:
        commit_hash = builder.create_commit("first", alice, now=fixed_time)
        assert logs(store) == (
            f"commit {commit_hash}\n"
            "commit Tue Jan 2 15:04:05 2024 -0700\n"
            "Author: alice <a@x.com>\n"
            "Date: Tue, 02 Jan 2024 15:04:05 MST\n"
            "\n"
            "first\n"
            "\n\n"
        )

    def test_storage_order_follows_hashes(
        self, store: ObjectStore, builder: CommitBuilder, alice: Config, fixed_time: datetime
    ) -> None:
        hashes = [
            builder.create_commit(f"m{i}", alice, now=fixed_time) for i in range(5)
        ]
        listed = [commit_hash for commit_hash, _ in iter_commits(store)]
        assert listed == sorted(hashes)

    def test_date_order_newest_first(
        self, store: ObjectStore, builder: CommitBuilder, alice: Config, fixed_time: datetime
    ) -> None:
        for day in range(5):
            builder.create_commit(f"day {day}", alice, now=fixed_time + timedelta(days=day))

        output = logs(store, order="date")

        positions = [output.index(f"day {day}\n") for day in range(5)]
        assert positions == sorted(positions, reverse=True)

    def test_date_order_across_timezones(
        self, store: ObjectStore, builder: CommitBuilder, alice: Config
    ) -> None:
        early = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        # 11:00 at +0200 is 09:00 UTC, which is earlier
        earlier = datetime(2024, 1, 1, 11, 0, tzinfo=timezone(timedelta(hours=2)))
        builder.create_commit("noon utc", alice, now=early)
        builder.create_commit("eleven plus two", alice, now=earlier)

        output = logs(store, order="date")
        assert output.index("noon utc") < output.index("eleven plus two")

    def test_max_count(
        self, store: ObjectStore, builder: CommitBuilder, alice: Config, fixed_time: datetime
    ) -> None:
        for i in range(3):
            builder.create_commit(f"m{i}", alice, now=fixed_time)
        assert logs(store, max_count=2).count("Author:") == 2

    def test_max_count_zero(
        self, store: ObjectStore, builder: CommitBuilder, alice: Config, fixed_time: datetime
    ) -> None:
        builder.create_commit("first", alice, now=fixed_time)
        assert logs(store, max_count=0) == ""

    def test_negative_max_count_rejected(
        self, store: ObjectStore, builder: CommitBuilder, alice: Config, fixed_time: datetime
    ) -> None:
        builder.create_commit("first", alice, now=fixed_time)
        with pytest.raises(ValueError, match="non-negative"):
            logs(store, max_count=-1)

    def test_unknown_order(self, store: ObjectStore) -> None:
        with pytest.raises(ValueError, match="Unknown log order"):
            logs(store, order="random")

    def test_corrupt_object_propagates(self, store: ObjectStore) -> None:
        shard = store.objects_dir / "ab"
        shard.mkdir(parents=True)
        (shard / ("c" * 38)).write_bytes(b"no header here")
        with pytest.raises(FormatError):
            logs(store)
