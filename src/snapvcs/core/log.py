"""Commit history recovered from the object store.

Commits carry no parent links, so history is whatever commit objects the
store holds. By default they are listed in storage order (shard, then file
name), which is stable but unrelated to when the commits were made; pass
``order="date"`` to list newest first by the recorded commit time.
"""

import logging
from typing import Iterator, Optional, Tuple

from snapvcs.storage.object_store import ObjectStore
from snapvcs.storage.objects import CommitRecord, decode_object

logger = logging.getLogger(__name__)

LOG_ORDERS = ("storage", "date")


def iter_commits(object_store: ObjectStore) -> Iterator[Tuple[str, CommitRecord]]:
    """Yield ``(hash, record)`` for every commit in storage order.

    Raises:
        FormatError: If a stored object can't be decoded
        RepositoryIOError: If the store can't be read
    """
    for object_hash, raw in object_store.read_all():
        obj = decode_object(raw)
        if isinstance(obj, CommitRecord):
            yield object_hash, obj


def format_commit(commit_hash: str, record: CommitRecord) -> str:
    return f"commit {commit_hash}\n{record.to_text()}\n\n"


def logs(
    object_store: ObjectStore,
    order: str = "storage",
    max_count: Optional[int] = None,
) -> str:
    """Render every commit as ``commit <hash>`` followed by its text.

    Args:
        object_store: Store to read commits from
        order: "storage" (walk order) or "date" (newest first)
        max_count: Limit the number of commits rendered

    Raises:
        ValueError: If ``order`` is unknown or ``max_count`` is negative
    """
    if order not in LOG_ORDERS:
        raise ValueError(f"Unknown log order {order!r}; expected one of {LOG_ORDERS}")
    if max_count is not None and max_count < 0:
        raise ValueError(f"max_count must be non-negative, got {max_count}")

    commits = list(iter_commits(object_store))
    if order == "date":
        # sorted() is stable, so commits made within one second keep walk order
        commits = sorted(commits, key=lambda item: item[1].timestamp, reverse=True)

    if max_count is not None:
        commits = commits[:max_count]

    logger.debug("Rendering %d commit(s)", len(commits))
    return "".join(format_commit(commit_hash, record) for commit_hash, record in commits)
