"""Commit object builder and serializer.

This module handles the creation of commit records. A commit is a small text
object (author, two renderings of the commit time, message) stored in the
object store; its hash is the commit identifier.
"""

import logging
from datetime import datetime
from typing import Optional

from snapvcs.config import Config
from snapvcs.errors import FormatError
from snapvcs.storage.object_store import ObjectStore
from snapvcs.storage.objects import CommitRecord
from snapvcs.storage.refs import RefStore

logger = logging.getLogger(__name__)


class CommitBuilder:
    """Builder for creating and persisting commit records.

    Commits carry no parent hash, so their identity depends only on the
    author, the timestamp and the message. After each commit the branch ref
    is moved to the new hash; that pointer is not part of the commit itself.

    Attributes:
        object_store: ObjectStore the records are written to
        refs: RefStore whose branch is advanced on every commit
    """

    def __init__(self, object_store: ObjectStore, refs: RefStore):
        self.object_store = object_store
        self.refs = refs

    def build_record(
        self,
        message: str,
        config: Config,
        now: Optional[datetime] = None,
    ) -> CommitRecord:
        """Build (but do not store) the commit record for ``message``.

        Args:
            message: Commit message
            config: User identity recorded as the author
            now: Commit time; defaults to the current local time

        Raises:
            ValueError: If the message is empty
        """
        if not message or not message.strip():
            raise ValueError("Commit message must not be empty")

        when = now if now is not None else datetime.now().astimezone()
        if when.tzinfo is None:
            when = when.astimezone()

        return CommitRecord.create(config.username, config.email, message, when)

    def create_commit(
        self,
        message: str,
        config: Config,
        now: Optional[datetime] = None,
    ) -> str:
        """Create a new commit and return its hash (40 hex characters).

        Raises:
            ValueError: If the message is empty
            RepositoryIOError: If the record or the branch ref can't be written
        """
        record = self.build_record(message, config, now=now)
        commit_hash = self.object_store.write_object(record)
        self.refs.update_branch(commit_hash)

        logger.debug("Created commit %s by %s", commit_hash, config.author)
        return commit_hash

    def read_commit(self, commit_hash: str) -> CommitRecord:
        """Read a commit record from the store.

        Raises:
            NotFoundError: If no object has that hash
            FormatError: If the object is not a commit
        """
        obj = self.object_store.read_object(commit_hash)
        if not isinstance(obj, CommitRecord):
            raise FormatError(f"Object {commit_hash} is a {obj.type_name}, not a commit")
        return obj
