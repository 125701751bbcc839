"""Content-addressable object storage for snapvcs.

This module implements a Git-like object store using SHA-1 hashing for
content addressing. Objects are stored in .snapvcs/objects/ with automatic
deduplication: identical content always lands at the same path.
"""

import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator, Tuple

from snapvcs.constants import HASH_ALGORITHM, HASH_LENGTH, OBJECTS_DIR
from snapvcs.errors import FormatError, NotFoundError, RepositoryIOError
from snapvcs.storage.objects import StoredObject, decode_object, encode_object

logger = logging.getLogger(__name__)

TMP_PREFIX = ".tmp_"


def compute_hash(data: bytes) -> str:
    """Compute the SHA-1 hash of ``data`` as 40 lowercase hex characters."""
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(data)
    return hasher.hexdigest()


def hash_object(obj: StoredObject) -> str:
    """Hash an object exactly as the store would, without writing it."""
    return compute_hash(encode_object(obj))


def validate_hash(object_hash: str) -> None:
    """Validate that a hash string is properly formatted.

    Raises:
        ValueError: If hash is not 40 hex characters
    """
    if not isinstance(object_hash, str):
        raise ValueError(f"Hash must be string, got {type(object_hash)}")

    if len(object_hash) != HASH_LENGTH:
        raise ValueError(
            f"Hash must be {HASH_LENGTH} characters, got {len(object_hash)}"
        )

    try:
        int(object_hash, 16)
    except ValueError as e:
        raise ValueError(f"Hash must be hexadecimal: {e}") from e


class ObjectStore:
    """Content-addressable storage for framed objects.

    Storage layout:
        .snapvcs/objects/<hash[:2]>/<hash[2:]>

    Objects are immutable: once written they are never rewritten or deleted.

    Attributes:
        repo_dir: Path to the .snapvcs directory
        objects_dir: Path to the objects directory

    Example:
        >>> store = ObjectStore(Path(".snapvcs"))
        >>> obj_hash = store.write_object(Blob(b"hello\\n"))
        >>> store.read_object(obj_hash)
        Blob(data=b'hello\\n')
    """

    def __init__(self, repo_dir: Path) -> None:
        """Initialize the object store.

        Args:
            repo_dir: Path to .snapvcs directory

        Raises:
            ValueError: If repo_dir doesn't exist
        """
        self.repo_dir = Path(repo_dir)
        self.objects_dir = self.repo_dir / OBJECTS_DIR

        if not self.repo_dir.exists():
            raise ValueError(f"Repository directory not found: {repo_dir}")

    def write(self, object_hash: str, data: bytes) -> str:
        """Persist ``data`` under ``object_hash``.

        Writing an object that already exists is a no-op. Uses atomic
        write (tmp file + rename) so a crash never leaves a partial object.

        Args:
            object_hash: SHA-1 of ``data``
            data: Raw framed bytes

        Returns:
            The object hash

        Raises:
            ValueError: If the hash is malformed or does not match ``data``
            RepositoryIOError: If the write fails (permissions, disk full, etc.)
        """
        validate_hash(object_hash)
        actual_hash = compute_hash(data)
        if actual_hash != object_hash:
            raise ValueError(
                f"Hash mismatch: expected {object_hash}, content hashes to {actual_hash}"
            )

        if self.exists(object_hash):
            logger.debug("Object %s already stored", object_hash)
            return object_hash

        object_path = self.object_path(object_hash)
        try:
            object_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_fd, tmp_path = tempfile.mkstemp(
                dir=object_path.parent,
                prefix=TMP_PREFIX,
            )
        except OSError as e:
            raise RepositoryIOError(f"Failed to write object {object_hash}: {e}") from e

        try:
            with os.fdopen(tmp_fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, object_path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise RepositoryIOError(f"Failed to write object {object_hash}: {e}") from e

        logger.debug("Wrote object %s (%d bytes)", object_hash, len(data))
        return object_hash

    def write_object(self, obj: StoredObject) -> str:
        """Serialize, hash and store an object. Returns its hash."""
        data = encode_object(obj)
        return self.write(compute_hash(data), data)

    def read(self, object_hash: str, verify_hash: bool = True) -> bytes:
        """Read the raw framed bytes of an object.

        Args:
            object_hash: SHA-1 hash of the object (40 hex characters)
            verify_hash: Whether to recompute and verify hash (default: True)

        Raises:
            NotFoundError: If the object doesn't exist
            FormatError: If hash verification fails
            RepositoryIOError: If the object can't be read
            ValueError: If object_hash is invalid format
        """
        validate_hash(object_hash)
        object_path = self.object_path(object_hash)

        try:
            data = object_path.read_bytes()
        except FileNotFoundError as e:
            raise NotFoundError(f"Object not found: {object_hash}") from e
        except OSError as e:
            raise RepositoryIOError(f"Failed to read object {object_hash}: {e}") from e

        if verify_hash:
            actual_hash = compute_hash(data)
            if actual_hash != object_hash:
                raise FormatError(
                    f"Object corrupted: expected {object_hash}, got {actual_hash}"
                )

        return data

    def read_object(self, object_hash: str) -> StoredObject:
        """Read and decode an object into its typed form."""
        return decode_object(self.read(object_hash))

    def exists(self, object_hash: str) -> bool:
        """Check if an object exists in the store."""
        try:
            validate_hash(object_hash)
        except ValueError:
            return False
        return self.object_path(object_hash).is_file()

    def read_all(self) -> Iterator[Tuple[str, bytes]]:
        """Lazily yield ``(hash, raw bytes)`` for every stored object.

        Shards and files are visited in sorted order, so repeated walks
        over an unchanged store yield the same sequence.

        Raises:
            RepositoryIOError: If the objects directory can't be listed or read
        """
        if not self.objects_dir.exists():
            return

        try:
            shards = sorted(p for p in self.objects_dir.iterdir() if p.is_dir())
        except OSError as e:
            raise RepositoryIOError(f"Failed to list objects: {e}") from e

        for shard in shards:
            try:
                names = sorted(p.name for p in shard.iterdir() if p.is_file())
            except OSError as e:
                raise RepositoryIOError(f"Failed to list {shard}: {e}") from e

            for name in names:
                if name.startswith(TMP_PREFIX):
                    continue
                object_hash = shard.name + name
                try:
                    data = (shard / name).read_bytes()
                except OSError as e:
                    raise RepositoryIOError(
                        f"Failed to read object {object_hash}: {e}"
                    ) from e
                yield object_hash, data

    def object_path(self, object_hash: str) -> Path:
        """Get the filesystem path for an object.

        Uses Git-like sharding: objects/<hash[:2]>/<hash[2:]>
        """
        return self.objects_dir / object_hash[:2] / object_hash[2:]
