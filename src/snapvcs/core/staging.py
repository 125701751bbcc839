"""Staging area management for snapvcs.

The staging area (index) records, for every tracked path, the hash of the
content that will go into the next commit. The index file holds one line per
path:

    <40-hex blob hash> <relative/posix/path>

Staging a path upserts its line and leaves every other entry in place.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Tuple

from snapvcs.constants import INDEX_FILE, REPO_DIR
from snapvcs.core.worktree import is_excluded, list_files, read_file
from snapvcs.errors import (
    FormatError,
    NotFoundError,
    RepositoryIOError,
    SnapVCSError,
)
from snapvcs.storage import Blob, ObjectStore
from snapvcs.storage.object_store import validate_hash

logger = logging.getLogger(__name__)


class Index:
    """The durable ``path -> hash`` mapping of staged content.

    Attributes:
        repo_dir: Path to the .snapvcs directory
        index_path: Path to the index file (.snapvcs/index)
    """

    def __init__(self, repo_dir: Path):
        self.repo_dir = Path(repo_dir)
        self.index_path = self.repo_dir / INDEX_FILE

    def exists(self) -> bool:
        return self.index_path.is_file()

    def load(self) -> Dict[str, str]:
        """Load the index as an insertion-ordered ``{path: hash}`` dict.

        Raises:
            NotFoundError: If nothing has been staged yet (no index file)
            FormatError: If a line is malformed
            RepositoryIOError: If the file can't be read
        """
        try:
            raw = self.index_path.read_bytes()
        except FileNotFoundError as e:
            raise NotFoundError(f"Index not found: {self.index_path}") from e
        except OSError as e:
            raise RepositoryIOError(f"Failed to read index: {e}") from e

        try:
            content = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormatError(f"Index is not valid UTF-8: {e}") from e

        # Only "\n" separates entries; other line breaks are part of a path
        entries: Dict[str, str] = {}
        for lineno, line in enumerate(content.split("\n"), start=1):
            if not line.strip():
                continue
            parts = line.split(" ", 1)
            if len(parts) != 2 or not parts[1]:
                raise FormatError(f"Corrupted index line {lineno}: {line!r}")
            obj_hash, path = parts
            try:
                validate_hash(obj_hash)
            except ValueError as e:
                raise FormatError(f"Corrupted index line {lineno}: {e}") from e
            entries[path] = obj_hash
        return entries

    def entries(self) -> List[Tuple[str, str]]:
        """Staged ``(path, hash)`` pairs in insertion order."""
        return list(self.load().items())

    def stage(self, path: str, obj_hash: str) -> None:
        """Record or overwrite the entry for ``path``."""
        self.update({path: obj_hash})

    @staticmethod
    def validate_path(path: str) -> None:
        """Check that ``path`` can be stored as one index line.

        Raises:
            ValueError: If the path is empty, contains a newline, or is not
                representable as UTF-8 (undecodable file names)
        """
        if not path or "\n" in path:
            raise ValueError(f"Invalid index path: {path!r}")
        try:
            path.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ValueError(f"Path is not valid UTF-8: {path!r}") from e

    def update(self, staged: Mapping[str, str]) -> None:
        """Upsert several entries with a single write."""
        for path, obj_hash in staged.items():
            validate_hash(obj_hash)
            self.validate_path(path)

        try:
            entries = self.load()
        except NotFoundError:
            entries = {}

        entries.update(staged)
        self._save(entries)
        logger.debug("Index now tracks %d path(s)", len(entries))

    def _save(self, entries: Mapping[str, str]) -> None:
        """Save index to disk."""
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self.repo_dir,
                prefix=".tmp_index_",
            )
        except OSError as e:
            raise RepositoryIOError(f"Failed to write index: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                for path, obj_hash in entries.items():
                    f.write(f"{obj_hash} {path}\n")
                f.flush()
                os.fsync(f.fileno())

            # Atomic rename
            os.replace(tmp_path, self.index_path)

        except OSError as e:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise RepositoryIOError(f"Failed to write index: {e}") from e


class StagingManager:
    """Implements ``add``: store file content and upsert the index.

    Attributes:
        workspace_root: Root directory of the workspace
        object_store: ObjectStore receiving a Blob per staged file
        index: Index being updated
    """

    def __init__(self, workspace_root: Path, object_store: ObjectStore):
        """Initialize StagingManager.

        Raises:
            SnapVCSError: If the workspace has no .snapvcs directory
        """
        self.workspace_root = Path(workspace_root).resolve()
        self.repo_dir = self.workspace_root / REPO_DIR
        self.object_store = object_store
        self.index = Index(self.repo_dir)

        if not self.repo_dir.exists():
            raise SnapVCSError(
                f"Not a snapvcs repository (no {REPO_DIR}/ found in {workspace_root})"
            )

    def add(self, paths: Iterable[Path]) -> Dict[str, List[str]]:
        """Add files or directories to the staging area.

        Args:
            paths: Paths (absolute or relative to the workspace) to add

        Returns:
            Dictionary of relative paths:
            {
                "added": [...],      # newly tracked
                "updated": [...],    # tracked, content changed
                "unchanged": [...],  # tracked, same content
            }

        Raises:
            NotFoundError: If a path does not exist
            SnapVCSError: If a path is outside the workspace or its name
                can't be recorded in the index
            RepositoryIOError: If a file can't be read or stored
        """
        try:
            current = self.index.load()
        except NotFoundError:
            current = {}

        stats: Dict[str, List[str]] = {"added": [], "updated": [], "unchanged": []}
        staged: Dict[str, str] = {}

        rel_paths = [rel for path in paths for rel in self._expand(Path(path))]
        for rel_path in rel_paths:
            try:
                Index.validate_path(rel_path)
            except ValueError as e:
                raise SnapVCSError(f"Cannot stage file: {e}") from e

        for rel_path in rel_paths:
            content = read_file(self.workspace_root, rel_path)
            blob_hash = self.object_store.write_object(Blob(content))

            previous = staged.get(rel_path, current.get(rel_path))
            if previous is None:
                stats["added"].append(rel_path)
            elif previous != blob_hash:
                stats["updated"].append(rel_path)
            else:
                stats["unchanged"].append(rel_path)
            staged[rel_path] = blob_hash

        if staged:
            self.index.update(staged)
        return stats

    def get_staged_files(self) -> Dict[str, str]:
        """Currently staged ``{path: hash}``; empty if nothing staged."""
        try:
            return self.index.load()
        except NotFoundError:
            return {}

    def _expand(self, path: Path) -> List[str]:
        """Turn one argument into workspace-relative file paths."""
        abs_path = self._resolve_path(path)
        if not abs_path.exists():
            raise NotFoundError(f"{path}: file not found")

        rel = abs_path.relative_to(self.workspace_root).as_posix()
        if abs_path.is_dir():
            if rel != "." and is_excluded(rel):
                return []
            return list_files(self.workspace_root, start=None if rel == "." else rel)

        # Skip repository metadata itself
        if is_excluded(rel):
            logger.debug("Skipping metadata path %s", rel)
            return []
        return [rel]

    def _resolve_path(self, path: Path) -> Path:
        """Resolve path to absolute path within workspace."""
        if path.is_absolute():
            abs_path = path.resolve()
        else:
            abs_path = (self.workspace_root / path).resolve()

        # Verify path is within workspace
        try:
            abs_path.relative_to(self.workspace_root)
        except ValueError:
            raise SnapVCSError(
                f"Path {path} is outside workspace root {self.workspace_root}"
            )

        return abs_path
