"""Working tree scanning.

Walks the live files of a workspace, skipping repository metadata, and
produces ``relative path -> object hash`` snapshots for status and diff.
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from snapvcs.constants import REPO_DIR, RESERVED_NAMES
from snapvcs.errors import RepositoryIOError
from snapvcs.storage.object_store import hash_object
from snapvcs.storage.objects import Blob

logger = logging.getLogger(__name__)

EXCLUDED_NAMES = frozenset(RESERVED_NAMES | {REPO_DIR})


def is_excluded(rel_path: str) -> bool:
    """True if ``rel_path`` (POSIX, relative) belongs to repository metadata."""
    first = rel_path.split("/", 1)[0]
    return first in EXCLUDED_NAMES


def _raise_walk_error(error: OSError) -> None:
    raise RepositoryIOError(f"Failed to scan {error.filename}: {error}") from error


def list_files(root: Path, start: Optional[str] = None) -> List[str]:
    """List every regular file under ``root`` as sorted POSIX relative paths.

    Directories are walked in sorted order, so the result is stable for a
    given tree. Symlinks are not followed or reported. With ``start`` (a
    relative POSIX directory) only that subtree is walked, but returned paths
    and exclusions are still relative to ``root``.

    Raises:
        RepositoryIOError: If ``root`` or a subdirectory is unreadable
    """
    root = Path(root)
    top = root / start if start else root
    if not top.is_dir():
        raise RepositoryIOError(f"Working tree not found: {top}")

    files: List[str] = []
    for dirpath, dirnames, filenames in os.walk(top, onerror=_raise_walk_error):
        rel_dir = Path(dirpath).relative_to(root)

        kept = []
        for name in sorted(dirnames):
            rel = (rel_dir / name).as_posix()
            if is_excluded(rel) or os.path.islink(os.path.join(dirpath, name)):
                continue
            kept.append(name)
        dirnames[:] = kept

        for name in sorted(filenames):
            full = os.path.join(dirpath, name)
            rel = (rel_dir / name).as_posix()
            if is_excluded(rel) or os.path.islink(full) or not os.path.isfile(full):
                continue
            files.append(rel)

    return files


def read_file(root: Path, rel_path: str) -> bytes:
    """Read a working-tree file, translating OS failures."""
    try:
        return (Path(root) / rel_path).read_bytes()
    except OSError as e:
        raise RepositoryIOError(f"Failed to read {rel_path}: {e}") from e


def hash_file(root: Path, rel_path: str) -> str:
    """Blob hash of a working-tree file, as the index would record it."""
    return hash_object(Blob(read_file(root, rel_path)))


def scan(root: Path) -> Dict[str, str]:
    """Snapshot the working tree as ``{relative path: blob hash}``.

    Raises:
        RepositoryIOError: If the tree or any file is unreadable
    """
    snapshot = {rel_path: hash_file(root, rel_path) for rel_path in list_files(root)}
    logger.debug("Scanned %d file(s) under %s", len(snapshot), root)
    return snapshot
