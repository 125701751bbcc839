"""HEAD and branch references.

There is exactly one branch. HEAD holds a symbolic ref to it, and the branch
file holds the hash of the latest commit once one exists.
"""

import logging
from pathlib import Path
from typing import Optional

from snapvcs.constants import DEFAULT_BRANCH, HEAD_FILE
from snapvcs.errors import FormatError, NotFoundError, RepositoryIOError
from snapvcs.storage.object_store import validate_hash

logger = logging.getLogger(__name__)

SYMREF_PREFIX = "ref: "


class RefStore:
    """Reads HEAD and reads/updates the branch it points to."""

    def __init__(self, repo_dir: Path) -> None:
        self.repo_dir = Path(repo_dir)
        self.head_path = self.repo_dir / HEAD_FILE

    def read_head(self) -> str:
        """Return the ref HEAD points at, e.g. ``refs/heads/master``.

        Raises:
            NotFoundError: If HEAD is missing
            FormatError: If HEAD is not a symbolic ref
        """
        try:
            content = self.head_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError as e:
            raise NotFoundError(f"HEAD not found in {self.repo_dir}") from e
        except OSError as e:
            raise RepositoryIOError(f"Failed to read HEAD: {e}") from e

        if not content.startswith(SYMREF_PREFIX):
            raise FormatError(f"HEAD is not a symbolic ref: {content!r}")
        return content[len(SYMREF_PREFIX):]

    def current_branch(self) -> str:
        """Name of the checked-out branch, falling back to the default."""
        try:
            ref = self.read_head()
        except NotFoundError:
            return DEFAULT_BRANCH
        return ref.rsplit("/", 1)[-1]

    def resolve_head(self) -> Optional[str]:
        """Commit hash of the current branch, or None before the first commit."""
        ref_path = self.repo_dir / self.read_head()
        try:
            content = ref_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise RepositoryIOError(f"Failed to read {ref_path}: {e}") from e
        return content or None

    def update_branch(self, commit_hash: str) -> None:
        """Point the current branch at ``commit_hash``."""
        validate_hash(commit_hash)
        ref_path = self.repo_dir / self.read_head()
        try:
            ref_path.parent.mkdir(parents=True, exist_ok=True)
            ref_path.write_text(commit_hash + "\n", encoding="utf-8")
        except OSError as e:
            raise RepositoryIOError(f"Failed to update {ref_path}: {e}") from e
        logger.debug("Updated %s to %s", ref_path.name, commit_hash)
