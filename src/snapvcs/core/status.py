"""Working tree vs index comparison.

Status classifies every path seen in either snapshot into exactly one of
modified, deleted, untracked or unchanged, then renders the first three in
the familiar "Changes to be committed" / "Untracked files" layout.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from snapvcs.constants import DEFAULT_BRANCH, NO_COMMITS_MESSAGE
from snapvcs.core.staging import Index
from snapvcs.core.worktree import scan
from snapvcs.errors import NotFoundError

logger = logging.getLogger(__name__)


class StatusReport:
    """Classified paths for one working tree / index pair.

    Each list is sorted by path.
    """

    def __init__(
        self,
        modified: List[str],
        deleted: List[str],
        untracked: List[str],
        unchanged: List[str],
    ):
        self.modified = sorted(modified)
        self.deleted = sorted(deleted)
        self.untracked = sorted(untracked)
        self.unchanged = sorted(unchanged)

    @property
    def changes_to_be_committed(self) -> List[str]:
        lines = [f"\tmodified:   {path}" for path in self.modified]
        lines.extend(f"\tdeleted:   {path}" for path in self.deleted)
        return lines

    @property
    def is_clean(self) -> bool:
        return not (self.modified or self.deleted or self.untracked)

    def render(self, branch: str = DEFAULT_BRANCH) -> str:
        """Render the status text; unchanged paths never appear."""
        output = f"On branch {branch}\n\n"

        changes = self.changes_to_be_committed
        if changes:
            output += "Changes to be committed:\n"
            output += "".join(line + "\n" for line in changes)

        if self.untracked:
            output += "\nUntracked files:\n"
            output += "".join(f"\t{path}\n" for path in self.untracked)

        return output

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "modified": self.modified,
            "deleted": self.deleted,
            "untracked": self.untracked,
            "unchanged": self.unchanged,
        }

    def __repr__(self) -> str:
        return (
            f"StatusReport(modified={self.modified}, deleted={self.deleted}, "
            f"untracked={self.untracked}, unchanged={self.unchanged})"
        )


def classify(working: Mapping[str, str], index: Mapping[str, str]) -> StatusReport:
    """Compare a working tree snapshot against the staged snapshot.

    Args:
        working: ``{path: hash}`` from the scanner
        index: ``{path: hash}`` from the index
    """
    modified, untracked, unchanged = [], [], []
    for path, working_hash in working.items():
        staged_hash = index.get(path)
        if staged_hash is None:
            untracked.append(path)
        elif staged_hash != working_hash:
            modified.append(path)
        else:
            unchanged.append(path)

    deleted = [path for path in index if path not in working]
    return StatusReport(modified, deleted, untracked, unchanged)


def compute_status(workspace_root: Path, index: Index) -> StatusReport:
    """Scan the working tree and classify it against the index.

    Raises:
        NotFoundError: If nothing has been staged yet
        RepositoryIOError: If the tree or index can't be read
    """
    staged = index.load()
    working = scan(workspace_root)
    report = classify(working, staged)
    logger.debug("Status: %r", report)
    return report


def staged_status(workspace_root: Path, index: Index) -> Optional[StatusReport]:
    """Like ``compute_status``, but None when no index file exists yet.

    A missing index means nothing was ever staged. Any other index failure
    still propagates.
    """
    try:
        return compute_status(workspace_root, index)
    except NotFoundError:
        if index.exists():
            raise
        return None


def status(workspace_root: Path, index: Index, branch: str = DEFAULT_BRANCH) -> str:
    """Render status text, or the fixed message when nothing is staged."""
    report = staged_status(workspace_root, index)
    if report is None:
        return NO_COMMITS_MESSAGE
    return report.render(branch)


def status_dict(workspace_root: Path, index: Index) -> Dict[str, Any]:
    """Machine-readable status: the classification, or the fixed message."""
    report = staged_status(workspace_root, index)
    if report is None:
        return {"message": NO_COMMITS_MESSAGE.strip()}
    return report.to_dict()
