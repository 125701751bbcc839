"""New-file diffs for untracked content.

Only files present in the working tree and absent from the index produce
output. Tracked files are not compared line by line.
"""

import logging
from pathlib import Path
from typing import List

from snapvcs.constants import DEFAULT_FILE_MODE
from snapvcs.core.staging import Index
from snapvcs.core.worktree import list_files, read_file

logger = logging.getLogger(__name__)


def format_new_file(path: str, content: bytes) -> str:
    """Render one ``new file`` block for ``path``."""
    text = content.decode("utf-8", errors="replace")
    return (
        f"diff --git a/{path} b/{path}\n"
        f"new file mode {DEFAULT_FILE_MODE}\n"
        f"--- /dev/null\n"
        f"+++ b/{path}\n"
        f"{text}\n"
    )


def untracked_files(workspace_root: Path, index: Index) -> List[str]:
    """Working tree files absent from the index, in walk order.

    Raises:
        NotFoundError: If the index doesn't exist
    """
    staged = index.load()
    return [path for path in list_files(workspace_root) if path not in staged]


def diff(workspace_root: Path, index: Index) -> str:
    """Concatenate a ``new file`` block for every untracked file.

    Raises:
        NotFoundError: If the index doesn't exist
        RepositoryIOError: If a file becomes unreadable mid-walk
    """
    blocks = [
        format_new_file(path, read_file(workspace_root, path))
        for path in untracked_files(workspace_root, index)
    ]
    logger.debug("Diff produced %d block(s)", len(blocks))
    return "".join(blocks)
