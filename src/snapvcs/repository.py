"""Repository facade.

``Repository`` ties the object store, index, refs and engines to one
workspace. It is the boundary the CLI talks to: every method either returns
a plain value (text, hash, stats) or raises a SnapVCSError subclass.
"""

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from snapvcs.config import Config, load_config, save_config
from snapvcs.constants import (
    CONFIG_CONTENT,
    CONFIG_FILE,
    DESCRIPTION_CONTENT,
    DESCRIPTION_FILE,
    HEAD_CONTENT,
    HEAD_FILE,
    OBJECTS_DIR,
    REFS_HEADS_DIR,
    REFS_TAGS_DIR,
    REPO_DIR,
)
from snapvcs.core import diff as diff_engine
from snapvcs.core import log as log_engine
from snapvcs.core import status as status_engine
from snapvcs.core.staging import Index, StagingManager
from snapvcs.core.status import StatusReport
from snapvcs.errors import NotARepositoryError, RepositoryIOError, SnapVCSError
from snapvcs.storage import CommitBuilder, ObjectStore, RefStore

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class Repository:
    """A workspace plus its .snapvcs metadata directory.

    Attributes:
        workspace_root: Directory whose files are tracked
        repo_dir: workspace_root / .snapvcs
    """

    def __init__(self, workspace_root: PathLike):
        self.workspace_root = Path(workspace_root).resolve()
        self.repo_dir = self.workspace_root / REPO_DIR
        if not self.repo_dir.is_dir():
            raise NotARepositoryError(self.workspace_root)

        self.object_store = ObjectStore(self.repo_dir)
        self.index = Index(self.repo_dir)
        self.refs = RefStore(self.repo_dir)
        self.staging = StagingManager(self.workspace_root, self.object_store)
        self.commit_builder = CommitBuilder(self.object_store, self.refs)

    @classmethod
    def init(cls, workspace_root: PathLike, force: bool = False) -> "Repository":
        """Create the repository layout and return the opened repository.

        Raises:
            SnapVCSError: If a repository already exists and ``force`` is False
            RepositoryIOError: If the layout can't be created
        """
        workspace_root = Path(workspace_root).resolve()
        repo_dir = workspace_root / REPO_DIR

        if repo_dir.exists():
            if not force:
                raise SnapVCSError(f"snapvcs repository already exists in {workspace_root}")
            logger.debug("Removing existing %s", repo_dir)
            shutil.rmtree(repo_dir)

        try:
            for subdir in (OBJECTS_DIR, REFS_HEADS_DIR, REFS_TAGS_DIR):
                (repo_dir / subdir).mkdir(parents=True, exist_ok=True)

            default_files = {
                CONFIG_FILE: CONFIG_CONTENT,
                DESCRIPTION_FILE: DESCRIPTION_CONTENT,
                HEAD_FILE: HEAD_CONTENT,
            }
            for filename, content in default_files.items():
                (repo_dir / filename).write_text(content, encoding="utf-8")
        except OSError as e:
            # Clean up partial initialization
            shutil.rmtree(repo_dir, ignore_errors=True)
            raise RepositoryIOError(f"Failed to initialize repository: {e}") from e

        logger.debug("Initialized repository in %s", repo_dir)
        return cls(workspace_root)

    @classmethod
    def open(cls, workspace_root: PathLike) -> "Repository":
        return cls(workspace_root)

    @classmethod
    def discover(cls, start: PathLike) -> "Repository":
        """Open the nearest repository at or above ``start``."""
        start = Path(start).resolve()
        for candidate in (start, *start.parents):
            if (candidate / REPO_DIR).is_dir():
                return cls(candidate)
        raise NotARepositoryError(start)

    def set_config(self, username: str, email: str) -> Config:
        config = Config(username=username, email=email)
        save_config(self.repo_dir, config)
        return config

    def get_config(self) -> Config:
        return load_config(self.repo_dir)

    def add(self, paths: Iterable[PathLike]) -> Dict[str, List[str]]:
        return self.staging.add([Path(p) for p in paths])

    def status_report(self) -> StatusReport:
        """Classified status; raises NotFoundError if nothing is staged."""
        return status_engine.compute_status(self.workspace_root, self.index)

    def status(self) -> str:
        return status_engine.status(
            self.workspace_root, self.index, branch=self.refs.current_branch()
        )

    def status_dict(self) -> Dict[str, Any]:
        return status_engine.status_dict(self.workspace_root, self.index)

    def diff(self) -> str:
        return diff_engine.diff(self.workspace_root, self.index)

    def commit(self, message: str) -> str:
        """Commit as the configured user and return the commit hash.

        Raises:
            ConfigMissingError: If no identity has been configured
        """
        config = load_config(self.repo_dir)
        return self.commit_builder.create_commit(message, config)

    def log(self, order: str = "storage", max_count: Optional[int] = None) -> str:
        return log_engine.logs(self.object_store, order=order, max_count=max_count)

    def head(self) -> Optional[str]:
        """Hash of the latest commit on the branch, if any."""
        return self.refs.resolve_head()
