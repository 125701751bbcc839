"""Custom exceptions for snapvcs.

Every failure raised by the core derives from SnapVCSError so that callers
(the CLI, or any embedding application) can render it and pick an exit code
without catching unrelated exceptions.
"""


class SnapVCSError(RuntimeError):
    """Base class for all snapvcs errors."""
    pass


class NotARepositoryError(SnapVCSError):
    """No .snapvcs/ directory was found for the workspace."""

    def __init__(self, workspace_root):
        self.workspace_root = workspace_root
        super().__init__(
            f"Not a snapvcs repository (no .snapvcs/ found in {workspace_root})"
        )


# File system errors
class RepositoryIOError(SnapVCSError):
    """File system failure (permissions, missing path, disk full)."""
    pass


class NotFoundError(RepositoryIOError):
    """An expected metadata file (index, config, object) is absent."""
    pass


class ConfigMissingError(NotFoundError):
    """Commit attempted before the user identity was configured."""

    def __init__(self, detail: str = "user identity is not configured"):
        super().__init__(
            f"{detail}; run 'snapvcs config <username> <email>' first"
        )


# Content errors
class FormatError(SnapVCSError):
    """Stored or decoded content is malformed."""
    pass
