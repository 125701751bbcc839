"""Core engine layer for snapvcs.

This module provides the staging area, working tree scanning, and the
status, diff and log engines.
"""

from snapvcs.core.staging import Index, StagingManager
from snapvcs.core.status import StatusReport, classify

__all__ = [
    "Index",
    "StagingManager",
    "StatusReport",
    "classify",
]
