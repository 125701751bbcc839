"""snapvcs - a minimal content-addressed version control core.

snapvcs stores file snapshots in a Git-like object store, stages them in a
flat index, and answers status/diff/log questions over a single linear
history.
"""

__version__ = "0.1.0"
__author__ = "snapvcs Contributors"

from snapvcs.repository import Repository

__all__ = ["__version__", "__author__", "Repository"]
