"""Storage layer for snapvcs.

This module provides the content-addressable object store, the typed objects
it holds, branch references, and commit record creation.
"""

from snapvcs.storage.commit_builder import CommitBuilder
from snapvcs.storage.object_store import ObjectStore, compute_hash, hash_object
from snapvcs.storage.objects import Blob, CommitRecord, StoredObject, Tree
from snapvcs.storage.refs import RefStore

__all__ = [
    "ObjectStore",
    "compute_hash",
    "hash_object",
    "StoredObject",
    "Blob",
    "CommitRecord",
    "Tree",
    "RefStore",
    "CommitBuilder",
]
