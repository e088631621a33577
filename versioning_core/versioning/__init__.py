"""
Versioning package for storing numbered file revisions.

This package provides the RevisionStore, which persists sets of files as
immutable, monotonically numbered revision directories and lists the
revisions that exist.
"""

from versioning_core.versioning.exceptions import (
    InvalidRevisionContentError,
    InvalidRevisionPathError,
    RevisionAllocationError,
    RevisionIOError,
    RevisionStoreError,
)
from versioning_core.versioning.revision_store import RevisionStore

__all__ = [
    "RevisionStore",
    "RevisionStoreError",
    "InvalidRevisionPathError",
    "InvalidRevisionContentError",
    "RevisionAllocationError",
    "RevisionIOError",
]
