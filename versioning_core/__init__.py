"""
Simple Versioning: numbered, immutable file revisions on a filesystem.
"""

__version__ = "0.1.0"

from versioning_core.versioning import (
    InvalidRevisionContentError,
    InvalidRevisionPathError,
    RevisionAllocationError,
    RevisionIOError,
    RevisionStore,
    RevisionStoreError,
)

__all__ = [
    "__version__",
    "RevisionStore",
    "RevisionStoreError",
    "InvalidRevisionPathError",
    "InvalidRevisionContentError",
    "RevisionAllocationError",
    "RevisionIOError",
]
