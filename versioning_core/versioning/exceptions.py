"""
Exceptions raised by the revision store.
"""
from pathlib import Path
from typing import Optional, Union


class RevisionStoreError(Exception):
    """Base class for all revision store failures."""

    pass


class InvalidRevisionPathError(RevisionStoreError, ValueError):
    """Raised when a file path would escape the revision directory or is malformed."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid revision path {path!r}: {reason}")


class InvalidRevisionContentError(RevisionStoreError, ValueError):
    """Raised when file content cannot be stored, e.g. text that is not encodable as UTF-8."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid content for {path!r}: {reason}")


class RevisionAllocationError(RevisionStoreError):
    """Raised when no free revision number could be claimed within the retry budget."""

    def __init__(self, base_directory: Union[str, Path], attempts: int):
        self.base_directory = Path(base_directory)
        self.attempts = attempts
        super().__init__(
            f"Could not allocate a revision number in {self.base_directory} "
            f"after {attempts} attempts"
        )


class RevisionIOError(RevisionStoreError, OSError):
    """Raised when a filesystem operation fails while creating or listing revisions."""

    def __init__(self, operation: str, path: Union[str, Path], cause: Optional[OSError] = None):
        self.operation = operation
        self.path = Path(path)
        message = f"{operation} failed for {self.path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
