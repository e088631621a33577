"""
RevisionStore for persisting numbered file snapshots on disk.

This module provides functionality for:
1. Creating immutable, monotonically numbered revisions of a set of files
2. Listing the revision numbers that currently exist
3. Guarding number allocation against concurrent writers

Each revision is a directory named by its decimal number directly under the
base directory. The directory listing is the only index; nothing else is
persisted.
"""
import logging
import re
import shutil
import threading
from pathlib import Path, PurePosixPath
from typing import Dict, List, Mapping, Union

from versioning_core.versioning.exceptions import (
    InvalidRevisionContentError,
    InvalidRevisionPathError,
    RevisionAllocationError,
    RevisionIOError,
)

FileContent = Union[str, bytes]

# Only ASCII digits qualify; str.isdigit() would accept other unicode digits
REVISION_NAME_PATTERN = re.compile(r"[0-9]+")

DEFAULT_MAX_ALLOCATION_RETRIES = 5

_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:")

# One lock per resolved base directory, shared by every store instance
_base_directory_locks: Dict[str, threading.Lock] = {}
_registry_lock = threading.Lock()


def _lock_for(base_directory: Path) -> threading.Lock:
    """
    Return the lock guarding allocation in a base directory.

    Locks are kept for the life of the process, one per distinct base
    directory ever used; the registry does not shrink.
    """
    key = str(base_directory.resolve())
    with _registry_lock:
        lock = _base_directory_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _base_directory_locks[key] = lock
        return lock


def is_revision_name(name: str) -> bool:
    """Return True if a directory name follows the canonical numeric-name rule."""
    return REVISION_NAME_PATTERN.fullmatch(name) is not None


def normalize_revision_path(path) -> PurePosixPath:
    """
    Validate a relative file path and return it in normalized form.

    Args:
        path: Relative path using forward-slash segments

    Returns:
        The path with empty and '.' segments removed

    Raises:
        InvalidRevisionPathError: If the path is empty, absolute, contains
            parent traversal or a NUL character, or names no file
    """
    if not isinstance(path, str):
        raise InvalidRevisionPathError(path, "path must be a string")
    if not path:
        raise InvalidRevisionPathError(path, "path is empty")
    if "\x00" in path:
        raise InvalidRevisionPathError(path, "path contains a NUL character")
    if path.startswith(("/", "\\")) or _DRIVE_PATTERN.match(path):
        raise InvalidRevisionPathError(path, "absolute paths are not allowed")

    segments = re.split(r"[\\/]", path)
    if ".." in segments:
        raise InvalidRevisionPathError(path, "parent directory segments are not allowed")

    parts = [segment for segment in segments if segment not in ("", ".")]
    if not parts:
        raise InvalidRevisionPathError(path, "path does not name a file")

    return PurePosixPath(*parts)


class RevisionStore:
    """
    Stores revisions as numbered directories under a base directory.

    The store keeps no state besides its configuration; every call re-reads
    the base directory, so revisions removed out-of-band are picked up at
    once. Allocating a number and creating its directory happen as a single
    exclusive step: a process-wide lock per base directory serializes
    in-process callers, and the directory itself is created exclusively so a
    name that is already taken forces a rescan instead of a merge.
    """

    def __init__(
        self,
        base_directory: Union[str, Path],
        max_allocation_retries: int = DEFAULT_MAX_ALLOCATION_RETRIES,
        cleanup_on_failure: bool = True,
    ):
        """
        Initialize the RevisionStore.

        Args:
            base_directory: Directory under which revision directories are created
            max_allocation_retries: Attempts to claim a revision number before giving up
            cleanup_on_failure: Remove a partially written revision when a write fails
        """
        if max_allocation_retries < 1:
            raise ValueError("max_allocation_retries must be at least 1")

        self.base_directory = Path(base_directory)
        self.max_allocation_retries = max_allocation_retries
        self.cleanup_on_failure = cleanup_on_failure
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config=None) -> "RevisionStore":
        """Create a store from the storage section of the application configuration."""
        if config is None:
            from versioning_core.config import get_config

            config = get_config()
        storage_config = config.config.storage
        return cls(
            base_directory=storage_config.base_directory,
            max_allocation_retries=storage_config.max_allocation_retries,
            cleanup_on_failure=storage_config.cleanup_on_failure,
        )

    def create_revision(self, files: Mapping[str, FileContent]) -> int:
        """
        Create a new revision containing the given files.

        Args:
            files: Mapping of relative file path to file content (str or bytes)

        Returns:
            The number assigned to the new revision

        Raises:
            InvalidRevisionPathError: If any path is invalid; nothing is written
            InvalidRevisionContentError: If any text is not encodable as UTF-8
            TypeError: If any content is neither str nor bytes
            RevisionAllocationError: If no number could be claimed
            RevisionIOError: If creating a directory or writing a file fails
        """
        entries = self._validate_files(files)

        self._ensure_base_directory()
        number, revision_dir = self._allocate_revision_directory()

        try:
            for relative_path, data in entries:
                self._write_file(revision_dir / relative_path, data)
        except Exception:
            self.logger.error(f"Revision {number} is incomplete after a write failure")
            if self.cleanup_on_failure:
                self._discard_revision_directory(revision_dir)
            raise

        self.logger.debug(f"Created revision {number} with {len(entries)} files")
        return number

    def list_revisions(self) -> List[int]:
        """
        List the existing revision numbers.

        Returns:
            Revision numbers in ascending order; empty if the base directory is missing
        """
        if not self.base_directory.exists():
            return []
        return sorted(set(self._scan_revision_numbers()))

    def revision_path(self, number: int) -> Path:
        """Return the directory a revision with the given number lives in."""
        if number < 1:
            raise ValueError(f"Revision numbers start at 1, got {number}")
        return self.base_directory / str(number)

    def _validate_files(self, files: Mapping[str, FileContent]):
        """Normalize every path, encode text as UTF-8 and reject the whole set on the first problem."""
        entries = []
        seen = {}
        for raw_path, content in files.items():
            relative_path = normalize_revision_path(raw_path)
            if not isinstance(content, (str, bytes)):
                raise TypeError(
                    f"Content for {raw_path!r} must be str or bytes, "
                    f"got {type(content).__name__}"
                )
            if relative_path in seen:
                raise InvalidRevisionPathError(
                    raw_path, f"duplicates {seen[relative_path]!r} after normalization"
                )
            if isinstance(content, str):
                try:
                    content = content.encode("utf-8")
                except UnicodeEncodeError as e:
                    raise InvalidRevisionContentError(
                        raw_path, f"text is not encodable as UTF-8 ({e.reason})"
                    ) from e
            seen[relative_path] = raw_path
            entries.append((relative_path, content))

        for relative_path, raw_path in seen.items():
            for parent in relative_path.parents:
                if parent in seen:
                    raise InvalidRevisionPathError(
                        raw_path, f"{seen[parent]!r} is used both as a file and a directory"
                    )
        return entries

    def _ensure_base_directory(self):
        try:
            self.base_directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RevisionIOError("create base directory", self.base_directory, e) from e

    def _scan_revision_numbers(self) -> List[int]:
        try:
            return [
                int(entry.name)
                for entry in self.base_directory.iterdir()
                if is_revision_name(entry.name) and entry.is_dir()
            ]
        except OSError as e:
            raise RevisionIOError("scan base directory", self.base_directory, e) from e

    def _next_revision_number(self, floor: int = 0) -> int:
        return max([floor, *self._scan_revision_numbers()]) + 1

    def _allocate_revision_directory(self):
        """Claim the next free number by exclusively creating its directory."""
        with _lock_for(self.base_directory):
            # A taken name becomes the floor for the next candidate
            taken = 0
            attempt = 0
            while attempt < self.max_allocation_retries:
                number = self._next_revision_number(floor=taken)
                revision_dir = self.revision_path(number)
                try:
                    revision_dir.mkdir()
                except FileExistsError:
                    taken = number
                    if not revision_dir.is_dir():
                        # Plain files are never revisions, so they do not use up an attempt
                        self.logger.debug(f"Skipping non-directory entry {revision_dir}")
                        continue
                    attempt += 1
                    self.logger.warning(
                        f"Revision directory {revision_dir} already exists "
                        f"(attempt {attempt}/{self.max_allocation_retries}), rescanning"
                    )
                    continue
                except OSError as e:
                    raise RevisionIOError("create revision directory", revision_dir, e) from e

                self.logger.debug(f"Allocated revision {number} at {revision_dir}")
                return number, revision_dir

        self.logger.error(
            f"Giving up on revision allocation in {self.base_directory} "
            f"after {self.max_allocation_retries} attempts"
        )
        raise RevisionAllocationError(self.base_directory, self.max_allocation_retries)

    def _write_file(self, target: Path, data: bytes):
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise RevisionIOError("write file", target, e) from e

    def _discard_revision_directory(self, revision_dir: Path):
        try:
            shutil.rmtree(revision_dir)
            self.logger.info(f"Removed incomplete revision directory {revision_dir}")
        except OSError as e:
            self.logger.warning(f"Could not remove incomplete revision directory {revision_dir}: {e}")
