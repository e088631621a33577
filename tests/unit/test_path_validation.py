"""
Tests for revision path normalization and the canonical revision name rule.
"""

from pathlib import PurePosixPath

import pytest

from versioning_core.versioning.exceptions import InvalidRevisionPathError
from versioning_core.versioning.revision_store import is_revision_name, normalize_revision_path


@pytest.mark.parametrize(
    "path, expected",
    [
        ("a.txt", "a.txt"),
        ("src/main/App.java", "src/main/App.java"),
        ("./src/./main.py", "src/main.py"),
        ("src//main.py", "src/main.py"),
        ("src\\main.py", "src/main.py"),
        ("dir/", "dir"),
        ("...", "..."),
        ("..hidden", "..hidden"),
    ],
)
def test_normalize_valid_paths(path, expected):
    assert normalize_revision_path(path) == PurePosixPath(expected)


@pytest.mark.parametrize(
    "path, reason",
    [
        ("", "empty"),
        ("/abs.txt", "absolute"),
        ("\\abs.txt", "absolute"),
        ("D:\\file.txt", "absolute"),
        ("../x", "parent"),
        ("a/../b", "parent"),
        ("a\\..\\b", "parent"),
        ("./.", "does not name a file"),
        ("nul\x00byte", "NUL"),
        (None, "string"),
        (b"bytes.txt", "string"),
    ],
)
def test_normalize_invalid_paths(path, reason):
    with pytest.raises(InvalidRevisionPathError) as exc_info:
        normalize_revision_path(path)

    assert exc_info.value.path == path
    assert reason in exc_info.value.reason


@pytest.mark.parametrize("name", ["0", "1", "42", "007", "12345678901234567890"])
def test_revision_names(name):
    assert is_revision_name(name)


@pytest.mark.parametrize("name", ["", "abc", "1a", "a1", "-1", "+1", "1.5", " 1", "1 ", "１", "٣"])
def test_non_revision_names(name):
    assert not is_revision_name(name)
