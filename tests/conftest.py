"""
Configuration file for pytest.

This file configures pytest to properly load environment variables
and provides shared fixtures for tests.
"""

import pytest
import dotenv

from versioning_core.versioning.revision_store import RevisionStore

# Load environment variables from .env file
dotenv.load_dotenv()


@pytest.fixture
def base_dir(tmp_path):
    """Base directory for revisions; not created up front."""
    return tmp_path / "revisions"


@pytest.fixture
def store(base_dir):
    """Revision store over a fresh base directory."""
    return RevisionStore(base_dir)


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Global configuration loaded from an empty directory with a clean environment."""
    import versioning_core.config.config_manager as config_module

    for var in (
        "ENVIRONMENT",
        "DEBUG",
        "VERSIONING_BASE_DIR",
        "VERSIONING_MAX_RETRIES",
        "VERSIONING_CLEANUP_ON_FAILURE",
        "LOG_LEVEL",
        "LOG_FORMAT",
        "LOG_FILE",
        "LOG_JSON",
    ):
        monkeypatch.delenv(var, raising=False)

    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("VERSIONING_BASE_DIR", str(tmp_path / "configured-revisions"))

    config = config_module.init_config(config_dir)
    yield config

    config_module.ConfigManager._instance = None
    config_module._config_manager = None
