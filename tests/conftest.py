import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from shardcache.infrastructure.cache.file_store import FileCacheStore
from shardcache.infrastructure.config import settings


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path: Path):
    """Keeps tests away from the user's real configuration and cache.

    Drops SHARDCACHE_* environment variables and points the default cache
    root at a temporary directory.
    """
    for name in list(os.environ):
        if name.startswith(settings.ENV_PREFIX):
            monkeypatch.delenv(name)
    settings.clear_test_config()
    settings.set_config_for_testing({"cache.root": str(tmp_path / "default-cache")})
    yield
    settings.clear_test_config()


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    """Root directory for a store under test (not created yet)."""
    return tmp_path / "cache"


@pytest.fixture
def store(cache_root: Path) -> FileCacheStore:
    """A store rooted in a fresh temporary directory."""
    return FileCacheStore(root=cache_root)


@pytest.fixture
def cli_bootstrap(mocker):
    """Stubs configuration loading and logging setup for CLI invocations.

    Logging setup would otherwise attach handlers to the streams CliRunner
    swaps in and closes after each invocation.
    """
    load = mocker.patch("shardcache.main.load_configuration")
    logging_setup = mocker.patch("shardcache.main.setup_logging")
    return load, logging_setup
