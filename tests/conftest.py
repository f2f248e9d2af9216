"""Shared pytest fixtures for box-deployer tests."""

from pathlib import Path

import pytest

from box_deployer.config import ENV_PREFIX


def make_artifact(directory: Path, filename: str, data: bytes = b"box-image") -> Path:
    """Write an artifact file and return its path.

    Args:
        directory: Directory to create the file in (created if missing).
        filename: Base name, usually ``<name>-<version>.<ext>``.
        data: File contents.
    """
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_bytes(data)
    return path


@pytest.fixture
def make_box():
    """Fixture providing the make_artifact helper function."""
    return make_artifact


@pytest.fixture
def base_url() -> str:
    return "http://boxes.example.com/myapp"


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    root = tmp_path / "repo"
    root.mkdir()
    return root


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    path = tmp_path / "build"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from BOX_DEPLOYER_* variables and any local .env file."""
    for key in ("LOG_LEVEL", "PROVIDER", "CHUNK_SIZE"):
        # setenv first so teardown also drops values a test loads via dotenv
        monkeypatch.setenv(ENV_PREFIX + key, "")
        monkeypatch.delenv(ENV_PREFIX + key)
    monkeypatch.chdir(tmp_path)
