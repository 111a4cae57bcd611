"""Pytest configuration and shared fixtures."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "gradle"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that is cleaned up after the test.

    Yields:
        Path to the temporary directory.
    """
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def fixtures_dir() -> Path:
    """Get the directory holding the Gradle fixture scripts."""
    return FIXTURES_DIR


@pytest.fixture
def read_fixture() -> Callable[[str], str]:
    """Get a reader for Gradle fixture scripts.

    Returns:
        Function mapping a path relative to the fixtures directory to the
        file's text.
    """

    def _read(relative_path: str) -> str:
        return (FIXTURES_DIR / relative_path).read_text(encoding="utf-8")

    return _read
