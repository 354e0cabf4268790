"""Shared fixtures for review service tests."""

from pathlib import Path

import pytest

from legacy_labeler.core.review_store import ReviewStore
from legacy_labeler.core.review_workflow import ReviewWorkflow


def write_document(root: Path, relative_path: str, size: int = 16) -> Path:
    """Create a file of the given size under root."""
    path = root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\0" * size)
    return path


@pytest.fixture
def make_document(documents_root: Path):
    """Factory creating files under the documents folder (or another root)."""
    def _make(relative_path: str, size: int = 16, root: Path = None) -> Path:
        return write_document(root or documents_root, relative_path, size)
    return _make


@pytest.fixture
def documents_root(tmp_path: Path) -> Path:
    """Documents folder path (not created)."""
    return tmp_path / "Documents"


@pytest.fixture
def review_data_file(tmp_path: Path) -> Path:
    """Review data file path (not created)."""
    return tmp_path / "ReviewData" / "review_data.json"


@pytest.fixture
def store(documents_root: Path, review_data_file: Path) -> ReviewStore:
    """Review store over the temporary folders."""
    return ReviewStore(str(documents_root), str(review_data_file))


@pytest.fixture
def workflow(store: ReviewStore) -> ReviewWorkflow:
    """Review workflow over the temporary store."""
    return ReviewWorkflow(store)
