"""Shared test fixtures."""

import pytest

from mydata.repositories import DocumentRepository, FileRepository, InMemoryRepository


@pytest.fixture
def memory_repository():
    return InMemoryRepository()


@pytest.fixture
def filesystem_repository(tmp_path):
    return FileRepository(tmp_path / "data")


@pytest.fixture
def document_repository(tmp_path):
    return DocumentRepository(f"sqlite:///{tmp_path / 'db'}", "TestDb")
