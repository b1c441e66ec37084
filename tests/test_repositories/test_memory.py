"""Tests for InMemoryRepository."""

import pytest

from mydata import InvalidNamespaceError
from mydata.repositories import InMemoryRepository


@pytest.fixture
def repo():
    return InMemoryRepository()


async def test_read_empty_namespace(repo):
    assert await repo.read("ns") == []


async def test_create_assigns_sequential_ids(repo):
    assert await repo.create("ns", {"v": 1}) == "1"
    assert await repo.create("ns", {"v": 2}) == "2"


async def test_create_does_not_mutate_input(repo):
    data = {"v": 1}
    await repo.create("ns", data)
    assert data == {"v": 1}


async def test_ids_not_reused_after_delete(repo):
    first = await repo.create("ns", {})
    await repo.delete("ns", first)
    assert await repo.create("ns", {}) == "2"


async def test_update_advances_cursor(repo):
    assert await repo.update("ns", "10", {"v": 1}) is True
    assert await repo.create("ns", {"v": 2}) == "11"


async def test_update_existing(repo):
    identifier = await repo.create("ns", {"a": 1, "b": 2})
    assert await repo.update("ns", identifier, {"a": 3}) is False
    assert await repo.read("ns") == [{"_id": identifier, "a": 3}]


async def test_delete_nonexistent(repo):
    assert await repo.delete("ns", "nope") is False
    assert await repo.read("ns") == []


async def test_namespace_isolation(repo):
    await repo.create("ns1", {"val": 1})
    await repo.create("ns2", {"val": 2})
    assert await repo.read("ns1") == [{"_id": "1", "val": 1}]
    assert await repo.read("ns2") == [{"_id": "1", "val": 2}]


async def test_invalid_namespace(repo):
    with pytest.raises(InvalidNamespaceError):
        await repo.create("../etc", {})


async def test_update_with_oversized_numeric_id(repo):
    assert await repo.update("ns", "9" * 5000, {}) is True
    assert await repo.create("ns", {}) == "1"
