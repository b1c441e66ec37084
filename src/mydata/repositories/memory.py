"""InMemoryRepository — zero-config, dict-backed storage for development and testing."""

from __future__ import annotations

import copy
from collections import defaultdict
from typing import Any

from mydata.repositories.base import (
    Repository,
    make_record,
    numeric_identifier,
    validate_namespace,
)


class InMemoryRepository(Repository):
    """In-memory repository using nested dicts.  Data is lost on process exit."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self._cursors: dict[str, int] = defaultdict(int)

    async def create(self, namespace: str, data: dict[str, Any]) -> str:
        validate_namespace(namespace)
        self._cursors[namespace] += 1
        identifier = str(self._cursors[namespace])
        self._data[namespace][identifier] = make_record(identifier, data)
        return identifier

    async def read(self, namespace: str) -> list[dict[str, Any]]:
        validate_namespace(namespace)
        return [copy.deepcopy(record) for record in self._data.get(namespace, {}).values()]

    async def update(self, namespace: str, identifier: str, data: dict[str, Any]) -> bool:
        validate_namespace(namespace)
        created = identifier not in self._data[namespace]
        self._data[namespace][identifier] = make_record(identifier, data)
        number = numeric_identifier(identifier)
        if number is not None and number > self._cursors[namespace]:
            self._cursors[namespace] = number
        return created

    async def delete(self, namespace: str, identifier: str) -> bool:
        validate_namespace(namespace)
        return self._data.get(namespace, {}).pop(identifier, None) is not None
