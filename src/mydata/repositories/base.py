"""Repository protocol — namespaced CRUD persistence for JSON records."""

from __future__ import annotations

import copy
import re
from abc import ABC, abstractmethod
from typing import Any

from mydata.exceptions import InvalidNamespaceError

ID_FIELD = "_id"

_NAMESPACE_RE = re.compile(r"^[A-Za-z0-9._~-]{1,128}$")


def validate_namespace(namespace: str) -> str:
    """Return *namespace* unchanged if it is URL-safe, else raise.

    ``.`` and ``..`` are rejected as well since namespaces become file
    names in the filesystem backend.
    """
    if not isinstance(namespace, str) or not _NAMESPACE_RE.match(namespace):
        raise InvalidNamespaceError(str(namespace))
    if namespace in (".", ".."):
        raise InvalidNamespaceError(namespace)
    return namespace


def make_record(identifier: str, data: dict[str, Any]) -> dict[str, Any]:
    """Deep-copy *data* and stamp it with *identifier* under ``ID_FIELD``."""
    record = copy.deepcopy(data)
    record[ID_FIELD] = identifier
    return record


def numeric_identifier(identifier: str) -> int | None:
    """Return the integer value of a decimal identifier, or ``None``.

    Identifiers too long for ``int()`` count as non-numeric.
    """
    if not identifier.isdecimal():
        return None
    try:
        return int(identifier)
    except ValueError:
        return None


class Repository(ABC):
    """Abstract base for all storage backends.

    Every operation is scoped to a *namespace* (e.g. ``"orders"``).  A
    namespace that was never written reads as empty; it is created by the
    first successful ``create`` or ``update``.

    Records are plain ``dict[str, Any]`` objects.  The repository assigns
    the identifier and stores it inside the record under ``ID_FIELD``.
    """

    @abstractmethod
    async def create(self, namespace: str, data: dict[str, Any]) -> str:
        """Store *data* under a fresh identifier and return the identifier."""
        ...

    @abstractmethod
    async def read(self, namespace: str) -> list[dict[str, Any]]:
        """Return every record in the namespace, in no particular order."""
        ...

    @abstractmethod
    async def update(self, namespace: str, identifier: str, data: dict[str, Any]) -> bool:
        """Replace or insert the record at *identifier*.

        Returns ``True`` when the record did not exist and was created.
        """
        ...

    @abstractmethod
    async def delete(self, namespace: str, identifier: str) -> bool:
        """Remove the record at *identifier*.  Returns ``False`` if absent."""
        ...

    async def close(self) -> None:
        """Release any resources held by the backend."""
        return None
