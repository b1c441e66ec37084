"""DocumentRepository — one collection per namespace in a document database using aiosqlite."""

from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
import uuid
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import aiosqlite

from mydata.exceptions import StorageError
from mydata.repositories.base import Repository, make_record, validate_namespace

logger = logging.getLogger(__name__)

T = TypeVar("T")

SCHEME = "sqlite:///"
DEFAULT_ENDPOINT = f"{SCHEME}data"
DEFAULT_DB_NAME = "MyData"

_COLLECTION_EXISTS = "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?"


def collection_name(namespace: str) -> str:
    """Map *namespace* to its table name.

    SQLite compares table names case-insensitively and reserves the
    ``sqlite_`` prefix, so the namespace is hex-encoded behind a fixed
    prefix.  The mapping is one-to-one and case-preserving.
    """
    return "c_" + validate_namespace(namespace).encode("utf-8").hex()


def resolve_endpoint(endpoint: str | Path) -> Path:
    """Return the directory addressed by a ``sqlite:///<dir>`` endpoint.

    A bare path is accepted as well.  ``sqlite:////abs/dir`` addresses an
    absolute directory, ``sqlite:///rel/dir`` a relative one.
    """
    endpoint = str(endpoint)
    if not endpoint or endpoint == "default":
        endpoint = DEFAULT_ENDPOINT
    if endpoint.startswith(SCHEME):
        return Path(endpoint[len(SCHEME):] or ".")
    if "://" in endpoint:
        raise ValueError(f"Unsupported document database endpoint: '{endpoint}'")
    return Path(endpoint)


def _create_collection(table: str) -> str:
    return f'CREATE TABLE IF NOT EXISTS "{table}" (_id TEXT PRIMARY KEY, document TEXT NOT NULL)'


def _check_identifier(identifier: str) -> str:
    """Return *identifier* if it is a document id this store could have issued."""
    if len(identifier) != 32 or uuid.UUID(hex=identifier).hex != identifier:
        raise ValueError(f"'{identifier}' is not a valid document identifier")
    return identifier


class DocumentRepository(Repository):
    """Persistent repository storing each record as an independent document.

    The database is addressed by a connection *endpoint* and a database
    name: ``sqlite:///<dir>`` plus ``db_name`` resolves to the database
    ``<dir>/<db_name>.db``.  Every namespace maps to one collection (a
    table) inside it.  Each operation opens its own connection, performs a
    single action, and closes the connection whatever the outcome.
    Identifiers are random UUIDs generated at insert time.

    Parameters:
        endpoint: Connection endpoint, ``sqlite:///<dir>`` or a directory
                  path.  ``"default"`` (or empty) is ``sqlite:///data``.
        db_name:  Database name, used as the file stem.

    Raises:
        ValueError: If the endpoint uses another scheme.
    """

    def __init__(self, endpoint: str | Path = DEFAULT_ENDPOINT, db_name: str = DEFAULT_DB_NAME) -> None:
        self._location = resolve_endpoint(endpoint)
        self._db_name = db_name

    @property
    def endpoint(self) -> str:
        return f"{SCHEME}{self._location}"

    @property
    def db_path(self) -> Path:
        return self._location / f"{self._db_name}.db"

    async def _perform(
        self,
        namespace: str,
        operation: str,
        action: Callable[[aiosqlite.Connection, str], Awaitable[T]],
    ) -> T:
        """Run *action* against the namespace's collection on a fresh connection."""
        table = collection_name(namespace)
        try:
            await asyncio.to_thread(self._location.mkdir, parents=True, exist_ok=True)
            async with aiosqlite.connect(self.db_path) as db:
                return await action(db, table)
        except (sqlite3.Error, OSError, TypeError, ValueError) as e:
            logger.error(
                "Failed to %s in collection '%s' of %s: %s", operation, namespace, self.db_path, e
            )
            raise StorageError(namespace, operation, e) from e

    @staticmethod
    async def _exists(db: aiosqlite.Connection, table: str) -> bool:
        cursor = await db.execute(_COLLECTION_EXISTS, (table,))
        return (await cursor.fetchone()) is not None

    # ── Repository protocol ──────────────────────────────────

    async def create(self, namespace: str, data: dict[str, Any]) -> str:
        identifier = uuid.uuid4().hex

        async def insert(db: aiosqlite.Connection, table: str) -> str:
            document = json.dumps(make_record(identifier, data))
            await db.execute(_create_collection(table))
            await db.execute(
                f'INSERT INTO "{table}" (_id, document) VALUES (?, ?)',
                (identifier, document),
            )
            await db.commit()
            return identifier

        return await self._perform(namespace, "create", insert)

    async def read(self, namespace: str) -> list[dict[str, Any]]:
        async def find_all(db: aiosqlite.Connection, table: str) -> list[dict[str, Any]]:
            if not await self._exists(db, table):
                return []
            cursor = await db.execute(f'SELECT document FROM "{table}"')
            rows = await cursor.fetchall()
            return [json.loads(row[0]) for row in rows]

        return await self._perform(namespace, "read", find_all)

    async def update(self, namespace: str, identifier: str, data: dict[str, Any]) -> bool:
        async def upsert(db: aiosqlite.Connection, table: str) -> bool:
            document = json.dumps(make_record(_check_identifier(identifier), data))
            await db.execute(_create_collection(table))
            cursor = await db.execute(
                f'UPDATE "{table}" SET document = ? WHERE _id = ?',
                (document, identifier),
            )
            created = cursor.rowcount == 0
            if created:
                await db.execute(
                    f'INSERT INTO "{table}" (_id, document) VALUES (?, ?)',
                    (identifier, document),
                )
            await db.commit()
            return created

        return await self._perform(namespace, "update", upsert)

    async def delete(self, namespace: str, identifier: str) -> bool:
        async def remove(db: aiosqlite.Connection, table: str) -> bool:
            _check_identifier(identifier)
            if not await self._exists(db, table):
                return False
            cursor = await db.execute(
                f'DELETE FROM "{table}" WHERE _id = ?',
                (identifier,),
            )
            await db.commit()
            return cursor.rowcount == 1

        return await self._perform(namespace, "delete", remove)
