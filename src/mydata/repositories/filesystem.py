"""FileRepository — one JSON file per namespace, cached in memory."""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from mydata.exceptions import LoadError, NotReadyError, StorageError
from mydata.repositories.base import (
    Repository,
    make_record,
    numeric_identifier,
    validate_namespace,
)

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "data"


class LoadStatus(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOAD_FAILED = "load_failed"
    READY = "ready"


@dataclass
class NamespaceState:
    """Cached dataset and bookkeeping for a single namespace."""

    namespace: str
    path: Path
    records: dict[str, dict[str, Any]] = field(default_factory=dict)
    cursor: int = 0
    status: LoadStatus = LoadStatus.UNLOADED
    load_error: LoadError | None = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    loaded: asyncio.Event = field(default_factory=asyncio.Event)


def _read_file(path: Path) -> dict[str, dict[str, Any]] | None:
    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _write_file(path: Path, payload: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class FileRepository(Repository):
    """Persistent repository keeping each namespace in ``<location>/<namespace>.json``.

    The whole dataset of a namespace is cached in memory on first access
    and rewritten in full after every mutation.  All operations on the
    same namespace are serialized by a per-namespace lock so that two
    whole-file rewrites never race; different namespaces run
    concurrently.

    Parameters:
        location:     Directory holding the namespace files.  ``"default"``
                      (or empty) resolves to ``./data``.  Created on first
                      write.
        load_timeout: Seconds a caller waits for another caller's load of
                      the same namespace before :class:`NotReadyError` is
                      raised.  ``None`` waits indefinitely.
    """

    def __init__(self, location: str | Path = "default", *, load_timeout: float | None = None) -> None:
        if not location or str(location) == "default":
            location = DEFAULT_LOCATION
        self._root = Path(location)
        self._load_timeout = load_timeout
        self._states: dict[str, NamespaceState] = {}

    @property
    def root(self) -> Path:
        return self._root

    def archive_file(self, namespace: str) -> Path:
        """Resolve *namespace* into its backing file."""
        return self._root / f"{validate_namespace(namespace)}.json"

    def status(self, namespace: str) -> LoadStatus:
        state = self._states.get(namespace)
        return state.status if state else LoadStatus.UNLOADED

    # ── loading ──────────────────────────────────────────────

    async def _state(self, namespace: str) -> NamespaceState:
        state = self._states.get(namespace)
        if state is None:
            state = NamespaceState(namespace=namespace, path=self.archive_file(namespace))
            self._states[namespace] = state

        while state.status is not LoadStatus.READY:
            if state.status is LoadStatus.UNLOADED:
                await self._load(state)
                continue
            try:
                await asyncio.wait_for(state.loaded.wait(), self._load_timeout)
            except asyncio.TimeoutError:
                raise NotReadyError(namespace) from None

        return state

    async def _load(self, state: NamespaceState) -> None:
        state.status = LoadStatus.LOADING
        state.loaded = asyncio.Event()
        try:
            try:
                data = await asyncio.to_thread(_read_file, state.path)
                if data is not None and not isinstance(data, dict):
                    raise LoadError(state.namespace, "archive is not a JSON object")
                if data and not all(isinstance(record, dict) for record in data.values()):
                    raise LoadError(state.namespace, "archive holds records that are not JSON objects")
            except (OSError, ValueError, LoadError) as e:
                error = e if isinstance(e, LoadError) else LoadError(state.namespace, str(e))
                logger.warning("%s; loading with an empty dataset", error)
                state.status = LoadStatus.LOAD_FAILED
                state.load_error = error
                data = None

            state.records = {str(k): v for k, v in (data or {}).items()}
            state.cursor = max(
                (n for n in map(numeric_identifier, state.records) if n is not None),
                default=0,
            )
            state.status = LoadStatus.READY
            logger.info("Loaded dataset '%s' with %d records", state.namespace, len(state.records))
        finally:
            # An interrupted load leaves the namespace to be loaded again.
            if state.status is not LoadStatus.READY:
                state.status = LoadStatus.UNLOADED
            state.loaded.set()

    # ── persistence ──────────────────────────────────────────

    async def _save(self, state: NamespaceState, operation: str) -> None:
        try:
            payload = json.dumps(state.records)
            await asyncio.to_thread(_write_file, state.path, payload)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Save of dataset '%s' failed: %s", state.namespace, e)
            raise StorageError(state.namespace, operation, e) from e
        logger.debug("Saved dataset '%s'", state.namespace)

    # ── Repository protocol ──────────────────────────────────

    async def create(self, namespace: str, data: dict[str, Any]) -> str:
        state = await self._state(namespace)
        async with state.lock:
            previous_cursor = state.cursor
            state.cursor += 1
            identifier = str(state.cursor)
            state.records[identifier] = make_record(identifier, data)
            try:
                await self._save(state, "create")
            except StorageError:
                del state.records[identifier]
                state.cursor = previous_cursor
                raise
        return identifier

    async def read(self, namespace: str) -> list[dict[str, Any]]:
        state = await self._state(namespace)
        async with state.lock:
            return copy.deepcopy(list(state.records.values()))

    async def update(self, namespace: str, identifier: str, data: dict[str, Any]) -> bool:
        state = await self._state(namespace)
        async with state.lock:
            previous = state.records.get(identifier)
            previous_cursor = state.cursor
            state.records[identifier] = make_record(identifier, data)
            number = numeric_identifier(identifier)
            if number is not None and number > state.cursor:
                state.cursor = number
            try:
                await self._save(state, "update")
            except StorageError:
                if previous is None:
                    del state.records[identifier]
                else:
                    state.records[identifier] = previous
                state.cursor = previous_cursor
                raise
        return previous is None

    async def delete(self, namespace: str, identifier: str) -> bool:
        state = await self._state(namespace)
        async with state.lock:
            removed = state.records.pop(identifier, None)
            if removed is None:
                return False
            try:
                await self._save(state, "delete")
            except StorageError:
                state.records[identifier] = removed
                raise
        return True
