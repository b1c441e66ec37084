# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Repository factory for creating the configured storage backend.

Uses the Registry pattern to map backend names to repository classes,
allowing extensibility without modifying factory code.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

from mydata.repositories import (
    DocumentRepository,
    FileRepository,
    InMemoryRepository,
    Repository,
)

from .config import Settings


class RepositoryFactoryError(Exception):
    """Raised when repository creation fails."""

    pass


def _filesystem(settings: Settings) -> Repository:
    return FileRepository(settings.fs_location, load_timeout=settings.load_timeout)


def _document(settings: Settings) -> Repository:
    return DocumentRepository(settings.document_url, settings.db_name)


def _memory(settings: Settings) -> Repository:
    return InMemoryRepository()


class RepositoryFactory:
    """Creates the repository named by ``Settings.repository``.

    The legacy deployment names (``fs-repository``, ``mongo-repository``)
    are accepted as aliases.

    Example:
        repository = RepositoryFactory.create(load_settings())

        # Custom backend:
        RepositoryFactory.register("redis", lambda settings: RedisRepository(...))
    """

    # Class-level registry mapping backend names to builders
    _registry: ClassVar[dict[str, Callable[[Settings], Repository]]] = {
        "filesystem": _filesystem,
        "document": _document,
        "memory": _memory,
    }

    _aliases: ClassVar[dict[str, str]] = {
        "fs-repository": "filesystem",
        "mongo-repository": "document",
    }

    @classmethod
    def register(cls, name: str, builder: Callable[[Settings], Repository]) -> None:
        """Register a custom repository backend.

        Args:
            name: Backend name to use in configuration
            builder: Callable building the repository from settings
        """
        cls._registry[name] = builder

    @classmethod
    def registered_types(cls) -> list[str]:
        """Return list of registered backend names."""
        return list(cls._registry.keys()) + list(cls._aliases.keys())

    @classmethod
    def create(cls, settings: Settings) -> Repository:
        """Build the repository selected by *settings*.

        Raises:
            RepositoryFactoryError: If the backend is unknown or fails to build
        """
        name = cls._aliases.get(settings.repository, settings.repository)
        builder = cls._registry.get(name)
        if not builder:
            available = ", ".join(sorted(cls.registered_types()))
            raise RepositoryFactoryError(
                f"Unknown repository: '{settings.repository}'. Available repositories: {available}"
            )
        try:
            return builder(settings)
        except Exception as e:
            raise RepositoryFactoryError(
                f"Failed to create repository '{settings.repository}': {e}"
            ) from e
