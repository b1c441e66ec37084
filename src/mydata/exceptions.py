"""Custom exceptions for the mydata package."""

from __future__ import annotations


class DataServiceError(Exception):
    """Base exception for all data service errors."""


class InvalidNamespaceError(DataServiceError, ValueError):
    """Raised when a namespace is not a URL-safe name."""

    def __init__(self, namespace: str) -> None:
        self.namespace = namespace
        super().__init__(f"Invalid namespace '{namespace}'")


class NotReadyError(DataServiceError):
    """Raised when a namespace dataset has not finished loading."""

    def __init__(self, namespace: str) -> None:
        self.namespace = namespace
        super().__init__(f"Dataset '{namespace}' is still loading")


class LoadError(DataServiceError):
    """Raised when a namespace's backing file cannot be read or parsed."""

    def __init__(self, namespace: str, detail: str = "") -> None:
        self.namespace = namespace
        msg = f"Failed to load dataset '{namespace}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class StorageError(DataServiceError):
    """Raised when a repository operation fails to persist or reach its backend."""

    def __init__(self, namespace: str, operation: str, cause: BaseException | str = "") -> None:
        self.namespace = namespace
        self.operation = operation
        self.cause = cause
        msg = f"Storage error during '{operation}' in namespace '{namespace}'"
        if cause:
            msg += f": {cause}"
        super().__init__(msg)
