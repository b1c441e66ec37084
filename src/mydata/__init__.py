"""mydata — A namespaced JSON object storage service.

Clients push, read, update and delete arbitrary JSON objects grouped under
a namespace.  Persistence is delegated to an interchangeable repository.
"""

from mydata.exceptions import (
    DataServiceError,
    InvalidNamespaceError,
    LoadError,
    NotReadyError,
    StorageError,
)
from mydata.repositories import (
    ID_FIELD,
    DocumentRepository,
    FileRepository,
    InMemoryRepository,
    Repository,
)

__all__ = [
    "ID_FIELD",
    "DataServiceError",
    "DocumentRepository",
    "FileRepository",
    "InMemoryRepository",
    "InvalidNamespaceError",
    "LoadError",
    "NotReadyError",
    "Repository",
    "StorageError",
]
