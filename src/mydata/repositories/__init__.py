"""Repository backends for namespaced record persistence."""

from mydata.repositories.base import ID_FIELD, Repository
from mydata.repositories.document import DocumentRepository
from mydata.repositories.filesystem import FileRepository, LoadStatus
from mydata.repositories.memory import InMemoryRepository

__all__ = [
    "ID_FIELD",
    "DocumentRepository",
    "FileRepository",
    "InMemoryRepository",
    "LoadStatus",
    "Repository",
]
