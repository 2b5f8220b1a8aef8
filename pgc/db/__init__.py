"""Database connection and operations."""

from .collections import CollectionAccessor
from .connection import ConnectionManager, ConnectionState, ManagerRegistry, get_instance, registry
from .database import DataBase
from .documents import DocumentStore
from .errors import (
    DatabaseConnectionError,
    DatabaseError,
    DatabaseNameConflictError,
    DuplicateKeyError,
    IndexCreationError,
    NotInitializedError,
)
from .indexes import IndexManager
from .lifecycle import lifespan
from .query import build_query

__all__ = [
    "CollectionAccessor",
    "ConnectionManager",
    "ConnectionState",
    "DataBase",
    "DatabaseConnectionError",
    "DatabaseError",
    "DatabaseNameConflictError",
    "DocumentStore",
    "DuplicateKeyError",
    "IndexCreationError",
    "IndexManager",
    "ManagerRegistry",
    "NotInitializedError",
    "build_query",
    "get_instance",
    "lifespan",
    "registry",
]
