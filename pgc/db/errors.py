"""Exceptions raised by the data-access layer.

Driver failures that have no entry here (any other
``pymongo.errors.PyMongoError``) propagate to the caller unchanged.
"""

from typing import Any


class DatabaseError(Exception):
    """Base class for data-access errors."""


class DatabaseConnectionError(DatabaseError):
    """Establishing the MongoDB connection failed."""

    def __init__(self, database_name: str, message: str = ""):
        self.database_name = database_name
        super().__init__(
            f"Failed to connect to database '{database_name}'"
            + (f": {message}" if message else "")
        )


class DatabaseNameConflictError(DatabaseError):
    """The process-wide manager is already bound to another database."""

    def __init__(self, bound_name: str, requested_name: str):
        self.bound_name = bound_name
        self.requested_name = requested_name
        super().__init__(
            f"Connection manager is bound to '{bound_name}', "
            f"cannot rebind to '{requested_name}'"
        )


class NotInitializedError(DatabaseError):
    """A collection was requested before the database was connected."""

    def __init__(self, database_name: str):
        self.database_name = database_name
        super().__init__(
            f"Database '{database_name}' not initialized. Call connect() first."
        )


class IndexCreationError(DatabaseError):
    """Creating a unique index failed for a reason other than it already existing."""

    def __init__(self, field: str, collection: str, message: str = ""):
        self.field = field
        self.collection = collection
        super().__init__(
            f"Error creating unique index on '{field}' in collection '{collection}'"
            + (f": {message}" if message else "")
        )


class DuplicateKeyError(DatabaseError):
    """An insert violated a unique index."""

    def __init__(
        self,
        collection: str,
        key_value: dict[str, Any] | None = None,
        message: str = "",
    ):
        self.collection = collection
        self.key_value = key_value or {}
        detail = f" {self.key_value}" if self.key_value else ""
        super().__init__(
            f"Duplicate key{detail} in collection '{collection}'"
            + (f": {message}" if message else "")
        )
