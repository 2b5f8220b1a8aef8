"""Collection lookup on the current connection."""

from typing import TYPE_CHECKING

from .connection import ConnectionManager
from .errors import NotInitializedError

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection


class CollectionAccessor:
    """Resolves collection handles from a ConnectionManager.

    Unlike the CRUD operations this never connects on its own: asking for a
    collection before ``connect()`` raises ``NotInitializedError``.
    """

    def __init__(self, manager: ConnectionManager):
        self.manager = manager

    def get_collection(self, name: str) -> "AsyncIOMotorCollection":
        if not name:
            raise ValueError("Collection name must not be empty")
        database = self.manager.database
        if database is None:
            raise NotInitializedError(self.manager.name)
        return database[name]
