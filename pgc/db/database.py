"""Facade over the data-access components.

Request handlers hold a ``DataBase`` built around the process-wide
``ConnectionManager``::

    db = DataBase(get_instance())
    await db.init_db(["email"], "User")
    if not await db.document_exists("email", email, "User"):
        await db.add_document("User", {"email": email})
"""

from typing import TYPE_CHECKING, Any, Iterable

from pydantic import BaseModel

from .collections import CollectionAccessor
from .connection import ConnectionManager, get_instance
from .documents import DocumentStore
from .indexes import IndexManager

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase


class DataBase:
    """All data-access operations for one injected ConnectionManager."""

    def __init__(self, manager: ConnectionManager):
        self.manager = manager
        self.collections = CollectionAccessor(manager)
        self.indexes = IndexManager(manager, self.collections)
        self.documents = DocumentStore(manager, self.collections)

    @classmethod
    def from_registry(cls, name: str | None = None) -> "DataBase":
        """Build a facade around the process-wide manager."""
        return cls(get_instance(name))

    # Connection
    async def connect(self) -> "AsyncIOMotorDatabase":
        return await self.manager.connect()

    async def disconnect(self) -> None:
        await self.manager.disconnect()

    def get_collection(self, name: str) -> "AsyncIOMotorCollection":
        return self.collections.get_collection(name)

    # Indexes
    async def create_unique_index(self, field: str, collection: str) -> bool:
        return await self.indexes.create_unique_index(field, collection)

    async def init_db(
        self,
        fields: Iterable[str],
        collection: str,
        concurrency: int | None = None,
    ) -> "AsyncIOMotorDatabase":
        return await self.indexes.init_db(fields, collection, concurrency=concurrency)

    # Documents
    async def document_exists(self, field: str, value: Any, collection: str) -> bool:
        return await self.documents.document_exists(field, value, collection)

    async def add_document(self, collection: str, document: dict[str, Any] | BaseModel) -> Any:
        return await self.documents.add_document(collection, document)

    async def remove_all_documents(self, collection: str) -> int:
        return await self.documents.remove_all_documents(collection)
