"""Document-level CRUD operations.

Every operation connects lazily, so callers never need to call
``connect()`` first.
"""

import logging
from typing import Any

from pydantic import BaseModel
from pymongo.errors import DuplicateKeyError as PyMongoDuplicateKeyError

from .collections import CollectionAccessor
from .connection import ConnectionManager
from .errors import DuplicateKeyError
from .query import build_query

logger = logging.getLogger(__name__)


class DocumentStore:
    """Existence check, insert and reset for collections of one database."""

    def __init__(self, manager: ConnectionManager, accessor: CollectionAccessor | None = None):
        self.manager = manager
        self.accessor = accessor or CollectionAccessor(manager)

    async def document_exists(self, field: str, value: Any, collection: str) -> bool:
        """Return True if at least one document has ``field == value``."""
        await self.manager.ensure_connected()
        coll = self.accessor.get_collection(collection)
        document = await coll.find_one(build_query(field, value), projection={"_id": 1})
        return document is not None

    async def add_document(self, collection: str, document: dict[str, Any] | BaseModel) -> Any:
        """Insert a document and return its generated ``_id``.

        Raises:
            DuplicateKeyError: If the document collides with a unique index.
        """
        await self.manager.ensure_connected()
        coll = self.accessor.get_collection(collection)

        if isinstance(document, BaseModel):
            payload = document.model_dump()
        else:
            # insert_one sets _id on the dict it is given
            payload = dict(document)

        try:
            result = await coll.insert_one(payload)
        except PyMongoDuplicateKeyError as e:
            key_value = (e.details or {}).get("keyValue")
            logger.warning('Duplicate key %s in collection "%s"', key_value, collection)
            raise DuplicateKeyError(collection, key_value, str(e)) from e

        logger.info('Document inserted into "%s" with _id: %s', collection, result.inserted_id)
        return result.inserted_id

    async def remove_all_documents(self, collection: str) -> int:
        """Delete every document in ``collection`` and return how many were removed.

        There is no confirmation step; callers gate this behind test or reset paths.
        """
        await self.manager.ensure_connected()
        coll = self.accessor.get_collection(collection)
        result = await coll.delete_many({})
        logger.warning('Deleted %d documents from "%s"', result.deleted_count, collection)
        return result.deleted_count
