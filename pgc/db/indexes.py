"""Unique index creation and initialization."""

import asyncio
import logging
from typing import TYPE_CHECKING, Iterable

from pymongo import ASCENDING
from pymongo.errors import OperationFailure, PyMongoError

from ..config import settings
from .collections import CollectionAccessor
from .connection import ConnectionManager
from .errors import IndexCreationError

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorDatabase

logger = logging.getLogger(__name__)

# Server error codes meaning an index on the same key already exists
INDEX_EXISTS_CODES = {85, 86}
INDEX_EXISTS_CODE_NAMES = {"IndexOptionsConflict", "IndexKeySpecsConflict"}


def _index_already_exists(error: PyMongoError) -> bool:
    if not isinstance(error, OperationFailure):
        return False
    code_name = (error.details or {}).get("codeName")
    return error.code in INDEX_EXISTS_CODES or code_name in INDEX_EXISTS_CODE_NAMES


class IndexManager:
    """Creates unique single-field indexes on collections."""

    def __init__(self, manager: ConnectionManager, accessor: CollectionAccessor | None = None):
        self.manager = manager
        self.accessor = accessor or CollectionAccessor(manager)

    async def create_unique_index(self, field: str, collection: str) -> bool:
        """Create a unique ascending index on ``field``.

        Returns:
            True if the index request was accepted, False if the server
            reported the index as already existing.

        Raises:
            IndexCreationError: For any other index-creation failure.
        """
        await self.manager.ensure_connected()
        coll = self.accessor.get_collection(collection)
        try:
            await coll.create_index([(field, ASCENDING)], unique=True)
        except PyMongoError as e:
            if _index_already_exists(e):
                logger.info(
                    'Index on field "%s" already exists in collection "%s"',
                    field,
                    collection,
                )
                return False
            logger.error(
                'Error creating unique index on "%s" in collection "%s": %s',
                field,
                collection,
                e,
            )
            raise IndexCreationError(field, collection, str(e)) from e

        logger.info('Unique index created on field "%s" in collection "%s"', field, collection)
        return True

    async def init_db(
        self,
        fields: Iterable[str],
        collection: str,
        concurrency: int | None = None,
    ) -> "AsyncIOMotorDatabase":
        """Connect and create a unique index for every field.

        Index requests run concurrently, at most ``concurrency`` at a time
        (``settings.index_concurrency`` by default; 1 creates them one after
        another). The first fatal failure cancels requests that have not
        finished and is re-raised. Indexes created before it are kept.

        Returns:
            The connected database handle.
        """
        width = settings.index_concurrency if concurrency is None else concurrency
        if width < 1:
            raise ValueError("concurrency must be at least 1")

        database = await self.manager.ensure_connected()
        requested = list(dict.fromkeys(fields))
        if not requested:
            return database

        semaphore = asyncio.Semaphore(width)

        async def create(field: str) -> bool:
            async with semaphore:
                return await self.create_unique_index(field, collection)

        tasks = [asyncio.create_task(create(field)) for field in requested]
        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        except BaseException:
            # the caller went away; stop requests that have not finished
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        failed = [t for t in tasks if t in done and t.exception() is not None]
        if failed:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            logger.error(
                'Initializing indexes for collection "%s" failed; %d of %d requests finished',
                collection,
                len(done),
                len(tasks),
            )
            raise failed[0].exception()

        created = sum(1 for t in tasks if t.result())
        logger.info(
            'Indexes ready for collection "%s" (%d created, %d already present)',
            collection,
            created,
            len(tasks) - created,
        )
        return database
