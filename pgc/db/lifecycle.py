"""Application lifespan hook for the shared database connection."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from ..config import settings
from .database import DataBase


@asynccontextmanager
async def lifespan(app) -> AsyncGenerator[None, None]:
    """Connect and prepare the user indexes on startup, disconnect on shutdown.

    A failed startup disconnects before the error propagates. The facade is
    exposed as ``app.state.db`` when the app has a ``state`` attribute
    (Starlette / FastAPI).
    """
    db = DataBase.from_registry(settings.database_name)
    try:
        await db.init_db(settings.user_unique_fields, settings.user_collection)

        state = getattr(app, "state", None)
        if state is not None:
            state.db = db

        yield
    finally:
        await db.disconnect()
