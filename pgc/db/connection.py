"""Process-wide MongoDB connection management.

A single ``ConnectionManager`` owns the motor client for one named database.
The client is created lazily on the first ``connect()`` and shared by every
operation afterwards; motor pools sockets internally.
"""

import asyncio
import logging
import threading
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from ..config import settings
from .errors import DatabaseConnectionError, DatabaseNameConflictError

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


def _default_client_factory(url: str, **kwargs: Any) -> "AsyncIOMotorClient":
    from motor.motor_asyncio import AsyncIOMotorClient

    return AsyncIOMotorClient(url, **kwargs)


class ConnectionManager:
    """Owns the shared client and database handle for one database.

    Args:
        name: Database name, fixed for the lifetime of the manager.
        url: MongoDB connection string (defaults to ``settings.mongodb_url``).
        client_factory: Callable building a client from ``(url, **options)``.
            Tests inject fakes here.
    """

    def __init__(
        self,
        name: str,
        url: str | None = None,
        client_factory: Callable[..., Any] | None = None,
    ):
        if not name:
            raise ValueError("Database name must not be empty")
        self._name = name
        self._url = url or settings.mongodb_url
        self._client_factory = client_factory or _default_client_factory
        self._client: "AsyncIOMotorClient | None" = None
        self._database: "AsyncIOMotorDatabase | None" = None
        self._state = ConnectionState.DISCONNECTED
        # connect() and disconnect() are mutually exclusive over _state
        self._lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    @property
    def database(self) -> "AsyncIOMotorDatabase | None":
        """The live database handle, or None while not connected."""
        if self._state is not ConnectionState.CONNECTED:
            return None
        return self._database

    async def connect(self) -> "AsyncIOMotorDatabase":
        """Establish the connection if it does not exist yet.

        Concurrent callers wait on the same lock, so only the first one
        builds a client; the rest observe the settled handle.

        Returns:
            The connected database handle.

        Raises:
            DatabaseConnectionError: If the client cannot be created or the
                server does not answer the initial ping.
        """
        async with self._lock:
            if self._state is ConnectionState.CONNECTED:
                logger.debug("Already connected to %s", self._name)
                return self._database

            self._state = ConnectionState.CONNECTING
            client = None
            try:
                client = self._client_factory(
                    self._url,
                    serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
                    connectTimeoutMS=settings.connect_timeout_ms,
                )
                await client.admin.command("ping")
            except asyncio.CancelledError:
                if client is not None:
                    client.close()
                self._state = ConnectionState.DISCONNECTED
                raise
            except Exception as e:
                logger.error("Failed to connect to %s: %s", self._name, e)
                if client is not None:
                    client.close()
                self._state = ConnectionState.DISCONNECTED
                raise DatabaseConnectionError(self._name, str(e)) from e

            self._client = client
            self._database = client[self._name]
            self._state = ConnectionState.CONNECTED
            logger.info("Connected to %s", self._name)
            return self._database

    async def ensure_connected(self) -> "AsyncIOMotorDatabase":
        """Return the database handle, connecting first if needed.

        This is the single lazy-connect entry point used by every CRUD and
        index operation.
        """
        if self._state is ConnectionState.CONNECTED:
            return self._database
        return await self.connect()

    async def disconnect(self) -> None:
        """Close the client. Does nothing if there is no open connection."""
        async with self._lock:
            if self._client is None:
                logger.info("No active MongoDB connection to close for %s", self._name)
                return

            client = self._client
            self._client = None
            self._database = None
            self._state = ConnectionState.DISCONNECTED
            client.close()
            logger.info("Disconnected from %s", self._name)


class ManagerRegistry:
    """Holds the one ConnectionManager allowed per process.

    The first ``get()`` fixes the database name. Asking again for a different
    name is a caller error.
    """

    def __init__(self, client_factory: Callable[..., Any] | None = None):
        self._client_factory = client_factory
        self._manager: ConnectionManager | None = None
        self._lock = threading.Lock()

    def get(self, name: str | None = None) -> ConnectionManager:
        """Return the process-wide manager, creating it on first use.

        Args:
            name: Database name; defaults to ``settings.database_name``.

        Raises:
            DatabaseNameConflictError: If the manager is already bound to a
                different database.
        """
        requested = name or settings.database_name
        with self._lock:
            if self._manager is None:
                self._manager = ConnectionManager(
                    requested, client_factory=self._client_factory
                )
                logger.debug("Created connection manager for %s", requested)
            elif self._manager.name != requested:
                raise DatabaseNameConflictError(self._manager.name, requested)
            return self._manager

    def clear(self) -> ConnectionManager | None:
        """Forget the registered manager and return it (caller disconnects)."""
        with self._lock:
            manager, self._manager = self._manager, None
            return manager


registry = ManagerRegistry()


def get_instance(name: str | None = None) -> ConnectionManager:
    """Get the process-wide ConnectionManager from the default registry."""
    return registry.get(name)
