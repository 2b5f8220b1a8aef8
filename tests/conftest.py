"""Test configuration and fixtures.

MongoDB is replaced by in-memory fakes handed to ``ConnectionManager`` through
its ``client_factory``. Fake collections honour unique indexes so duplicate
inserts fail the way the real driver does.
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from pgc.db import connection
from pgc.db.connection import ConnectionManager, ManagerRegistry


class FakeCollection:
    """Minimal async collection supporting the calls the data layer makes."""

    def __init__(self, name: str):
        self.name = name
        self.docs: list[dict] = []
        self.unique_fields: set[str] = set()
        self.create_index = AsyncMock(side_effect=self._create_index)

    async def _create_index(self, keys, unique=False, **kwargs):
        field = keys[0][0]
        if unique:
            self.unique_fields.add(field)
        return f"{field}_1"

    async def find_one(self, query, projection=None):
        for doc in self.docs:
            if all(doc.get(k) == v for k, v in query.items()):
                return {"_id": doc["_id"]}
        return None

    async def insert_one(self, doc):
        for field in self.unique_fields:
            if field in doc and any(d.get(field) == doc[field] for d in self.docs):
                raise DuplicateKeyError(
                    f"E11000 duplicate key error collection: {self.name} index: {field}_1",
                    11000,
                    {"keyValue": {field: doc[field]}},
                )
        doc.setdefault("_id", ObjectId())
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"], acknowledged=True)

    async def delete_many(self, query):
        count = len(self.docs)
        self.docs.clear()
        return SimpleNamespace(deleted_count=count, acknowledged=True)


class FakeDatabase:
    def __init__(self, name: str):
        self.name = name
        self.collections: dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]


class FakeClient:
    """Client whose databases live on a shared fake server across reconnects."""

    def __init__(self, server: dict, url: str, **options):
        self.server = server
        self.url = url
        self.options = options
        self.admin = MagicMock()
        self.admin.command = AsyncMock(side_effect=self._command)
        self.close = MagicMock()

    async def _command(self, name, *args, **kwargs):
        # Yield once so concurrent connect() calls interleave
        await asyncio.sleep(0)
        return {"ok": 1.0}

    def __getitem__(self, name: str) -> FakeDatabase:
        if name not in self.server:
            self.server[name] = FakeDatabase(name)
        return self.server[name]


class FakeClientFactory:
    """Records every client it builds."""

    def __init__(self):
        self.server: dict[str, FakeDatabase] = {}
        self.clients: list[FakeClient] = []

    def __call__(self, url: str, **options) -> FakeClient:
        client = FakeClient(self.server, url, **options)
        self.clients.append(client)
        return client

    def database(self, name: str) -> FakeDatabase:
        """Server-side database, available before any client connects."""
        if name not in self.server:
            self.server[name] = FakeDatabase(name)
        return self.server[name]


@pytest.fixture
def client_factory() -> FakeClientFactory:
    return FakeClientFactory()


@pytest.fixture
def manager(client_factory) -> ConnectionManager:
    """A fresh, disconnected manager bound to the ``pgc_test`` database."""
    return ConnectionManager("pgc_test", url="mongodb://fake:27017", client_factory=client_factory)


@pytest.fixture
def fake_registry(monkeypatch, client_factory) -> ManagerRegistry:
    """Replace the process-wide registry with one that builds fake clients."""
    test_registry = ManagerRegistry(client_factory=client_factory)
    monkeypatch.setattr(connection, "registry", test_registry)
    return test_registry
