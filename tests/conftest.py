"""Shared test fixtures for the profile service test suite."""

import pytest
from itertools import count
from pymongo.errors import CollectionInvalid

import storage.database as database
from config.settings import settings


# ── MongoDB Mocks ──


class FakeInsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeCollection:
    """Mock AsyncCollection that keeps inserted documents in a list."""

    _ids = count(1)

    def __init__(self, name: str):
        self.name = name
        self.documents: list[dict] = []
        self.insert_error: Exception | None = None

    async def insert_one(self, document):
        if self.insert_error is not None:
            raise self.insert_error
        document = dict(document)
        document["_id"] = next(self._ids)
        self.documents.append(document)
        return FakeInsertResult(document["_id"])


class FakeDatabase:
    """Mock AsyncDatabase with configurable ping/create behaviour."""

    def __init__(self, name: str = "user-account", existing: list[str] | None = None):
        self.name = name
        self.collections: dict[str, FakeCollection] = {
            n: FakeCollection(n) for n in (existing or [])
        }
        self.ping_error: Exception | None = None
        self.create_error: Exception | None = None
        self.commands: list[str] = []
        self.created: list[str] = []

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]

    async def command(self, name):
        self.commands.append(name)
        if self.ping_error is not None:
            raise self.ping_error
        return {"ok": 1.0}

    async def list_collection_names(self):
        return list(self.collections)

    async def create_collection(self, name):
        if self.create_error is not None:
            raise self.create_error
        if name in self.collections:
            raise CollectionInvalid(f"collection {name} already exists")
        self.created.append(name)
        return self[name]


class FakeMongoClient:
    """Records every construction; hands out one FakeDatabase per client."""

    def __init__(self, db_factory):
        self._db_factory = db_factory
        self.instances: list["FakeMongoClient._Client"] = []

    class _Client:
        def __init__(self, url, db, **kwargs):
            self.url = url
            self.kwargs = kwargs
            self.db = db
            self.closed = False

        def __getitem__(self, name):
            return self.db

        async def close(self):
            self.closed = True

    def __call__(self, url, **kwargs):
        client = self._Client(url, self._db_factory(len(self.instances) + 1), **kwargs)
        self.instances.append(client)
        return client


@pytest.fixture(autouse=True)
def reset_database_handle():
    """Each test starts and ends without an open database handle."""
    database._client = None
    database._db = None
    yield
    database._client = None
    database._db = None


@pytest.fixture
def fake_db():
    return FakeDatabase(existing=[settings.collection_name])


@pytest.fixture
def connected_db(fake_db):
    """Install fake_db as the process-wide open handle."""
    database._db = fake_db
    return fake_db


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    target = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", target)
    return target


@pytest.fixture
def app(upload_dir):
    from web.app import create_app

    return create_app(connect_on_start=False)


@pytest.fixture
def client(app):
    return app.test_client()
