import asyncio

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import ServerSelectionTimeoutError

from main import app
from staffdesk.db.mongo import get_mongo_db, get_store
from staffdesk.db.mongo_indexes import ensure_indexes
from staffdesk.db.seed import ensure_default_roles
from staffdesk.db.store import RecordStore
from staffdesk.storage.files import FileStorage, get_file_storage


@pytest.fixture
def db():
    database = AsyncMongoMockClient()["staffdesk_test"]
    asyncio.run(ensure_indexes(database))
    asyncio.run(ensure_default_roles(RecordStore(database)))
    return database


@pytest.fixture
def storage(tmp_path):
    return FileStorage(tmp_path / "storage", max_bytes=1024)


@pytest.fixture
def client(db, storage):
    app.dependency_overrides[get_mongo_db] = lambda: db
    app.dependency_overrides[get_file_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    def _register(full_name: str, role: str = "employee", password: str = "secret123"):
        email = full_name.lower().replace(" ", ".") + "@example.com"
        response = client.post("/api/v1/auth/register", json={
            "full_name": full_name,
            "email": email,
            "password": password,
            "role": role,
        })
        assert response.status_code == 201, response.text
        body = response.json()
        return {
            "id": body["user"]["id"],
            "email": email,
            "headers": {"Authorization": f"Bearer {body['token']}"},
        }

    return _register


@pytest.fixture
def admin(register):
    return register("Ada Admin", "admin")


@pytest.fixture
def hr(register):
    return register("Harper Reyes", "hr")


@pytest.fixture
def employee(register):
    return register("Alice Smith")


@pytest.fixture
def other_employee(register):
    return register("Bob Brown")


class _BrokenCollection:
    """Motor collection whose listed methods fail as if the server were down."""

    def __init__(self, collection, broken):
        self._collection = collection
        self._broken = broken

    def __getattr__(self, name):
        if name in self._broken:
            def _fail(*args, **kwargs):
                raise ServerSelectionTimeoutError("no servers available")
            return _fail
        return getattr(self._collection, name)


class BrokenStore(RecordStore):
    def __init__(self, db, broken):
        super().__init__(db)
        self.broken = broken

    def collection(self, table):
        if table in self.broken:
            return _BrokenCollection(super().collection(table), self.broken[table])
        return super().collection(table)


@pytest.fixture
def break_store(client, db):
    """Route requests through a store where e.g. ``users={"find"}`` fails."""
    def _break(**broken):
        app.dependency_overrides[get_store] = lambda: BrokenStore(db, broken)

    return _break
