"""Shared pytest fixtures."""

import copy
from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock

import bson
import pytest
from fastapi.testclient import TestClient
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from shortlink.app import App
from shortlink.config import Config
from shortlink.core import core as core_module
from shortlink.core.core import Services
from shortlink.core.modules.user import passwords
from shortlink.core.modules.user.models import Permissions
from shortlink.web.server import create_fastapi_app


def _check_filter(filter: dict[str, Any]) -> None:
    """Encode the filter as the driver would, so values outside BSON's range fail the same way."""
    bson.encode(filter)


def _matches(doc: dict[str, Any], filter: dict[str, Any]) -> bool:
    return all(key in doc and doc[key] == value for key, value in filter.items())


def _apply_update(doc: dict[str, Any], update: dict[str, Any]) -> None:
    for key, value in update.get("$set", {}).items():
        doc[key] = value
    for key, value in update.get("$inc", {}).items():
        doc[key] = doc.get(key, 0) + value


class FakeCursor:
    """Async iterable over a snapshot of matching documents."""

    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._docs.sort(key=lambda doc: doc[key], reverse=direction < 0)
        return self

    def __aiter__(self) -> "FakeCursor":
        self._iter = iter(self._docs)
        return self

    async def __anext__(self) -> dict[str, Any]:
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration from None


class FakeCollection:
    """In-memory stand-in for an AsyncCollection.

    Supports top-level equality filters, ``$set``/``$inc`` updates and unique
    indexes, raising DuplicateKeyError like the server does.
    """

    def __init__(self) -> None:
        self.docs: dict[Any, dict[str, Any]] = {}
        self.unique_fields: set[str] = set()
        self.indexes: list[dict[str, Any]] = []
        self.find_one_calls = 0

    async def create_index(self, keys: list[tuple[str, int]], **kwargs: Any) -> str:
        self.indexes.append({"keys": keys, **kwargs})
        if kwargs.get("unique"):
            self.unique_fields.add(keys[0][0])
        return "_".join(f"{key}_{direction}" for key, direction in keys)

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        if doc["_id"] in self.docs:
            raise DuplicateKeyError("E11000 duplicate key error: _id", code=11000)
        for field in self.unique_fields:
            if any(existing.get(field) == doc.get(field) for existing in self.docs.values()):
                raise DuplicateKeyError(f"E11000 duplicate key error: {field}", code=11000)
        self.docs[doc["_id"]] = copy.deepcopy(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, filter: dict[str, Any], projection: dict[str, Any] | None = None) -> dict[str, Any] | None:
        _check_filter(filter)
        self.find_one_calls += 1
        for doc in self.docs.values():
            if _matches(doc, filter):
                return copy.deepcopy(doc)
        return None

    def find(self, filter: dict[str, Any] | None = None) -> FakeCursor:
        _check_filter(filter or {})
        return FakeCursor([copy.deepcopy(doc) for doc in self.docs.values() if _matches(doc, filter or {})])

    async def update_one(self, filter: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        _check_filter(filter)
        for doc in self.docs.values():
            if _matches(doc, filter):
                _apply_update(doc, update)
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def find_one_and_update(
        self,
        filter: dict[str, Any],
        update: dict[str, Any],
        upsert: bool = False,
        return_document: bool = ReturnDocument.BEFORE,
    ) -> dict[str, Any] | None:
        _check_filter(filter)
        doc = next((doc for doc in self.docs.values() if _matches(doc, filter)), None)
        if doc is None:
            if not upsert:
                return None
            doc = dict(filter)
            self.docs[doc["_id"]] = doc
        before = copy.deepcopy(doc)
        _apply_update(doc, update)
        return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before

    async def delete_one(self, filter: dict[str, Any]) -> SimpleNamespace:
        _check_filter(filter)
        for key, doc in list(self.docs.items()):
            if _matches(doc, filter):
                del self.docs[key]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, filter: dict[str, Any]) -> SimpleNamespace:
        _check_filter(filter)
        keys = [key for key, doc in self.docs.items() if _matches(doc, filter)]
        for key in keys:
            del self.docs[key]
        return SimpleNamespace(deleted_count=len(keys))


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


def wire_services(core: Any, database: FakeDatabase) -> Services:
    """Build the service registry on a fake database and attach it to ``core``."""
    core.database = database
    core.services = Services(database)  # type: ignore[arg-type]
    core.services.set_core(core)
    return core.services


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Use the minimum bcrypt work factor in tests."""
    monkeypatch.setattr(passwords, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def config():
    """Configuration with a small id space and no admin bootstrap."""
    return Config(
        database_url="mongodb://localhost:27017/shortlink_test",
        host="127.0.0.1",
        port=8000,
        debug=True,
        session_secret_key="test-secret-key",
        shortcode_universe="abcdefghijklmnopqrstuvwxyz0123456789",
        shortcode_length=4,
        session_max_age_days=7,
        admin_email=None,
        admin_password=None,
    )


@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
def core(config, database):
    """Core-like container with services wired to the fake database."""
    core = SimpleNamespace(config=config)
    wire_services(core, database)
    return core


@pytest.fixture
def services(core):
    return core.services


@pytest.fixture
async def user(services):
    """A registered regular user."""
    return await services.user.create_user("alice@example.com", "correct-horse")


@pytest.fixture
async def admin(services):
    """A registered admin user."""
    return await services.user.create_user("root@example.com", "admin-password", Permissions.ADMIN)


@pytest.fixture
def client(config, database, monkeypatch):
    """HTTP client for the full FastAPI app, backed by the fake database."""
    monkeypatch.setattr(core_module, "AsyncMongoClient", MagicMock())
    app = App(config)
    wire_services(app._core, database)
    fastapi_app = create_fastapi_app(app, config)
    fastapi_app.state.app = app
    return TestClient(fastapi_app)
