"""Tests for SessionStore."""

from datetime import UTC, datetime

import pytest

from shortlink.core.modules.session.models import Session
from shortlink.core.modules.session.store import SessionStore
from shortlink.errors import ConflictError, NotFoundError


@pytest.fixture
def collection(database):
    return database.get_collection("sessions")


@pytest.fixture
def store(collection):
    return SessionStore(collection)


class TestSessionStore:
    """Tests for create, fetch and delete."""

    async def test_create_and_fetch(self, store):
        """Test that a created record can be fetched back."""
        session = Session(id=99, expiry_instant=1_900_000_000, user_id=3)
        await store.create(session)
        assert await store.fetch_by_id(99) == session

    async def test_create_stores_expires_at(self, store, collection):
        """Test that the TTL field mirrors expiry_instant."""
        await store.create(Session(id=1, expiry_instant=1_900_000_000, user_id=3))
        assert collection.docs[1]["expires_at"] == datetime.fromtimestamp(1_900_000_000, UTC)

    async def test_duplicate_id_rejected(self, store):
        """Test that reusing a session id is a conflict."""
        await store.create(Session(id=1, expiry_instant=100, user_id=3))
        with pytest.raises(ConflictError):
            await store.create(Session(id=1, expiry_instant=200, user_id=4))
        assert (await store.fetch_by_id(1)).user_id == 3

    async def test_fetch_missing(self, store):
        """Test that an unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await store.fetch_by_id(12345)

    async def test_delete(self, store):
        """Test that a deleted record is gone."""
        await store.create(Session(id=1, expiry_instant=100, user_id=3))
        await store.delete(1)
        with pytest.raises(NotFoundError):
            await store.fetch_by_id(1)

    async def test_delete_missing_is_noop(self, store):
        """Test that deleting an unknown id does not raise."""
        await store.delete(12345)
        await store.delete(12345)

    async def test_delete_by_user(self, store):
        """Test that all sessions of one user are removed."""
        await store.create(Session(id=1, expiry_instant=100, user_id=3))
        await store.create(Session(id=2, expiry_instant=100, user_id=3))
        await store.create(Session(id=3, expiry_instant=100, user_id=4))
        assert await store.delete_by_user(3) == 2
        assert (await store.fetch_by_id(3)).user_id == 4

    async def test_ttl_index(self, store, collection):
        """Test that the expiry TTL index is created."""
        await store.create_indexes()
        ttl = [index for index in collection.indexes if index["keys"] == [("expires_at", 1)]]
        assert ttl == [{"keys": [("expires_at", 1)], "expireAfterSeconds": 0}]
