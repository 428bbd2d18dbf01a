"""
Tests for resolution store strategies and factory.
"""
import asyncio
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from resolver_app.config import settings
from resolver_app.storage.factory import ResolutionStoreFactory, StoreBackend
from resolver_app.storage.models import ResolvedUrl
from resolver_app.storage.strategies import (
    InMemoryResolutionStore,
    SQLResolutionStore,
    _newest_first,
)


@pytest.fixture(params=["memory", "sql"])
def any_store(request, store, sql_store):
    """Run the contract tests against every backend"""
    return store if request.param == "memory" else sql_store


class TestStoreContract:
    """Behaviour every backend must share"""

    def test_insert_assigns_ids(self, any_store):
        first = asyncio.run(any_store.insert("bit.ly/a", "https://a.example/"))
        second = asyncio.run(any_store.insert("bit.ly/b", "https://b.example/"))

        assert first.id == 1
        assert second.id == 2
        assert first.original_url == "bit.ly/a"
        assert first.resolved_url == "https://a.example/"
        assert first.timestamp.tzinfo is not None

    def test_insert_allows_duplicates(self, any_store):
        """Uniqueness is the caller's policy, not the store's"""
        asyncio.run(any_store.insert("a", "https://same.example/"))
        asyncio.run(any_store.insert("b", "https://same.example/"))

        assert asyncio.run(any_store.count()) == 2

    def test_list_newest_first(self, any_store):
        for i in range(3):
            asyncio.run(any_store.insert(f"in{i}", f"https://out{i}.example/"))

        records = asyncio.run(any_store.list_all())

        assert [r.id for r in records] == [3, 2, 1]

    def test_exists_exact_match_only(self, any_store):
        asyncio.run(any_store.insert("x", "https://Example.com/path"))

        assert asyncio.run(any_store.exists("https://Example.com/path")) is True
        assert asyncio.run(any_store.exists("https://example.com/path")) is False
        assert asyncio.run(any_store.exists("https://Example.com/path/")) is False

    def test_clear_then_list_is_empty(self, any_store):
        asyncio.run(any_store.insert("x", "https://x.example/"))

        asyncio.run(any_store.clear())

        assert asyncio.run(any_store.list_all()) == []
        assert asyncio.run(any_store.exists("https://x.example/")) is False

    def test_clear_on_empty_store(self, any_store):
        asyncio.run(any_store.clear())
        asyncio.run(any_store.clear())

        assert asyncio.run(any_store.count()) == 0

    def test_ids_not_reused_after_clear(self, any_store):
        """The id counter keeps moving forward across clears"""
        issued = [asyncio.run(any_store.insert(f"{i}", f"https://{i}.example/")).id for i in range(2)]

        asyncio.run(any_store.clear())
        after = asyncio.run(any_store.insert("again", "https://again.example/"))

        assert after.id not in issued
        assert after.id > max(issued)


class TestRecords:
    """Record immutability and ordering"""

    def test_record_is_immutable(self, store):
        record = asyncio.run(store.insert("x", "https://x.example/"))

        with pytest.raises(ValidationError):
            record.resolved_url = "https://other.example/"

    def test_equal_timestamps_order_by_id(self):
        now = datetime.now(timezone.utc)
        records = [
            ResolvedUrl(id=i, original_url="o", resolved_url=f"r{i}", timestamp=now)
            for i in (1, 3, 2)
        ]

        assert [r.id for r in _newest_first(records)] == [3, 2, 1]

    def test_sql_store_survives_reopen(self, tmp_path):
        """Records and the id counter live in the database, not the instance"""
        url = f"sqlite:///{tmp_path / 'reopen.db'}"
        first = SQLResolutionStore(database_url=url)
        asyncio.run(first.insert("a", "https://a.example/"))
        asyncio.run(first.clear())
        first.engine.dispose()

        second = SQLResolutionStore(database_url=url)
        record = asyncio.run(second.insert("b", "https://b.example/"))
        second.engine.dispose()

        assert record.id == 2


class TestResolutionStoreFactory:
    """Test store factory"""

    def setup_method(self):
        ResolutionStoreFactory.clear_instance()

    def teardown_method(self):
        ResolutionStoreFactory.clear_instance()

    def test_creates_memory_store(self):
        store = ResolutionStoreFactory.create(StoreBackend.MEMORY)
        assert isinstance(store, InMemoryResolutionStore)

    def test_creates_sql_store(self, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "database_url", f"sqlite:///{tmp_path / 'factory.db'}")

        store = ResolutionStoreFactory.create(StoreBackend.SQL)

        assert isinstance(store, SQLResolutionStore)
        store.engine.dispose()

    def test_returns_singleton(self):
        first = ResolutionStoreFactory.create(StoreBackend.MEMORY)
        second = ResolutionStoreFactory.create(StoreBackend.MEMORY)
        assert first is second

    def test_unknown_backend_name(self):
        with pytest.raises(ValueError):
            StoreBackend("mongodb")
