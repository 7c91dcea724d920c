"""
Tests for the Database collection registry.
"""
import threading
from pathlib import Path

import pytest

from vector_core.core.exceptions import CollectionNotFoundError, DuplicateCollectionNameError
from vector_core.embeddings.providers.hashing import HashEmbeddingProvider
from vector_core.model import Document
from vector_core.store import Database
from vector_core.store.database import validate_collection_name


class TestCollectionRegistry:
    """Test creating, finding and deleting collections."""

    def test_create_and_get(self, memory_db):
        collection = memory_db.create_collection("kb", metadata={"owner": "docs"})

        assert memory_db.get_collection("kb") is collection
        assert collection.name == "kb"
        assert collection.metadata == {"owner": "docs"}
        assert "kb" in memory_db
        assert len(memory_db) == 1

    def test_duplicate_name(self, memory_db):
        memory_db.create_collection("kb")
        with pytest.raises(DuplicateCollectionNameError) as exc_info:
            memory_db.create_collection("kb")
        assert exc_info.value.name == "kb"

    def test_get_missing_returns_none(self, memory_db):
        assert memory_db.get_collection("missing") is None

    def test_get_attaches_provider(self, memory_db):
        memory_db.create_collection("kb")
        provider = HashEmbeddingProvider({"dimension": 16})

        collection = memory_db.get_collection("kb", embedding_provider=provider)
        assert collection.embedding_provider is provider

    def test_get_or_create(self, memory_db):
        first = memory_db.get_or_create_collection("kb", metadata={"v": "1"})
        second = memory_db.get_or_create_collection("kb", metadata={"v": "2"})

        assert first is second
        assert second.metadata == {"v": "1"}

    def test_list_collections_is_snapshot(self, memory_db):
        memory_db.create_collection("a")
        memory_db.create_collection("b")

        snapshot = memory_db.list_collections()
        memory_db.create_collection("c")

        assert sorted(snapshot) == ["a", "b"]
        assert sorted(memory_db.list_collections()) == ["a", "b", "c"]

    def test_delete_is_idempotent(self, memory_db):
        memory_db.create_collection("kb")

        assert memory_db.delete_collection("kb") is True
        assert memory_db.delete_collection("kb") is False
        assert memory_db.get_collection("kb") is None

    def test_deleted_collection_is_closed(self, memory_db):
        collection = memory_db.create_collection("kb")
        memory_db.delete_collection("kb")

        assert collection.closed
        with pytest.raises(CollectionNotFoundError):
            collection.count()

    def test_name_can_be_reused_after_delete(self, memory_db):
        memory_db.create_collection("kb")
        memory_db.delete_collection("kb")
        assert memory_db.create_collection("kb").count() == 0

    def test_reset(self, memory_db):
        for name in ("a", "b", "c"):
            memory_db.create_collection(name)
        memory_db.reset()
        assert memory_db.list_collections() == {}

    def test_databases_are_independent(self):
        first, second = Database(), Database()
        first.create_collection("kb")
        assert second.get_collection("kb") is None

    def test_concurrent_create_yields_one_winner(self, memory_db):
        errors = []

        def create():
            try:
                memory_db.create_collection("shared")
            except DuplicateCollectionNameError as e:
                errors.append(e)

        threads = [threading.Thread(target=create) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(errors) == 7
        assert len(memory_db) == 1


class TestDatabaseOptions:
    """Test options passed down to collections and storage."""

    def test_concurrency_applies_to_collections(self, storage_root):
        db = Database(storage_root, concurrency=6)
        assert db.create_collection("kb").concurrency == 6
        assert Database(storage_root, concurrency=2).get_collection("kb").concurrency == 2

    def test_default_concurrency_is_one(self, memory_db):
        assert memory_db.create_collection("kb").concurrency == 1

    @pytest.mark.asyncio
    async def test_pretty_print_indents_records(self, storage_root):
        db = Database(storage_root, pretty_print=True)
        collection = db.create_collection("kb")
        await collection.add_document(Document(id="A", content="alpha", embedding=[1.0, 0.0]))

        descriptor = (Path(storage_root) / "kb" / "collection.json").read_text()
        assert descriptor.startswith("{\n  ")


class TestCollectionNames:
    """Test collection name validation."""

    @pytest.mark.parametrize("name", ["", "   ", "a/b", "a\\b", ".", ".."])
    def test_invalid_names(self, name):
        with pytest.raises(ValueError):
            validate_collection_name(name)

    @pytest.mark.parametrize("name", ["kb", "knowledge-base", "v1.2", "ünïcode"])
    def test_valid_names(self, name):
        validate_collection_name(name)

    def test_create_rejects_invalid_name(self, memory_db):
        with pytest.raises(ValueError):
            memory_db.create_collection("../escape")

    def test_create_rejects_non_string_metadata(self, memory_db):
        with pytest.raises(ValueError):
            memory_db.create_collection("kb", metadata={"version": 2})
