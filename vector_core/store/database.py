"""
Database: a registry of named collections, optionally bound to a storage root.
"""

import logging
import threading
from typing import Dict, Mapping, Optional

from vector_core.core.exceptions import DuplicateCollectionNameError
from vector_core.embeddings.interfaces import EmbeddingProviderInterface
from vector_core.monitoring.structured_logger import OperationLogger, get_logger
from vector_core.storage.backends.json_file import JsonFileStorage
from vector_core.storage.interfaces.collection_storage_interface import CollectionStorageInterface
from vector_core.store.collection import Collection


def validate_collection_name(name: str) -> None:
    """
    Reject names that cannot double as a directory name.

    Raises:
        ValueError: If the name is empty, contains a path separator, or is '.' or '..'
    """
    if not isinstance(name, str) or not name.strip():
        raise ValueError("Collection name must be a non-empty string")
    if "/" in name or "\\" in name or "\x00" in name:
        raise ValueError(f"Collection name must not contain path separators: {name!r}")
    if name in (".", ".."):
        raise ValueError(f"Invalid collection name: {name!r}")


class Database:
    """
    Registry of collections.

    An in-memory database starts empty. A persistent database reads every
    collection under its storage root before the constructor returns and
    refuses to open if any record is corrupt.
    """

    def __init__(
        self,
        storage_root: Optional[str] = None,
        compress: bool = False,
        storage: Optional[CollectionStorageInterface] = None,
        pretty_print: bool = False,
        concurrency: int = 1,
    ):
        """
        Initialize a database.

        Args:
            storage_root: Directory for persisted collections; None keeps everything in memory
            compress: Whether new document records are gzip-compressed
            storage: Pre-built storage backend, used instead of storage_root
            pretty_print: Whether persisted JSON files are indented
            concurrency: Default provider calls in flight for every collection's add_documents

        Raises:
            PersistenceIOError: If the storage root cannot be read or holds corrupt data
        """
        self.logger = logging.getLogger(__name__)
        self._structured_logger = get_logger(__name__, component="database")
        self._lock = threading.Lock()
        self._collections: Dict[str, Collection] = {}
        self._concurrency = max(1, int(concurrency))

        if storage is None and storage_root is not None:
            storage = JsonFileStorage(storage_root, compress=compress, pretty_print=pretty_print)
        self._storage = storage

        if self._storage is not None:
            self._load()

    @property
    def persistent(self) -> bool:
        return self._storage is not None

    def _load(self) -> None:
        operation = OperationLogger(self._structured_logger, "open_database")
        operation.start(storage=str(getattr(self._storage, "directory", self._storage)))
        with operation:
            for persisted in self._storage.load_collections():
                collection = Collection(
                    persisted.name,
                    metadata=persisted.metadata,
                    storage=self._storage,
                    dimension=persisted.dimension,
                    concurrency=self._concurrency,
                )
                collection._restore(persisted.documents)
                self._collections[persisted.name] = collection
            operation.context["collections"] = len(self._collections)

    def create_collection(
        self,
        name: str,
        metadata: Optional[Mapping[str, str]] = None,
        embedding_provider: Optional[EmbeddingProviderInterface] = None,
    ) -> Collection:
        """
        Create and register a new collection.

        Raises:
            ValueError: If the name is invalid
            DuplicateCollectionNameError: If the name is already registered
            PersistenceIOError: If the collection descriptor cannot be written
        """
        validate_collection_name(name)
        metadata = dict(metadata or {})
        for key, value in metadata.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ValueError("Collection metadata must map strings to strings")

        with self._lock:
            if name in self._collections:
                raise DuplicateCollectionNameError(name)

            collection = Collection(
                name,
                metadata=metadata,
                embedding_provider=embedding_provider,
                storage=self._storage,
                concurrency=self._concurrency,
            )
            if self._storage is not None:
                self._storage.save_collection(name, metadata, collection.dimension)
            self._collections[name] = collection

        self.logger.info(f"Created collection '{name}'")
        return collection

    def get_collection(
        self, name: str, embedding_provider: Optional[EmbeddingProviderInterface] = None
    ) -> Optional[Collection]:
        """
        Return the collection registered under ``name``, or None.

        A given embedding provider is attached to the returned collection, which
        is how a reopened persistent collection gets its provider back.
        """
        with self._lock:
            collection = self._collections.get(name)
        if collection is not None and embedding_provider is not None:
            collection.set_embedding_provider(embedding_provider)
        return collection

    def get_or_create_collection(
        self,
        name: str,
        metadata: Optional[Mapping[str, str]] = None,
        embedding_provider: Optional[EmbeddingProviderInterface] = None,
    ) -> Collection:
        """Return the existing collection, or create it when absent."""
        collection = self.get_collection(name, embedding_provider)
        if collection is not None:
            return collection
        try:
            return self.create_collection(name, metadata, embedding_provider)
        except DuplicateCollectionNameError:
            # Created by another thread between the lookup and the create
            return self.get_collection(name, embedding_provider)

    def list_collections(self) -> Dict[str, Collection]:
        """Snapshot of the registry; later changes do not affect it."""
        with self._lock:
            return dict(self._collections)

    def delete_collection(self, name: str) -> bool:
        """
        Remove a collection and its persisted data.

        Returns:
            True if the collection existed
        """
        with self._lock:
            collection = self._collections.get(name)
            if collection is None:
                return False
            if self._storage is not None:
                self._storage.delete_collection(name)
            del self._collections[name]

        collection.close()
        self.logger.info(f"Deleted collection '{name}'")
        return True

    def reset(self) -> None:
        """Delete every collection."""
        for name in list(self.list_collections()):
            self.delete_collection(name)

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._collections

    def __len__(self) -> int:
        with self._lock:
            return len(self._collections)

    def __repr__(self) -> str:
        return f"Database(collections={len(self)}, persistent={self.persistent})"
