"""
Abstract interface for collection storage backends.

This module defines the contract a persistence backend must follow so that a
Database can replay its collections on open and a Collection can make each
committed batch durable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from vector_core.model.document import Document


@dataclass
class PersistedCollection:
    """A collection as read back from storage."""

    name: str
    metadata: Dict[str, str] = field(default_factory=dict)
    dimension: Optional[int] = None
    documents: List[Document] = field(default_factory=list)


class CollectionStorageInterface(ABC):
    """
    Abstract base class for collection storage backends.

    Backends are synchronous: they are called while the owning collection
    holds its write lock, and every method either completes durably or raises
    PersistenceIOError without changing what a later load_collections sees.
    """

    @abstractmethod
    def load_collections(self) -> List[PersistedCollection]:
        """Read every persisted collection, failing on the first corrupt record."""
        pass

    @abstractmethod
    def save_collection(self, name: str, metadata: Dict[str, str],
                        dimension: Optional[int]) -> None:
        """Create or update the descriptor of a collection."""
        pass

    @abstractmethod
    def write_documents(self, collection_name: str, documents: Iterable[Document],
                        metadata: Optional[Dict[str, str]] = None,
                        dimension: Optional[int] = None) -> None:
        """
        Durably write (insert or overwrite) a batch of document records.

        The batch is all-or-nothing: when PersistenceIOError is raised, the
        records on disk are the ones that were there before the call. When
        ``metadata`` is given, the collection descriptor is rewritten with it
        and ``dimension`` as part of the same batch.
        """
        pass

    @abstractmethod
    def delete_document(self, collection_name: str, document_id: str) -> bool:
        """Remove one document record. Returns True if a record was removed."""
        pass

    @abstractmethod
    def delete_collection(self, name: str) -> bool:
        """Remove a collection and all of its records. Returns True if it existed."""
        pass
