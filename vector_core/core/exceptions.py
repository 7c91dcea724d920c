"""
Exception hierarchy for the vector engine.

Every error raised by the document store, the database registry and the
persistence layer derives from VectorCoreError so callers can catch the whole
family with a single clause.
"""

from typing import Any, Dict, Optional


class VectorCoreError(Exception):
    """Base exception for vector engine errors."""

    pass


class DuplicateCollectionNameError(VectorCoreError):
    """Raised when a collection name is already registered in a database."""

    def __init__(self, name: str):
        super().__init__(f"Collection already exists: {name}")
        self.name = name


class CollectionNotFoundError(VectorCoreError):
    """Raised when an operation targets a collection that no longer exists."""

    def __init__(self, name: str):
        super().__init__(f"Collection not found: {name}")
        self.name = name


class DimensionMismatchError(VectorCoreError):
    """Raised when an embedding length differs from the expected dimension."""

    def __init__(self, expected: int, actual: int, document_id: Optional[str] = None):
        message = f"Embedding dimension mismatch: expected {expected}, got {actual}"
        if document_id is not None:
            message += f" (document {document_id!r})"
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.document_id = document_id


class InvalidFilterError(VectorCoreError):
    """Raised when a metadata or content filter is malformed."""

    pass


class EmptyQueryEmbeddingError(VectorCoreError):
    """Raised when a query is issued with an empty embedding."""

    def __init__(self):
        super().__init__("Query embedding must not be empty")


class EmbeddingProviderError(VectorCoreError):
    """Exception raised by embedding providers."""

    def __init__(self, message: str, provider: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.provider = provider
        self.details = details or {}


class PersistenceIOError(VectorCoreError):
    """Raised when persisted data cannot be written or read back."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ContextCanceledError(VectorCoreError):
    """Raised when an operation is cancelled or times out before committing."""

    pass
