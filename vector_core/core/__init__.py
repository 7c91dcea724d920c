"""
Core definitions shared across the vector engine.
"""

from .exceptions import (
    VectorCoreError,
    DuplicateCollectionNameError,
    CollectionNotFoundError,
    DimensionMismatchError,
    InvalidFilterError,
    EmptyQueryEmbeddingError,
    EmbeddingProviderError,
    PersistenceIOError,
    ContextCanceledError,
)

__all__ = [
    "VectorCoreError",
    "DuplicateCollectionNameError",
    "CollectionNotFoundError",
    "DimensionMismatchError",
    "InvalidFilterError",
    "EmptyQueryEmbeddingError",
    "EmbeddingProviderError",
    "PersistenceIOError",
    "ContextCanceledError",
]
