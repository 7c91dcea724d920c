"""
Vector Engine: an embeddable vector-similarity store.

Documents with embeddings are grouped into named collections, held in memory
and optionally persisted to a directory, and searched by cosine similarity
with metadata and content filters.
"""

from vector_core.core.exceptions import (
    CollectionNotFoundError,
    ContextCanceledError,
    DimensionMismatchError,
    DuplicateCollectionNameError,
    EmbeddingProviderError,
    EmptyQueryEmbeddingError,
    InvalidFilterError,
    PersistenceIOError,
    VectorCoreError,
)
from vector_core.embeddings import (
    EmbeddingProviderFactory,
    EmbeddingProviderInterface,
    HashEmbeddingProvider,
    NullEmbeddingProvider,
    create_embedding_provider,
)
from vector_core.model import Document, QueryResult
from vector_core.store import Collection, Database, create_configured_provider, create_database

__version__ = "0.1.0"

__all__ = [
    "Collection",
    "Database",
    "Document",
    "QueryResult",
    "create_database",
    "create_configured_provider",
    "EmbeddingProviderFactory",
    "EmbeddingProviderInterface",
    "HashEmbeddingProvider",
    "NullEmbeddingProvider",
    "create_embedding_provider",
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
