"""
Interfaces for the embedding provider system.
"""

from vector_core.core.exceptions import EmbeddingProviderError

from .embedding_provider_interface import (
    EmbeddingProviderInterface,
    NullEmbeddingProvider,
)

__all__ = [
    "EmbeddingProviderInterface",
    "NullEmbeddingProvider",
    "EmbeddingProviderError",
]
