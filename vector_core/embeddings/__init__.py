"""
Embedding provider capability and its implementations.
"""

from .interfaces import EmbeddingProviderInterface, NullEmbeddingProvider, EmbeddingProviderError
from .providers import EmbeddingProviderFactory, create_embedding_provider, HashEmbeddingProvider

__all__ = [
    "EmbeddingProviderInterface",
    "NullEmbeddingProvider",
    "EmbeddingProviderError",
    "EmbeddingProviderFactory",
    "create_embedding_provider",
    "HashEmbeddingProvider",
]
