"""
Deterministic hashing embedding provider for tests and offline use.
"""

from .hashing_provider import HashEmbeddingProvider

__all__ = ["HashEmbeddingProvider"]
