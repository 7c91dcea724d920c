"""
Sentence Transformers embedding provider.

This module provides local embedding generation using the sentence-transformers library.
"""

from .sentence_transformers_provider import SentenceTransformersProvider

__all__ = ["SentenceTransformersProvider"]
