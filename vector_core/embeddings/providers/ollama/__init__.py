"""
Ollama embedding provider package.

This package provides embedding functionality using a local Ollama server.
"""

from .ollama_provider import OllamaEmbeddingProvider

__all__ = ["OllamaEmbeddingProvider"]
