"""
Abstract interface for embedding providers.

A collection calls its provider only for documents (and text queries) that do
not already carry an embedding. Providers are thin adapters: the engine never
computes embeddings itself.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import numpy as np

from vector_core.core.exceptions import EmbeddingProviderError


class EmbeddingProviderInterface(ABC):
    """
    Abstract base class for embedding providers.

    All embedding providers must implement this interface to be usable by a
    collection.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the embedding provider.

        Args:
            config: Provider-specific configuration dictionary
        """
        self.config = config or {}
        self._dimension: Optional[int] = self.config.get("dimension")
        self._model_name = self.config.get("model_name", "default")

    @property
    def dimension(self) -> Optional[int]:
        """Return the declared embedding dimension, or None if not known yet."""
        return self._dimension

    @property
    def model_name(self) -> str:
        """Return the model name being used."""
        return self._model_name

    @property
    def provider_name(self) -> str:
        """Short provider name used in error reports."""
        return self.__class__.__name__

    @abstractmethod
    async def generate_embedding(self, text: str) -> np.ndarray:
        """
        Generate embedding for a single text.

        Args:
            text: Input text to embed

        Returns:
            Embedding vector as numpy array

        Raises:
            EmbeddingProviderError: If embedding generation fails
        """
        pass

    async def generate_embeddings(self, texts: List[str]) -> List[np.ndarray]:
        """
        Generate embeddings for multiple texts, one request at a time.

        Providers with a native batch endpoint may override this.
        """
        return [await self.generate_embedding(text) for text in texts]

    def is_available(self) -> bool:
        """Check if the provider is configured and ready to use."""
        return True

    def __str__(self) -> str:
        """String representation of the provider."""
        return f"{self.__class__.__name__}(model={self.model_name}, dim={self.dimension})"


class NullEmbeddingProvider(EmbeddingProviderInterface):
    """
    Provider used when a collection has no embedding function.

    Every document must then be supplied with its embedding; asking this
    provider for one is an error.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__({"model_name": "none"})

    @property
    def provider_name(self) -> str:
        return "none"

    async def generate_embedding(self, text: str) -> np.ndarray:
        raise EmbeddingProviderError(
            "No embedding provider configured; documents and queries must supply embeddings",
            provider=self.provider_name,
        )

    def is_available(self) -> bool:
        return False
