"""
Embedding providers and factory system.
"""

from typing import Any, Dict, List, Optional, Type

from vector_core.embeddings.interfaces import EmbeddingProviderInterface, NullEmbeddingProvider

from .hashing import HashEmbeddingProvider
from .ollama import OllamaEmbeddingProvider
from .sentence_transformers import SentenceTransformersProvider


class EmbeddingProviderFactory:
    """
    Factory for creating embedding provider instances.

    This factory provides a centralized way to instantiate embedding providers
    based on configuration, enabling easy switching between different providers.
    """

    # Registry of available providers
    _providers: Dict[str, Type[EmbeddingProviderInterface]] = {
        "none": NullEmbeddingProvider,
        "hashing": HashEmbeddingProvider,
        "sentence_transformers": SentenceTransformersProvider,
        "ollama": OllamaEmbeddingProvider,
    }

    @classmethod
    def create_provider(
        cls, provider_type: str, config: Optional[Dict[str, Any]] = None
    ) -> EmbeddingProviderInterface:
        """
        Create an embedding provider instance.

        Args:
            provider_type: Type of provider ('none', 'hashing', 'sentence_transformers', 'ollama')
            config: Provider-specific configuration dictionary

        Returns:
            Configured embedding provider instance

        Raises:
            ValueError: If provider type is not supported
        """
        provider_class = cls.get_provider_class(provider_type)
        return provider_class(config or {})

    @classmethod
    def get_available_providers(cls) -> List[str]:
        """Get list of registered embedding provider names."""
        return list(cls._providers.keys())

    @classmethod
    def register_provider(cls, name: str, provider_class: Type[EmbeddingProviderInterface]) -> None:
        """
        Register a new embedding provider.

        Args:
            name: Name of the provider
            provider_class: Provider class implementing EmbeddingProviderInterface
        """
        if not issubclass(provider_class, EmbeddingProviderInterface):
            raise ValueError("Provider class must implement EmbeddingProviderInterface")

        cls._providers[name.lower()] = provider_class

    @classmethod
    def get_provider_class(cls, provider_type: str) -> Type[EmbeddingProviderInterface]:
        """
        Get the provider class for a given type.

        Raises:
            ValueError: If provider type is not supported
        """
        provider_type = provider_type.lower()

        if provider_type not in cls._providers:
            available = ", ".join(cls._providers.keys())
            raise ValueError(
                f"Unsupported embedding provider: {provider_type}. "
                f"Available providers: {available}"
            )

        return cls._providers[provider_type]


def create_embedding_provider(
    provider_type: str, config: Optional[Dict[str, Any]] = None
) -> EmbeddingProviderInterface:
    """Create an embedding provider instance."""
    return EmbeddingProviderFactory.create_provider(provider_type, config)


__all__ = [
    "EmbeddingProviderFactory",
    "create_embedding_provider",
    "NullEmbeddingProvider",
    "HashEmbeddingProvider",
    "SentenceTransformersProvider",
    "OllamaEmbeddingProvider",
]
