"""
Ollama embedding provider implementation.

This module implements the EmbeddingProviderInterface for a local Ollama server,
supporting Ollama embedding models for fully local embedding generation.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urljoin

import aiohttp
import numpy as np

from vector_core.embeddings.interfaces import EmbeddingProviderInterface, EmbeddingProviderError


class OllamaEmbeddingProvider(EmbeddingProviderInterface):
    """
    Ollama embedding provider for local embedding generation.

    Requests are made once; a failed request surfaces as EmbeddingProviderError
    and retrying is left to the caller.
    """

    # Output dimensions of common Ollama embedding models
    MODEL_DIMENSIONS = {
        "nomic-embed-text": 768,
        "mxbai-embed-large": 1024,
        "all-minilm": 384,
        "snowflake-arctic-embed": 1024,
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the Ollama embedding provider.

        Args:
            config: Configuration dictionary with keys:
                - model_name: Ollama model name (default: 'nomic-embed-text')
                - base_url: Ollama server URL (default: 'http://localhost:11434')
                - timeout: Request timeout in seconds (default: 60)
                - keep_alive: Keep-alive duration (default: '5m')
                - dimension: Override the declared dimension (optional)
        """
        config = dict(config or {})
        config.setdefault("model_name", "nomic-embed-text")
        super().__init__(config)

        self.logger = logging.getLogger(__name__)

        self.base_url = config.get("base_url", "http://localhost:11434").rstrip("/")
        self.timeout = config.get("timeout", 60)
        self.keep_alive = config.get("keep_alive", "5m")

        self.embeddings_endpoint = urljoin(self.base_url + "/", "api/embeddings")

        if self._dimension is None:
            self._dimension = self._get_default_dimension()

        self.logger.info(
            f"Initialized Ollama provider with model '{self._model_name}' at {self.base_url}"
        )

    @property
    def provider_name(self) -> str:
        return "ollama"

    def _get_default_dimension(self) -> Optional[int]:
        """Get the known dimension for the configured model, if any."""
        for model_prefix, dimension in self.MODEL_DIMENSIONS.items():
            if model_prefix in self._model_name.lower():
                return dimension
        return None

    async def _post_embedding_request(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Send one embedding request and return the decoded JSON body."""
        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        ) as session:
            async with session.post(self.embeddings_endpoint, json=payload) as response:
                if response.status == 404:
                    error_text = await response.text()
                    raise EmbeddingProviderError(
                        f"Model '{self._model_name}' not found on Ollama server",
                        provider=self.provider_name,
                        details={"model": self._model_name, "response": error_text},
                    )
                if response.status != 200:
                    error_text = await response.text()
                    raise EmbeddingProviderError(
                        f"Ollama API error: HTTP {response.status}",
                        provider=self.provider_name,
                        details={"status": response.status, "response": error_text},
                    )
                return await response.json()

    async def generate_embedding(self, text: str) -> np.ndarray:
        """
        Generate embedding for a single text using the Ollama API.

        Raises:
            EmbeddingProviderError: If embedding generation fails
        """
        if not text or not text.strip():
            raise EmbeddingProviderError(
                "Text cannot be empty or None",
                provider=self.provider_name,
                details={"text_length": len(text) if text else 0},
            )

        payload = {"model": self._model_name, "prompt": text, "keep_alive": self.keep_alive}

        try:
            result = await self._post_embedding_request(payload)
        except EmbeddingProviderError:
            raise
        except aiohttp.ClientError as e:
            raise EmbeddingProviderError(
                f"Failed to connect to Ollama server: {str(e)}",
                provider=self.provider_name,
                details={"url": self.base_url},
            ) from e

        embedding = result.get("embedding")
        if not isinstance(embedding, list) or not embedding:
            raise EmbeddingProviderError(
                "Invalid embedding format from Ollama",
                provider=self.provider_name,
                details={"embedding_type": str(type(embedding))},
            )

        if self._dimension is None:
            self._dimension = len(embedding)
            self.logger.info(f"Detected embedding dimension: {self._dimension}")

        self.logger.debug(f"Generated Ollama embedding of length {len(embedding)}")
        return np.array(embedding, dtype=np.float32)

    def __str__(self) -> str:
        """String representation of the provider."""
        return f"OllamaEmbeddingProvider(model={self.model_name}, url={self.base_url}, dim={self.dimension})"
