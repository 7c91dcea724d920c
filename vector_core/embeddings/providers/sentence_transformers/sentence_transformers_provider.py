"""
Sentence Transformers embedding provider implementation.

This module implements the EmbeddingProviderInterface for the sentence-transformers
library, providing local embedding generation with pre-trained models.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

import numpy as np

try:
    from sentence_transformers import SentenceTransformer

    SENTENCE_TRANSFORMERS_AVAILABLE = True
except ImportError:
    SENTENCE_TRANSFORMERS_AVAILABLE = False
    SentenceTransformer = None

from vector_core.embeddings.interfaces import EmbeddingProviderInterface, EmbeddingProviderError


class SentenceTransformersProvider(EmbeddingProviderInterface):
    """
    Sentence Transformers embedding provider.

    The model is loaded lazily on the first embedding request and encoding runs
    on a dedicated worker thread so the event loop is never blocked.
    """

    # Known models and their output dimensions
    MODEL_DIMENSIONS = {
        "all-MiniLM-L6-v2": 384,
        "all-MiniLM-L12-v2": 384,
        "all-mpnet-base-v2": 768,
        "all-distilroberta-v1": 768,
        "paraphrase-MiniLM-L6-v2": 384,
        "multi-qa-MiniLM-L6-cos-v1": 384,
        "multi-qa-mpnet-base-cos-v1": 768,
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the Sentence Transformers embedding provider.

        Args:
            config: Configuration dictionary with keys:
                - model_name: Model name (default: 'all-MiniLM-L6-v2')
                - device: Device to use, e.g. 'cpu' or 'cuda' (default: 'cpu')
                - max_batch_size: Texts per forward pass when encoding a batch (default: 64)
                - trust_remote_code: Allow models that ship their own code (default: False)
                - normalize_embeddings: Whether the model output is normalized (default: True)
                - cache_folder: Custom cache folder for models (optional)
        """
        config = dict(config or {})
        config.setdefault("model_name", "all-MiniLM-L6-v2")
        super().__init__(config)

        self.logger = logging.getLogger(__name__)

        if not SENTENCE_TRANSFORMERS_AVAILABLE:
            raise EmbeddingProviderError(
                "sentence-transformers library is not installed. "
                "Install it with: pip install sentence-transformers",
                provider="sentence_transformers",
                details={"missing_dependency": "sentence-transformers"},
            )

        self.device = config.get("device", "cpu")
        self.max_batch_size = config.get("max_batch_size", 64)
        self.trust_remote_code = config.get("trust_remote_code", False)
        self.normalize_embeddings_flag = config.get("normalize_embeddings", True)
        self.cache_folder = config.get("cache_folder")

        if self._dimension is None:
            self._dimension = self.MODEL_DIMENSIONS.get(self._model_name)

        self._model: Optional["SentenceTransformer"] = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="sentence_transformers")

        self.logger.info(
            f"Initialized SentenceTransformers provider with model: {self._model_name}, device: {self.device}"
        )

    @property
    def provider_name(self) -> str:
        return "sentence_transformers"

    def _load_model(self) -> "SentenceTransformer":
        """Load the sentence transformer model (lazy loading)."""
        if self._model is None:
            try:
                self.logger.info(f"Loading SentenceTransformer model: {self._model_name}")
                model_kwargs = {"device": self.device, "trust_remote_code": self.trust_remote_code}
                if self.cache_folder:
                    model_kwargs["cache_folder"] = self.cache_folder

                self._model = SentenceTransformer(self._model_name, **model_kwargs)
                self._dimension = int(self._model.get_sentence_embedding_dimension())

                self.logger.info(f"Loaded model with dimension: {self._dimension}")
            except Exception as e:
                raise EmbeddingProviderError(
                    f"Failed to load SentenceTransformer model '{self._model_name}': {str(e)}",
                    provider=self.provider_name,
                    details={"model_name": self._model_name, "device": self.device},
                ) from e

        return self._model

    def _encode_single(self, text: str) -> np.ndarray:
        """Encode a single text (runs in thread pool)."""
        model = self._load_model()
        embedding = model.encode(
            text,
            convert_to_numpy=True,
            normalize_embeddings=self.normalize_embeddings_flag,
            show_progress_bar=False,
        )
        return embedding.astype(np.float32)

    def _encode_batch(self, texts: List[str]) -> List[np.ndarray]:
        """Encode a batch of texts (runs in thread pool)."""
        model = self._load_model()
        embeddings = model.encode(
            texts,
            convert_to_numpy=True,
            batch_size=self.max_batch_size,
            normalize_embeddings=self.normalize_embeddings_flag,
            show_progress_bar=False,
        )
        return [emb.astype(np.float32) for emb in np.atleast_2d(embeddings)]

    async def generate_embedding(self, text: str) -> np.ndarray:
        """
        Generate embedding for a single text using SentenceTransformers.

        Raises:
            EmbeddingProviderError: If embedding generation fails
        """
        if not text or not text.strip():
            raise EmbeddingProviderError(
                "Text cannot be empty or None",
                provider=self.provider_name,
                details={"text_length": len(text) if text else 0},
            )

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._executor, self._encode_single, text)
        except EmbeddingProviderError:
            raise
        except Exception as e:
            self.logger.error(f"Error generating SentenceTransformers embedding: {str(e)}")
            raise EmbeddingProviderError(
                f"Failed to generate SentenceTransformers embedding: {str(e)}",
                provider=self.provider_name,
                details={"model": self._model_name, "text_preview": text[:100]},
            ) from e

    async def generate_embeddings(self, texts: List[str]) -> List[np.ndarray]:
        """Generate embeddings for multiple texts in one model call."""
        if not texts:
            return []

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._executor, self._encode_batch, list(texts))
        except EmbeddingProviderError:
            raise
        except Exception as e:
            raise EmbeddingProviderError(
                f"Failed to generate SentenceTransformers embeddings: {str(e)}",
                provider=self.provider_name,
                details={"model": self._model_name, "num_texts": len(texts)},
            ) from e

    def is_available(self) -> bool:
        """Check if the SentenceTransformers provider can load its model."""
        try:
            self._load_model()
            return True
        except EmbeddingProviderError as e:
            self.logger.warning(f"SentenceTransformers provider not available: {str(e)}")
            return False
