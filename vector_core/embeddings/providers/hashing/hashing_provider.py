"""
Deterministic feature-hashing embedding provider.

Each lowercase word token is hashed into one of ``dimension`` buckets with a
hash-derived sign, and the bucket counts are L2-normalized. Texts sharing words
therefore score higher than unrelated texts, and the same text always maps to
the same vector. No model download or network access is needed, which makes
this provider suitable for tests and offline demos.
"""

import hashlib
import logging
import re
from typing import Any, Dict, Optional

import numpy as np

from vector_core.embeddings.interfaces import EmbeddingProviderInterface

_TOKEN_PATTERN = re.compile(r"\w+", re.UNICODE)


class HashEmbeddingProvider(EmbeddingProviderInterface):
    """Embedding provider based on signed feature hashing of word tokens."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the hashing provider.

        Args:
            config: Configuration dictionary with keys:
                - dimension: Vector length (default: 256)
                - seed: Salt mixed into every token hash (default: '')
        """
        config = dict(config or {})
        config.setdefault("dimension", 256)
        config.setdefault("model_name", "feature-hashing")
        super().__init__(config)

        self.logger = logging.getLogger(__name__)
        self.seed = str(config.get("seed", ""))

        if not isinstance(self._dimension, int) or self._dimension <= 0:
            raise ValueError(f"dimension must be a positive integer, got {self._dimension!r}")

    @property
    def provider_name(self) -> str:
        return "hashing"

    def _bucket(self, token: str):
        digest = hashlib.sha256(f"{self.seed}:{token}".encode("utf-8")).digest()
        index = int.from_bytes(digest[:8], "little") % self._dimension
        sign = 1.0 if digest[8] & 1 else -1.0
        return index, sign

    def embed_sync(self, text: str) -> np.ndarray:
        """Compute the embedding without awaiting."""
        vector = np.zeros(self._dimension, dtype=np.float32)
        for token in _TOKEN_PATTERN.findall(text.lower()):
            index, sign = self._bucket(token)
            vector[index] += sign

        magnitude = np.linalg.norm(vector)
        if magnitude > 0:
            vector /= magnitude
        return vector

    async def generate_embedding(self, text: str) -> np.ndarray:
        return self.embed_sync(text)
