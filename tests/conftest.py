"""
Configuration file for pytest.

This file configures pytest to properly load environment variables
and provides shared fixtures for tests.
"""

import asyncio
import os

import dotenv
import numpy as np
import pytest

from vector_core.embeddings.interfaces import EmbeddingProviderInterface
from vector_core.model import Document
from vector_core.store import Database

# Load environment variables from .env file
dotenv.load_dotenv()


class RecordingProvider(EmbeddingProviderInterface):
    """
    Test provider returning fixed embeddings and recording how it was called.

    Texts listed in ``vectors`` get that vector; any other text gets a vector
    derived from its length. ``delay`` makes each call sleep, and ``fail_on``
    makes the call for that text raise.
    """

    def __init__(self, dimension=4, vectors=None, delay=0.0, fail_on=None):
        super().__init__({"model_name": "recording", "dimension": dimension})
        self.vectors = vectors or {}
        self.delay = delay
        self.fail_on = fail_on
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def provider_name(self) -> str:
        return "recording"

    async def generate_embedding(self, text: str) -> np.ndarray:
        self.calls.append(text)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if text == self.fail_on:
                raise RuntimeError(f"cannot embed {text!r}")
            if text in self.vectors:
                return np.array(self.vectors[text], dtype=np.float32)
            vector = np.zeros(self._dimension, dtype=np.float32)
            vector[len(text) % self._dimension] = 1.0
            return vector
        finally:
            self.in_flight -= 1


@pytest.fixture
def recording_provider_factory():
    """Build RecordingProvider instances with custom behaviour."""
    return RecordingProvider


@pytest.fixture
def sample_documents():
    """Four-dimensional documents used throughout the query tests."""
    return [
        Document(id="A", content="Fast API servers", embedding=[1.0, 0.0, 0.0, 0.0],
                 metadata={"category": "backend"}),
        Document(id="B", content="Styling buttons", embedding=[0.0, 1.0, 0.0, 0.0],
                 metadata={"category": "frontend"}),
        Document(id="C", content="Async workers", embedding=[0.9, 0.1, 0.0, 0.0],
                 metadata={"category": "backend"}),
    ]


@pytest.fixture
def memory_db():
    """Fresh in-memory database."""
    return Database()


@pytest.fixture
def storage_root(tmp_path):
    """Empty directory for persistent databases."""
    root = tmp_path / "vectors"
    root.mkdir()
    return str(root)


@pytest.fixture(scope="session")
def ollama_available():
    """Check if an Ollama server is configured for integration tests."""
    return bool(os.getenv("OLLAMA_BASE_URL"))
