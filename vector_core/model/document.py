"""
Document module for records held by a collection.

This module defines the stored Document and the QueryResult returned by
similarity queries.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np

EmbeddingLike = Union[np.ndarray, Sequence[float]]


def to_embedding(values: EmbeddingLike) -> np.ndarray:
    """
    Convert a sequence of numbers into a read-only float32 vector.

    Args:
        values: Any one-dimensional sequence of numbers

    Returns:
        A new float32 array that cannot be modified in place

    Raises:
        ValueError: If the input is not one-dimensional or holds NaN or infinity
    """
    array = np.array(values, dtype=np.float32, copy=True)
    if array.ndim != 1:
        raise ValueError(f"Embedding must be one-dimensional, got shape {array.shape}")
    if not np.isfinite(array).all():
        raise ValueError("Embedding values must be finite")
    array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False)
class Document:
    """
    A single document stored in a collection.

    The embedding is copied into a read-only float32 array on construction, so a
    stored Document never changes underneath its collection.
    """

    id: str
    content: str = ""
    embedding: Optional[np.ndarray] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.id, str):
            raise ValueError(f"Document ID must be a string, got {type(self.id).__name__}")
        if not isinstance(self.content, str):
            raise ValueError(f"Document content must be a string (document {self.id!r})")

        for key, value in (self.metadata or {}).items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ValueError(
                    f"Document metadata must map strings to strings (document {self.id!r})"
                )
        object.__setattr__(self, "metadata", dict(self.metadata or {}))

        if self.embedding is not None:
            object.__setattr__(self, "embedding", to_embedding(self.embedding))

    @property
    def dimension(self) -> Optional[int]:
        """Return the embedding length, or None when no embedding is set."""
        if self.embedding is None:
            return None
        return int(self.embedding.shape[0])

    def with_embedding(self, embedding: EmbeddingLike) -> "Document":
        """Return a copy of this document carrying the given embedding."""
        return Document(
            id=self.id,
            content=self.content,
            embedding=embedding,
            metadata=self.metadata,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the Document to a dictionary of plain Python values.

        Returns:
            Dictionary with id, content, embedding (list of floats or None) and metadata
        """
        return {
            "id": self.id,
            "content": self.content,
            "embedding": None if self.embedding is None else self.embedding.tolist(),
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        """
        Create a Document from a dictionary representation.

        Args:
            data: Dictionary containing document attributes

        Returns:
            A new Document instance
        """
        return cls(
            id=data["id"],
            content=data.get("content", ""),
            embedding=data.get("embedding"),
            metadata=data.get("metadata") or {},
        )

    def __repr__(self) -> str:
        return (
            f"Document(id={self.id!r}, dimension={self.dimension}, "
            f"metadata_keys={sorted(self.metadata)})"
        )


@dataclass(frozen=True)
class QueryResult:
    """A ranked match returned by a similarity query."""

    id: str
    content: str
    metadata: Dict[str, str]
    similarity: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "metadata": dict(self.metadata),
            "similarity": self.similarity,
        }
