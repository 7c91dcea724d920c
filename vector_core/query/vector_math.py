"""
Vector math routines used for similarity scoring.

All computations run in single precision. Inputs are never normalized or
modified in place.
"""

import numpy as np

from vector_core.core.exceptions import DimensionMismatchError
from vector_core.model.document import EmbeddingLike


def _as_float32(values: EmbeddingLike) -> np.ndarray:
    return np.asarray(values, dtype=np.float32)


def dot(a: EmbeddingLike, b: EmbeddingLike) -> float:
    """Return the dot product of two equal-length vectors."""
    a_arr, b_arr = _as_float32(a), _as_float32(b)
    if a_arr.shape != b_arr.shape:
        raise DimensionMismatchError(len(a_arr), len(b_arr))
    return float(np.dot(a_arr, b_arr))


def norm(a: EmbeddingLike) -> float:
    """Return the Euclidean norm of a vector."""
    return float(np.linalg.norm(_as_float32(a)))


def cosine_similarity(a: EmbeddingLike, b: EmbeddingLike) -> float:
    """
    Compute the cosine similarity between two vectors.

    Args:
        a: First vector
        b: Second vector, same length as ``a``

    Returns:
        Similarity in [-1, 1]; 0.0 when either vector has zero norm

    Raises:
        DimensionMismatchError: If the lengths differ or either vector is empty
    """
    a_arr, b_arr = _as_float32(a), _as_float32(b)
    if a_arr.ndim != 1 or b_arr.ndim != 1 or len(a_arr) != len(b_arr) or len(a_arr) == 0:
        raise DimensionMismatchError(a_arr.size, b_arr.size)

    a_norm = np.linalg.norm(a_arr)
    b_norm = np.linalg.norm(b_arr)
    if a_norm == 0 or b_norm == 0:
        return 0.0

    similarity = np.float32(np.dot(a_arr, b_arr)) / np.float32(a_norm * b_norm)
    # Rounding can push identical vectors a hair past 1.0
    return float(np.clip(similarity, -1.0, 1.0))
