"""
Tests for the vector math routines.
"""
import numpy as np
import pytest

from vector_core.core.exceptions import DimensionMismatchError
from vector_core.query.vector_math import cosine_similarity, dot, norm


class TestVectorMath:
    """Test dot, norm and cosine similarity."""

    def test_dot_and_norm(self):
        assert dot([1, 2, 3], [4, 5, 6]) == pytest.approx(32.0)
        assert norm([3, 4]) == pytest.approx(5.0)

    def test_dot_rejects_unequal_lengths(self):
        with pytest.raises(DimensionMismatchError):
            dot([1, 2], [1, 2, 3])

    def test_identical_vectors(self):
        assert cosine_similarity([0.2, 0.4, 0.4], [0.2, 0.4, 0.4]) == pytest.approx(1.0)

    def test_opposite_and_orthogonal_vectors(self):
        assert cosine_similarity([1, 0], [-1, 0]) == pytest.approx(-1.0)
        assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)

    def test_scale_invariance(self):
        assert cosine_similarity([1, 2, 3], [10, 20, 30]) == pytest.approx(1.0, abs=1e-6)

    def test_known_value(self):
        assert cosine_similarity([1, 0, 0, 0], [0.9, 0.1, 0, 0]) == pytest.approx(0.994, abs=1e-3)

    def test_zero_norm_yields_zero(self):
        assert cosine_similarity([0, 0, 0], [1, 2, 3]) == 0.0
        assert cosine_similarity([1, 2, 3], [0, 0, 0]) == 0.0

    def test_mismatched_lengths(self):
        with pytest.raises(DimensionMismatchError) as exc_info:
            cosine_similarity([1, 0, 0], [1, 0])
        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 2

    def test_empty_vectors(self):
        with pytest.raises(DimensionMismatchError):
            cosine_similarity([], [])

    def test_inputs_are_not_modified(self):
        a = np.array([3.0, 4.0], dtype=np.float32)
        b = np.array([1.0, 1.0], dtype=np.float32)
        cosine_similarity(a, b)
        np.testing.assert_array_equal(a, [3.0, 4.0])
        np.testing.assert_array_equal(b, [1.0, 1.0])

    def test_result_is_clipped(self):
        v = [0.1] * 384
        assert cosine_similarity(v, v) <= 1.0
