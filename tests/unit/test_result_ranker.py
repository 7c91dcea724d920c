"""
Tests for bounded top-K result selection.
"""
import random

import pytest

from vector_core.model import QueryResult
from vector_core.query.result_ranker import top_k


def _result(doc_id, similarity):
    return QueryResult(id=doc_id, content="", metadata={}, similarity=similarity)


class TestTopK:
    """Test ordering and bounds of top_k."""

    def test_orders_by_similarity_descending(self):
        results = [_result("a", 0.1), _result("b", 0.9), _result("c", 0.5)]
        assert [r.id for r in top_k(results, 3)] == ["b", "c", "a"]

    def test_ties_broken_by_ascending_id(self):
        results = [_result("z", 0.5), _result("m", 0.5), _result("a", 0.5), _result("q", 0.7)]
        assert [r.id for r in top_k(results, 4)] == ["q", "a", "m", "z"]

    def test_returns_at_most_k(self):
        results = [_result(str(i), i / 10) for i in range(10)]
        top = top_k(results, 3)
        assert [r.id for r in top] == ["9", "8", "7"]

    def test_fewer_candidates_than_k(self):
        assert len(top_k([_result("a", 0.3)], 5)) == 1
        assert top_k([], 5) == []

    def test_matches_full_sort(self):
        rng = random.Random(7)
        results = [_result(f"id-{i:03d}", round(rng.uniform(-1, 1), 2)) for i in range(200)]
        expected = sorted(results, key=lambda r: (-r.similarity, r.id))[:15]
        assert top_k(iter(results), 15) == expected

    def test_rejects_non_positive_k(self):
        with pytest.raises(ValueError):
            top_k([_result("a", 0.1)], 0)
