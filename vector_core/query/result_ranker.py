"""
Bounded top-K selection for similarity query results.

Results are ordered by similarity descending, then by document ID ascending so
that equal scores always come back in the same order.
"""

import heapq
from typing import Iterable, List, Tuple

from vector_core.model.document import QueryResult


def ranking_key(result: QueryResult) -> Tuple[float, str]:
    """Sort key placing the best result first."""
    return (-result.similarity, result.id)


def top_k(results: Iterable[QueryResult], k: int) -> List[QueryResult]:
    """
    Select the ``k`` best results without sorting the whole input.

    ``heapq.nsmallest`` keeps a heap of at most ``k`` entries while consuming the
    iterable, so memory and time stay proportional to ``n log k``.

    Args:
        results: Scored candidates in any order
        k: Maximum number of results to return (must be >= 1)

    Returns:
        Up to ``k`` results in ranked order
    """
    if k < 1:
        raise ValueError(f"k must be at least 1, got {k}")
    return heapq.nsmallest(k, results, key=ranking_key)
