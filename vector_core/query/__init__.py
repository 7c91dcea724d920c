"""
Query-time building blocks: similarity math, filters and top-K ranking.
"""

from .vector_math import dot, norm, cosine_similarity
from .filter_engine import (
    CONTAINS_OPERATOR,
    matches_metadata,
    matches_content,
    validate_metadata_filter,
    validate_content_filter,
)
from .result_ranker import top_k, ranking_key

__all__ = [
    "dot",
    "norm",
    "cosine_similarity",
    "CONTAINS_OPERATOR",
    "matches_metadata",
    "matches_content",
    "validate_metadata_filter",
    "validate_content_filter",
    "top_k",
    "ranking_key",
]
