"""
Tests for metadata and content filters.
"""
import pytest

from vector_core.core.exceptions import InvalidFilterError
from vector_core.model import Document
from vector_core.query.filter_engine import (
    matches_content,
    matches_metadata,
    validate_content_filter,
    validate_metadata_filter,
)


@pytest.fixture
def document():
    return Document(
        id="doc-1",
        content="The quick brown fox",
        embedding=[1.0, 0.0],
        metadata={"category": "animals", "lang": "en"},
    )


class TestMetadataFilter:
    """Test equality matching on document metadata."""

    def test_empty_filter_matches(self, document):
        assert matches_metadata(document, None)
        assert matches_metadata(document, {})

    def test_single_key(self, document):
        assert matches_metadata(document, {"category": "animals"})
        assert not matches_metadata(document, {"category": "plants"})

    def test_all_keys_must_match(self, document):
        assert matches_metadata(document, {"category": "animals", "lang": "en"})
        assert not matches_metadata(document, {"category": "animals", "lang": "de"})

    def test_missing_key_does_not_match(self, document):
        assert not matches_metadata(document, {"author": "someone"})

    def test_comparison_is_exact(self, document):
        assert not matches_metadata(document, {"category": "Animals"})

    def test_validation_rejects_non_strings(self):
        with pytest.raises(InvalidFilterError):
            validate_metadata_filter({"rank": 1})
        with pytest.raises(InvalidFilterError):
            validate_metadata_filter({1: "one"})
        with pytest.raises(InvalidFilterError):
            validate_metadata_filter(["category"])

    def test_validation_accepts_strings(self):
        validate_metadata_filter({"category": "backend"})
        validate_metadata_filter(None)


class TestContentFilter:
    """Test the $contains substring filter."""

    def test_empty_filter_matches(self, document):
        assert matches_content(document, None)
        assert matches_content(document, {})

    def test_contains(self, document):
        assert matches_content(document, {"$contains": "brown"})
        assert not matches_content(document, {"$contains": "lazy"})

    def test_contains_is_case_sensitive(self, document):
        assert not matches_content(document, {"$contains": "Brown"})

    def test_unknown_operator_rejected(self):
        with pytest.raises(InvalidFilterError):
            validate_content_filter({"$regex": "fox"})
        with pytest.raises(InvalidFilterError):
            validate_content_filter({"$contains": "fox", "$not_contains": "dog"})

    def test_non_string_value_rejected(self):
        with pytest.raises(InvalidFilterError):
            validate_content_filter({"$contains": 3})
