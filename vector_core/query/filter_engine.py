"""
Metadata and content filters applied during similarity queries.

Two filter shapes are supported:

- ``where``: a mapping of metadata key to expected value. A document matches
  when every key is present with an exactly equal value.
- ``where_document``: a mapping with the single key ``$contains`` whose value
  must occur as a substring of the document content (case-sensitive).
"""

from typing import Mapping, Optional

from vector_core.core.exceptions import InvalidFilterError
from vector_core.model.document import Document

CONTAINS_OPERATOR = "$contains"


def validate_metadata_filter(where: Optional[Mapping[str, str]]) -> None:
    """
    Check that a metadata filter maps strings to strings.

    Raises:
        InvalidFilterError: If the filter is not a mapping of strings
    """
    if not where:
        return
    if not isinstance(where, Mapping):
        raise InvalidFilterError(f"Metadata filter must be a mapping, got {type(where).__name__}")
    for key, value in where.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise InvalidFilterError(
                f"Metadata filter entries must be strings, got {key!r}: {value!r}"
            )


def validate_content_filter(where_document: Optional[Mapping[str, str]]) -> None:
    """
    Check that a content filter only uses the ``$contains`` operator.

    Raises:
        InvalidFilterError: If an unknown key or a non-string value is present
    """
    if not where_document:
        return
    if not isinstance(where_document, Mapping):
        raise InvalidFilterError(
            f"Content filter must be a mapping, got {type(where_document).__name__}"
        )
    for key, value in where_document.items():
        if key != CONTAINS_OPERATOR:
            raise InvalidFilterError(
                f"Unsupported content filter operator: {key!r}. "
                f"Only {CONTAINS_OPERATOR!r} is supported"
            )
        if not isinstance(value, str):
            raise InvalidFilterError(f"{CONTAINS_OPERATOR} value must be a string, got {value!r}")


def matches_metadata(doc: Document, where: Optional[Mapping[str, str]]) -> bool:
    """Return True if every filter key is present in the metadata with an equal value."""
    if not where:
        return True
    metadata = doc.metadata
    for key, expected in where.items():
        if key not in metadata or metadata[key] != expected:
            return False
    return True


def matches_content(doc: Document, where_document: Optional[Mapping[str, str]]) -> bool:
    """Return True if the document content contains the ``$contains`` substring."""
    if not where_document:
        return True
    needle = where_document.get(CONTAINS_OPERATOR)
    if needle is None:
        return True
    return needle in doc.content
