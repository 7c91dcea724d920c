"""
Tests for the Document and QueryResult data model.
"""
import numpy as np
import pytest

from vector_core.model import Document, QueryResult, to_embedding


class TestDocument:
    """Test Document construction and conversion."""

    def test_embedding_is_float32_copy(self):
        source = np.array([1.0, 2.0, 3.0], dtype=np.float64)
        document = Document(id="d1", content="text", embedding=source)

        assert document.embedding.dtype == np.float32
        assert document.dimension == 3
        source[0] = 99.0
        assert document.embedding[0] == 1.0

    def test_embedding_is_read_only(self):
        document = Document(id="d1", embedding=[1.0, 2.0])
        with pytest.raises(ValueError):
            document.embedding[0] = 5.0

    def test_metadata_is_copied(self):
        metadata = {"category": "backend"}
        document = Document(id="d1", metadata=metadata)
        metadata["category"] = "frontend"
        assert document.metadata == {"category": "backend"}

    def test_defaults(self):
        document = Document(id="d1")
        assert document.content == ""
        assert document.embedding is None
        assert document.dimension is None
        assert document.metadata == {}

    def test_rejects_non_string_metadata(self):
        with pytest.raises(ValueError):
            Document(id="d1", metadata={"rank": 1})

    def test_rejects_non_string_id(self):
        with pytest.raises(ValueError):
            Document(id=42)

    def test_rejects_multi_dimensional_embedding(self):
        with pytest.raises(ValueError):
            Document(id="d1", embedding=[[1.0, 2.0], [3.0, 4.0]])

    def test_rejects_non_finite_embedding(self):
        with pytest.raises(ValueError):
            Document(id="d1", embedding=[float("nan"), 0.0])
        with pytest.raises(ValueError):
            Document(id="d1", embedding=[1.0, float("-inf")])
        with pytest.raises(ValueError):
            Document(id="d1", embedding=[1.0, 0.0]).with_embedding([float("inf"), 0.0])

    def test_is_immutable(self):
        document = Document(id="d1", content="text")
        with pytest.raises(AttributeError):
            document.content = "changed"

    def test_with_embedding(self):
        document = Document(id="d1", content="text", metadata={"k": "v"})
        embedded = document.with_embedding([0.5, 0.5])

        assert embedded.id == "d1"
        assert embedded.content == "text"
        assert embedded.metadata == {"k": "v"}
        np.testing.assert_array_equal(embedded.embedding, [0.5, 0.5])
        assert document.embedding is None

    def test_dict_conversion(self):
        document = Document(id="d1", content="text", embedding=[0.25, 0.5],
                            metadata={"k": "v"})
        data = document.to_dict()

        assert data == {
            "id": "d1",
            "content": "text",
            "embedding": [0.25, 0.5],
            "metadata": {"k": "v"},
        }
        restored = Document.from_dict(data)
        assert restored.id == "d1"
        np.testing.assert_array_equal(restored.embedding, document.embedding)


class TestQueryResult:
    """Test QueryResult serialization."""

    def test_to_dict(self):
        result = QueryResult(id="d1", content="text", metadata={"k": "v"}, similarity=0.75)
        assert result.to_dict() == {
            "id": "d1",
            "content": "text",
            "metadata": {"k": "v"},
            "similarity": 0.75,
        }


def test_to_embedding_empty():
    assert to_embedding([]).shape == (0,)
