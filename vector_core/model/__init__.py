from .document import Document, QueryResult, to_embedding

__all__ = ["Document", "QueryResult", "to_embedding"]
