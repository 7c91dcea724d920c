"""
Document store: collections, the database registry and their wiring.
"""

from .collection import Collection
from .database import Database, validate_collection_name
from .factory import create_configured_provider, create_database
from .rwlock import ReadWriteLock

__all__ = [
    "Collection",
    "Database",
    "ReadWriteLock",
    "create_configured_provider",
    "create_database",
    "validate_collection_name",
]
