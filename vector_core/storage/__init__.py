"""
Storage layer for the vector engine.

This module provides the abstract collection storage interface and its
JSON file backend.
"""

from .interfaces.collection_storage_interface import CollectionStorageInterface, PersistedCollection
from .backends.json_file import JsonFileStorage

__all__ = [
    "CollectionStorageInterface",
    "PersistedCollection",
    "JsonFileStorage",
]
