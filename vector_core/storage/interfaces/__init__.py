"""
Storage interfaces for the vector engine.

This module defines abstract base classes that all storage implementations
must implement to ensure consistent behavior across different backends.
"""

from .collection_storage_interface import CollectionStorageInterface, PersistedCollection

__all__ = ['CollectionStorageInterface', 'PersistedCollection']
