"""
JSON file storage backend implementation.

This module provides a lightweight JSON file-based implementation of the
collection storage interface: one directory per collection, one file per
document.
"""

from .json_file_storage import JsonFileStorage

__all__ = ['JsonFileStorage']
