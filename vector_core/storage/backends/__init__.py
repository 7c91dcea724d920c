"""
Storage backend implementations.
"""

from .json_file import JsonFileStorage

__all__ = ['JsonFileStorage']
