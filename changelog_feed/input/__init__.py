"""
Input loading for the changelog document.
"""

from .source import SourceError, read_source

__all__ = ["SourceError", "read_source"]
