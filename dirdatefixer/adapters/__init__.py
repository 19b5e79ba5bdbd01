"""Timestamp adapters for specific storage backends.

Adapters implement the TimestampAdapter interface so the reconciler can
work against any tree of directories with timestamps.
"""

from .filesystem import FileSystemTimestampAdapter

__all__ = [
    "FileSystemTimestampAdapter",
]
