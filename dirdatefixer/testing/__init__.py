"""Testing utilities for DirDateFixer consumers."""

from .fixtures import InMemoryTimestampAdapter

__all__ = ['InMemoryTimestampAdapter']
