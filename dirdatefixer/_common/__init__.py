"""Common components shared by the reconciler, adapters and CLI.

This internal package contains non-I/O code: configuration classes and
pure formatting helpers. It should NOT be imported directly by users.

Important: This package must NEVER import from core or adapters to avoid
circular dependencies.
"""

from .config import ReconcileConfig, TimestampField
from .formatting import DATE_DISPLAY_FORMAT, format_timestamp

__all__ = [
    'ReconcileConfig',
    'TimestampField',
    'DATE_DISPLAY_FORMAT',
    'format_timestamp',
]
