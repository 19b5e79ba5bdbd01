"""Core components: data types, the adapter interface and the reconciler."""

from .node import DirectoryPair, TimestampSnapshot, MismatchReport, ReconcileSummary
from .adapter import TimestampAdapter
from .reconciler import TreeDateReconciler

__all__ = [
    'DirectoryPair',
    'TimestampSnapshot',
    'MismatchReport',
    'ReconcileSummary',
    'TimestampAdapter',
    'TreeDateReconciler',
]
