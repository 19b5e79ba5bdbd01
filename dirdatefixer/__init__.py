"""DirDateFixer - Restore directory dates on a copied tree.

Copying a directory tree usually preserves file dates but not directory
dates. DirDateFixer walks the original ("source") tree and the copy
("target") side by side and overwrites each target directory's
modification and creation time with the source's when they differ.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
Report only:
    from dirdatefixer import fix_directory_dates
    fix_directory_dates("/data/photos", "/backup/photos")

Apply changes:
    fix_directory_dates("/data/photos", "/backup/photos", commit=True)
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from ._common.config import ReconcileConfig, TimestampField
from ._common.formatting import format_timestamp
from .core import (
    DirectoryPair,
    TimestampSnapshot,
    MismatchReport,
    ReconcileSummary,
    TimestampAdapter,
    TreeDateReconciler,
)
from .adapters import FileSystemTimestampAdapter
from .errors import (
    DirDateFixerError,
    MetadataReadError,
    MetadataWriteError,
    UnsupportedMetadataOperation,
)
from .error_policies import (
    ErrorPolicy,
    FailFastPolicy,
    ContinueOnErrorsPolicy,
    CollectErrorsPolicy,
    ThresholdPolicy,
)
from .api import fix_directory_dates, reconcile_drive_letters

__all__ = [
    "__version__",
    # Core
    "DirectoryPair",
    "TimestampSnapshot",
    "MismatchReport",
    "ReconcileSummary",
    "TimestampAdapter",
    "TreeDateReconciler",
    "FileSystemTimestampAdapter",
    # Config
    "ReconcileConfig",
    "TimestampField",
    "format_timestamp",
    # Errors
    "DirDateFixerError",
    "MetadataReadError",
    "MetadataWriteError",
    "UnsupportedMetadataOperation",
    "ErrorPolicy",
    "FailFastPolicy",
    "ContinueOnErrorsPolicy",
    "CollectErrorsPolicy",
    "ThresholdPolicy",
    # API
    "fix_directory_dates",
    "reconcile_drive_letters",
]
