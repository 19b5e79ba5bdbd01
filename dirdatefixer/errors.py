"""Exception types for DirDateFixer.

A directory present on only one side of the walk is NOT an error: it is
reported as a diagnostic and never raised.
"""

from pathlib import PurePath
from typing import Optional, Union


class DirDateFixerError(Exception):
    """Base class for all DirDateFixer errors."""
    pass


class MetadataReadError(DirDateFixerError):
    """Reading a directory listing or its timestamps failed."""

    def __init__(self, path: Union[str, PurePath], cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        message = f"Cannot read metadata of '{path}'"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class MetadataWriteError(DirDateFixerError):
    """Writing one timestamp of a directory failed."""

    def __init__(self,
                 path: Union[str, PurePath],
                 field: str,
                 cause: Optional[BaseException] = None):
        self.path = path
        self.field = field
        self.cause = cause
        message = f"Cannot set {field} time of '{path}'"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class UnsupportedMetadataOperation(MetadataWriteError):
    """The platform or filesystem cannot set this timestamp at all."""
    pass
