"""TimestampAdapter abstraction for DirDateFixer.

The reconciler never touches the filesystem directly. Everything it needs
to know about a directory (does it exist, what subdirectories does it
have, what are its timestamps) and every change it makes goes through a
TimestampAdapter. This keeps the walk testable against an in-memory tree
and lets platform-specific metadata handling live in one place.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import PurePath
from typing import Iterator

from ..errors import UnsupportedMetadataOperation
from .node import TimestampSnapshot


class TimestampAdapter(ABC):
    """Abstract adapter for reading and writing directory timestamps.

    Adapters raise ``MetadataReadError`` / ``MetadataWriteError`` (or
    ``UnsupportedMetadataOperation``) on failure. The reconciler hands
    those to its error policy; adapters should not swallow them.
    """

    @abstractmethod
    def exists(self, path: PurePath) -> bool:
        """Check if a directory exists at ``path``.

        A path naming anything other than a directory is reported as
        absent.
        """
        pass

    @abstractmethod
    def list_subdirectories(self, path: PurePath) -> Iterator[str]:
        """Get the names of the immediate subdirectories of ``path``.

        Files are never included.

        Args:
            path: An existing directory

        Returns:
            Iterator yielding child directory names

        Raises:
            MetadataReadError: If the directory cannot be listed
        """
        pass

    @abstractmethod
    def read_timestamps(self, path: PurePath) -> TimestampSnapshot:
        """Read the modification and creation time of a directory.

        Raises:
            MetadataReadError: If the metadata cannot be read
        """
        pass

    @abstractmethod
    def set_modified(self, path: PurePath, value: datetime) -> None:
        """Overwrite the modification time of a directory.

        Raises:
            MetadataWriteError: If the write fails
        """
        pass

    def set_created(self, path: PurePath, value: datetime) -> None:
        """Overwrite the creation time of a directory.

        Default implementation reports the operation as unsupported.
        Adapters that can do it override this and
        ``supports_creation_time_write``.

        Raises:
            UnsupportedMetadataOperation: If creation time is not settable
            MetadataWriteError: If the write fails
        """
        raise UnsupportedMetadataOperation(
            path, "created",
            NotImplementedError(f"{self.__class__.__name__} cannot set creation time"))

    # Capability flags - adapters declare what they support

    def supports_creation_time_read(self) -> bool:
        """Check if creation times come from real creation metadata.

        When False, ``read_timestamps`` substitutes an implementation
        specific value (usually the modification time).
        """
        return True

    def supports_creation_time_write(self) -> bool:
        """Check if ``set_created`` can succeed on this platform."""
        return False
