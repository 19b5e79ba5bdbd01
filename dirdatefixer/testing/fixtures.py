"""Test fixtures for DirDateFixer consumers.

InMemoryTimestampAdapter is a complete TimestampAdapter backed by a dict.
It lets tests build source/target trees with exact timestamps, inject
failures for specific directories, and inspect every write the reconciler
made, without touching the real filesystem (where creation time often
cannot be set at all).

Example:
    fs = InMemoryTimestampAdapter()
    fs.add_directory("/src/a", modified=datetime(2023, 1, 1))
    fs.add_directory("/dst/a", modified=datetime(2024, 6, 15, 14, 30, 22))
    TreeDateReconciler(adapter=fs, output=lines.append).reconcile("/src", "/dst", commit=True)
    assert fs.timestamps("/dst/a").modified == datetime(2023, 1, 1)
"""

from datetime import datetime
from pathlib import PurePath, PurePosixPath
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple, Union

from .._common.config import TimestampField
from ..core.adapter import TimestampAdapter
from ..core.node import TimestampSnapshot
from ..errors import MetadataReadError, MetadataWriteError, UnsupportedMetadataOperation

PathLike = Union[str, PurePath]

DEFAULT_TIME = datetime(2000, 1, 1)


def _key(path: PathLike) -> PurePosixPath:
    return PurePosixPath(PurePath(path).as_posix())


class InMemoryTimestampAdapter(TimestampAdapter):
    """Dict-backed directory tree with timestamps."""

    def __init__(self, creation_time_writable: bool = True, creation_time_readable: bool = True):
        """Initialize an empty tree.

        Args:
            creation_time_writable: When False, set_created raises
                UnsupportedMetadataOperation like on Linux
            creation_time_readable: When False, the adapter reports that
                creation times are stand-ins, like on Linux
        """
        self.creation_time_writable = creation_time_writable
        self.creation_time_readable = creation_time_readable
        self.directories: Dict[PurePosixPath, TimestampSnapshot] = {}
        self.files: Set[PurePosixPath] = set()
        self.writes: List[Tuple[PurePosixPath, TimestampField, datetime]] = []
        self.reads: List[PurePosixPath] = []
        self._children: Dict[PurePosixPath, List[str]] = {}
        self._exists_failures: Dict[PurePosixPath, Exception] = {}
        self._read_failures: Dict[PurePosixPath, Exception] = {}
        self._list_failures: Dict[PurePosixPath, Exception] = {}
        self._write_failures: Dict[Tuple[PurePosixPath, TimestampField], Exception] = {}

    # Building the tree

    def add_directory(self,
                      path: PathLike,
                      modified: datetime = DEFAULT_TIME,
                      created: Optional[datetime] = None) -> None:
        """Add a directory, creating missing ancestors with the same times.

        Args:
            path: Absolute path of the directory
            modified: Modification time
            created: Creation time (defaults to ``modified``)
        """
        key = _key(path)
        snapshot = TimestampSnapshot(modified=modified, created=created or modified)
        missing = [key]
        for parent in key.parents:
            if parent in self.directories or parent == PurePosixPath(parent.anchor):
                break
            missing.append(parent)
        for directory in reversed(missing):
            if directory not in self.directories:
                self.directories[directory] = snapshot
                self._children[directory] = []
                parent = directory.parent
                if parent != directory and parent in self._children:
                    self._children[parent].append(directory.name)
        self.directories[key] = snapshot

    def add_tree(self,
                 root: PathLike,
                 relative_paths: Iterable[str],
                 modified: datetime = DEFAULT_TIME,
                 created: Optional[datetime] = None) -> None:
        """Add a root and a set of directories below it, all with the same times."""
        self.add_directory(root, modified, created)
        for relative in relative_paths:
            self.add_directory(_key(root) / relative, modified, created)

    def add_file(self, path: PathLike) -> None:
        """Add a regular file; files are never listed as children."""
        key = _key(path)
        if key.parent not in self.directories:
            self.add_directory(key.parent)
        self.files.add(key)

    # Failure injection

    def fail_exists(self, path: PathLike, error: Optional[Exception] = None) -> None:
        self._exists_failures[_key(path)] = error or PermissionError(13, "Permission denied", str(path))

    def fail_reads(self, path: PathLike, error: Optional[Exception] = None) -> None:
        self._read_failures[_key(path)] = error or PermissionError(13, "Permission denied", str(path))

    def fail_listing(self, path: PathLike, error: Optional[Exception] = None) -> None:
        self._list_failures[_key(path)] = error or PermissionError(13, "Permission denied", str(path))

    def fail_writes(self,
                    path: PathLike,
                    field: TimestampField,
                    error: Optional[Exception] = None) -> None:
        self._write_failures[(_key(path), field)] = error or PermissionError(
            13, "Permission denied", str(path))

    # Inspection

    def timestamps(self, path: PathLike) -> TimestampSnapshot:
        return self.directories[_key(path)]

    def state(self) -> Dict[PurePosixPath, TimestampSnapshot]:
        """Copy of every directory's timestamps, for before/after comparison."""
        return dict(self.directories)

    def writes_to(self, path: PathLike) -> List[TimestampField]:
        key = _key(path)
        return [field for written, field, _ in self.writes if written == key]

    # TimestampAdapter interface

    def exists(self, path: PurePath) -> bool:
        key = _key(path)
        if key in self._exists_failures:
            raise MetadataReadError(path, self._exists_failures[key])
        return key in self.directories

    def list_subdirectories(self, path: PurePath) -> Iterator[str]:
        key = _key(path)
        if key in self._list_failures:
            raise MetadataReadError(path, self._list_failures[key])
        return iter(list(self._children.get(key, [])))

    def read_timestamps(self, path: PurePath) -> TimestampSnapshot:
        key = _key(path)
        self.reads.append(key)
        if key in self._read_failures:
            raise MetadataReadError(path, self._read_failures[key])
        return self.directories[key]

    def set_modified(self, path: PurePath, value: datetime) -> None:
        self._write(path, TimestampField.MODIFIED, value)

    def set_created(self, path: PurePath, value: datetime) -> None:
        if not self.creation_time_writable:
            raise UnsupportedMetadataOperation(
                path, "created", NotImplementedError("creation time is not settable"))
        self._write(path, TimestampField.CREATED, value)

    def supports_creation_time_read(self) -> bool:
        return self.creation_time_readable

    def supports_creation_time_write(self) -> bool:
        return self.creation_time_writable

    def _write(self, path: PurePath, field: TimestampField, value: datetime) -> None:
        key = _key(path)
        if (key, field) in self._write_failures:
            raise MetadataWriteError(path, field.value, self._write_failures[(key, field)])
        current = self.directories[key]
        if field is TimestampField.MODIFIED:
            self.directories[key] = TimestampSnapshot(modified=value, created=current.created)
        else:
            self.directories[key] = TimestampSnapshot(modified=current.modified, created=value)
        self.writes.append((key, field, value))
