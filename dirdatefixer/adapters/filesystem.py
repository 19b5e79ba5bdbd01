"""Filesystem adapter for DirDateFixer.

This adapter reads and writes directory timestamps on the local
filesystem. Modification time is handled with ``os.stat``/``os.utime`` on
every platform; creation time is platform specific:

- Windows: read from ``st_birthtime`` (Python 3.12+) or ``st_ctime``,
  written through ``SetFileTime``.
- macOS/BSD: read from ``st_birthtime``, written with the ``SetFile`` tool
  (Xcode command line tools) where installed.
- Linux and others: birth time is not exposed by ``os.stat`` and cannot be
  set; the modification time stands in for it when read, and writes raise
  ``UnsupportedMetadataOperation``.
"""

import errno
import logging
import os
import platform
import shutil
import stat
import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path, PurePath
from typing import Iterator, Optional, Set

from ..core.adapter import TimestampAdapter
from ..core.node import TimestampSnapshot
from ..errors import MetadataReadError, MetadataWriteError, UnsupportedMetadataOperation

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Windows FILETIME: 100-nanosecond intervals since 1601-01-01 UTC
_WIN_EPOCH_OFFSET = 11644473600  # seconds from 1601 to 1970

# stat() errors that mean "nothing there", the same set pathlib ignores
_ABSENT_ERRNOS = (errno.ENOENT, errno.ENOTDIR, errno.EBADF, errno.ELOOP)
# ERROR_NOT_READY, ERROR_INVALID_NAME, ERROR_CANT_RESOLVE_FILENAME
_ABSENT_WINERRORS = (21, 123, 1921)


def datetime_from_ns(ns: int) -> datetime:
    """Convert nanoseconds since the epoch to an aware UTC datetime.

    Precision is truncated to microseconds, the resolution of datetime.
    """
    return EPOCH + timedelta(microseconds=ns // 1000)


def datetime_to_ns(value: datetime) -> int:
    """Convert a datetime to nanoseconds since the epoch.

    Naive datetimes are taken to be local time.
    """
    delta = value.astimezone(timezone.utc) - EPOCH
    return ((delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds) * 1000


def _birthtime_ns(st: os.stat_result) -> Optional[int]:
    """Native creation time from a stat result, if the platform has one."""
    birth_ns = getattr(st, 'st_birthtime_ns', None)
    if birth_ns is not None:
        return birth_ns
    birth = getattr(st, 'st_birthtime', None)
    if birth is not None:
        return int(birth * 1_000_000) * 1000
    if os.name == 'nt':
        # Before 3.12 st_ctime is the creation time on Windows
        return st.st_ctime_ns
    return None


def _set_creation_time_windows(path: Path, ns: int) -> None:
    """Set directory creation time on Windows using SetFileTime."""
    import ctypes
    from ctypes import wintypes

    FILE_WRITE_ATTRIBUTES = 0x0100
    FILE_SHARE_ALL = 0x01 | 0x02 | 0x04
    OPEN_EXISTING = 3
    # Required to open a handle to a directory
    FILE_FLAG_BACKUP_SEMANTICS = 0x02000000
    INVALID_HANDLE_VALUE = wintypes.HANDLE(-1).value

    class FILETIME(ctypes.Structure):
        _fields_ = [("dwLowDateTime", wintypes.DWORD), ("dwHighDateTime", wintypes.DWORD)]

    kernel32 = ctypes.WinDLL('kernel32', use_last_error=True)
    kernel32.CreateFileW.restype = wintypes.HANDLE
    kernel32.CreateFileW.argtypes = [
        wintypes.LPCWSTR, wintypes.DWORD, wintypes.DWORD, wintypes.LPVOID,
        wintypes.DWORD, wintypes.DWORD, wintypes.HANDLE,
    ]
    kernel32.SetFileTime.argtypes = [
        wintypes.HANDLE, ctypes.c_void_p, ctypes.c_void_p, ctypes.c_void_p,
    ]
    kernel32.CloseHandle.argtypes = [wintypes.HANDLE]

    ft = ns // 100 + _WIN_EPOCH_OFFSET * 10_000_000
    creation_time = FILETIME(ft & 0xFFFFFFFF, ft >> 32)

    handle = kernel32.CreateFileW(
        str(path), FILE_WRITE_ATTRIBUTES, FILE_SHARE_ALL, None,
        OPEN_EXISTING, FILE_FLAG_BACKUP_SEMANTICS, None,
    )
    if handle == INVALID_HANDLE_VALUE:
        raise ctypes.WinError(ctypes.get_last_error())
    try:
        # Leave last access and last write untouched by passing None
        if not kernel32.SetFileTime(handle, ctypes.byref(creation_time), None, None):
            raise ctypes.WinError(ctypes.get_last_error())
    finally:
        kernel32.CloseHandle(handle)


def _set_creation_time_macos(setfile: str, path: Path, value: datetime) -> None:
    """Set directory creation time on macOS using SetFile."""
    # SetFile -d expects local time as "MM/DD/YYYY HH:MM:SS"
    date_str = value.astimezone().strftime("%m/%d/%Y %H:%M:%S")
    result = subprocess.run(
        [setfile, "-d", date_str, str(path)],
        capture_output=True,
        text=True,
        timeout=10,
    )
    if result.returncode != 0:
        raise OSError(result.returncode, result.stderr.strip() or "SetFile failed", str(path))


class FileSystemTimestampAdapter(TimestampAdapter):
    """Adapter for directory timestamps on the local filesystem."""

    def __init__(self,
                 follow_symlinks: bool = True,
                 include_hidden: bool = True,
                 exclude_dirs: Optional[Set[str]] = None):
        """Initialize filesystem adapter.

        Args:
            follow_symlinks: Whether symlinked directories are listed as children
            include_hidden: Whether to include hidden directories
            exclude_dirs: Directory names to leave out of every listing
                (e.g., {'.git', '$RECYCLE.BIN'})
        """
        self.follow_symlinks = follow_symlinks
        self.include_hidden = include_hidden
        self.exclude_dirs = exclude_dirs or set()
        self.system = platform.system()
        self._setfile = shutil.which("SetFile") if self.system == "Darwin" else None

    def exists(self, path: PurePath) -> bool:
        """Check for a directory at ``path``.

        Only "no such directory" errors mean absent. Anything else, such as
        a parent that cannot be searched, raises ``MetadataReadError``.
        """
        try:
            st = os.stat(path)
        except OSError as e:
            if e.errno in _ABSENT_ERRNOS or getattr(e, 'winerror', None) in _ABSENT_WINERRORS:
                return False
            raise MetadataReadError(path, e) from e
        return stat.S_ISDIR(st.st_mode)

    def list_subdirectories(self, path: PurePath) -> Iterator[str]:
        """Get names of child directories, sorted for reproducible output."""
        try:
            with os.scandir(path) as entries:
                names = []
                for entry in entries:
                    # Skip hidden directories if configured
                    if not self.include_hidden and entry.name.startswith('.'):
                        continue
                    if entry.name in self.exclude_dirs:
                        continue
                    # Skip symlinks if not following
                    if not self.follow_symlinks and entry.is_symlink():
                        continue
                    if entry.is_dir(follow_symlinks=self.follow_symlinks):
                        names.append(entry.name)
        except OSError as e:
            raise MetadataReadError(path, e) from e
        return iter(sorted(names))

    def read_timestamps(self, path: PurePath) -> TimestampSnapshot:
        try:
            st = os.stat(path)
        except OSError as e:
            raise MetadataReadError(path, e) from e

        created_ns = _birthtime_ns(st)
        if created_ns is None:
            created_ns = st.st_mtime_ns
        return TimestampSnapshot(
            modified=datetime_from_ns(st.st_mtime_ns),
            created=datetime_from_ns(created_ns),
        )

    def set_modified(self, path: PurePath, value: datetime) -> None:
        """Set modification time, keeping the current access time."""
        try:
            st = os.stat(path)
            os.utime(path, ns=(st.st_atime_ns, datetime_to_ns(value)))
        except OSError as e:
            raise MetadataWriteError(path, "lastModified", e) from e
        logger.debug("Set lastModified of %s to %s", path, value)

    def set_created(self, path: PurePath, value: datetime) -> None:
        if not self.supports_creation_time_write():
            reason = f"creation time is not settable on {self.system}"
            if self.system == "Darwin":
                reason += " without SetFile (xcode-select --install)"
            raise UnsupportedMetadataOperation(path, "created", NotImplementedError(reason))

        try:
            if os.name == 'nt':
                _set_creation_time_windows(Path(path), datetime_to_ns(value))
            else:
                _set_creation_time_macos(self._setfile, Path(path), value)
        except (OSError, subprocess.SubprocessError) as e:
            raise MetadataWriteError(path, "created", e) from e
        logger.debug("Set created of %s to %s", path, value)

    def supports_creation_time_read(self) -> bool:
        return os.name == 'nt' or hasattr(os.stat_result, 'st_birthtime')

    def supports_creation_time_write(self) -> bool:
        return os.name == 'nt' or self._setfile is not None

    def __repr__(self) -> str:
        return (f"FileSystemTimestampAdapter(follow_symlinks={self.follow_symlinks!r}, "
                f"include_hidden={self.include_hidden!r})")
