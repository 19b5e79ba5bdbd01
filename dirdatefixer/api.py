"""High-level API for DirDateFixer.

This module provides simple, functional interfaces for the common cases.
These functions wrap TreeDateReconciler for callers who do not need to
build one themselves.
"""

from pathlib import Path, PurePath
from typing import Callable, Optional, Set, Union

from ._common.config import ReconcileConfig
from .core.adapter import TimestampAdapter
from .core.node import ReconcileSummary
from .core.reconciler import TreeDateReconciler
from .error_policies import ErrorPolicy


def fix_directory_dates(
    source_root: Union[str, PurePath],
    target_root: Union[str, PurePath],
    commit: bool = False,
    adapter: Optional[TimestampAdapter] = None,
    output: Optional[Callable[[str], None]] = None,
    error_policy: Optional[ErrorPolicy] = None,
    follow_symlinks: bool = True,
    include_hidden: bool = True,
    exclude_dirs: Optional[Set[str]] = None,
    verbose: bool = True,
) -> ReconcileSummary:
    """Copy directory dates from a source tree onto its copy.

    Args:
        source_root: Root of the tree with the correct dates
        target_root: Root of the copied tree
        commit: Actually overwrite target dates (default is a dry run)
        adapter: Storage adapter (defaults to the local filesystem)
        output: Receives one diagnostic string per directory pair
        error_policy: What to do when reading/writing metadata fails
        follow_symlinks: Treat symlinked directories as children
        include_hidden: Include dot-directories
        exclude_dirs: Directory names to skip on both sides
        verbose: Print warnings for metadata failures

    Returns:
        ReconcileSummary with counters for the run

    Example:
        >>> summary = fix_directory_dates("/data/src", "/backup/src")
        >>> summary.mismatched
        3
    """
    config = ReconcileConfig(
        follow_symlinks=follow_symlinks,
        include_hidden=include_hidden,
        exclude_dirs=set(exclude_dirs or ()),
        verbose=verbose,
    )
    problems = config.validate()
    if problems:
        raise ValueError("; ".join(problems))

    reconciler = TreeDateReconciler(
        adapter=adapter,
        output=output,
        error_policy=error_policy,
        config=config,
    )
    return reconciler.reconcile(source_root, target_root, commit)


def drive_directory(drive: str, subdirectory_name: str) -> Path:
    """Build ``<drive>:/<subdirectory_name>`` from a Windows drive letter.

    Args:
        drive: Drive letter, with or without the colon (case doesn't matter)
        subdirectory_name: Directory below the drive root

    Returns:
        Path such as ``E:/Photos``
    """
    letter = drive.strip().rstrip(':')
    if len(letter) != 1 or not letter.isalpha():
        raise ValueError(f"Not a drive letter: {drive!r}")
    return Path(f"{letter}:/{subdirectory_name.lstrip('/')}")


def reconcile_drive_letters(
    source_drive: str,
    target_drive: str,
    subdirectory_name: str,
    commit: bool = False,
    **kwargs,
) -> ReconcileSummary:
    """Reconcile the same subdirectory on two drives.

    Only meaningful on Windows, where drives have letters. Makes repeated
    runs over top-level directories of two disks easier to type.

    Args:
        source_drive: Letter of the drive with the correct dates
        target_drive: Letter of the drive with the copy
        subdirectory_name: Directory to reconcile on both drives
        commit: Actually overwrite target dates
        **kwargs: Passed to fix_directory_dates

    Returns:
        ReconcileSummary with counters for the run
    """
    return fix_directory_dates(
        drive_directory(source_drive, subdirectory_name),
        drive_directory(target_drive, subdirectory_name),
        commit=commit,
        **kwargs,
    )
