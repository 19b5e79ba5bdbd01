"""Configuration system for DirDateFixer.

This module defines how callers tune a reconciliation run: how the
directory trees are listed and how metadata failures are treated.
Whether a run commits changes is NOT part of the configuration; it is
passed explicitly on every call.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Set, List


class TimestampField(Enum):
    """The directory timestamps that are reconciled.

    Values are the labels used in diagnostic output.
    """
    MODIFIED = "lastModified"
    CREATED = "created"


@dataclass
class ReconcileConfig:
    """Complete configuration for a reconciliation run."""

    # Listing behaviour
    follow_symlinks: bool = True   # Symlinked directories count as children
    include_hidden: bool = True    # Include dot-directories
    exclude_dirs: Set[str] = field(default_factory=set)  # Names never descended into

    # Error handling
    verbose: bool = True               # Print WARNING lines for metadata failures
    fail_fast: bool = False            # Abort the walk on the first failure
    max_errors: Optional[int] = None   # Abort once this many failures were seen

    @classmethod
    def quiet(cls) -> 'ReconcileConfig':
        """Create config that records failures without printing them."""
        return cls(verbose=False)

    @classmethod
    def strict(cls) -> 'ReconcileConfig':
        """Create config that stops at the first metadata failure."""
        return cls(fail_fast=True)

    @classmethod
    def no_symlinks(cls) -> 'ReconcileConfig':
        """Create config that ignores symlinked directories.

        Useful when either tree may contain a symlink cycle.
        """
        return cls(follow_symlinks=False)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.max_errors is not None and self.max_errors < 0:
            errors.append("max_errors cannot be negative")

        if self.fail_fast and self.max_errors is not None:
            errors.append("fail_fast and max_errors are mutually exclusive")

        for name in self.exclude_dirs:
            if not name or '/' in name or '\\' in name:
                errors.append(f"exclude_dirs entries must be plain names: {name!r}")

        return errors
