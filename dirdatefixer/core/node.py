"""Data types for a reconciliation run.

Everything here is transient: created while a pair of directories is
visited and discarded with the run. Nothing is cached between visits.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import PurePath
from typing import Any, Dict, List, Optional

from .._common.config import TimestampField


@dataclass(frozen=True)
class DirectoryPair:
    """A source and a target directory at the same relative position.

    Either side may not exist on disk. ``relative`` is the path of the
    pair below the two roots (``.`` for the roots themselves).
    """

    source: PurePath
    target: PurePath
    relative: PurePath = PurePath('.')

    def child(self, name: str) -> 'DirectoryPair':
        """Pair the same-named child on both sides."""
        return DirectoryPair(self.source / name, self.target / name, self.relative / name)


@dataclass(frozen=True)
class TimestampSnapshot:
    """Modification and creation time of one directory."""

    modified: datetime
    created: datetime

    def get(self, field_: TimestampField) -> datetime:
        if field_ is TimestampField.MODIFIED:
            return self.modified
        return self.created


@dataclass
class MismatchReport:
    """Comparison of a source and target snapshot.

    Created for every pair where both directories exist. In commit mode the
    reconciler fills in which fields were actually written and which writes
    failed. With ``compare_created`` False the creation times are carried
    along but never count as a mismatch.
    """

    pair: DirectoryPair
    source: TimestampSnapshot
    target: TimestampSnapshot
    commit: bool
    compare_created: bool = True
    written: List[TimestampField] = field(default_factory=list)
    failed: Dict[TimestampField, Exception] = field(default_factory=dict)

    @property
    def modified_mismatch(self) -> bool:
        return self.source.modified != self.target.modified

    @property
    def created_mismatch(self) -> bool:
        return self.compare_created and self.source.created != self.target.created

    @property
    def has_mismatch(self) -> bool:
        return self.modified_mismatch or self.created_mismatch

    @property
    def mismatched_fields(self) -> List[TimestampField]:
        """Fields that differ, modification time first."""
        fields = []
        if self.modified_mismatch:
            fields.append(TimestampField.MODIFIED)
        if self.created_mismatch:
            fields.append(TimestampField.CREATED)
        return fields

    @property
    def modified_written(self) -> bool:
        return TimestampField.MODIFIED in self.written

    @property
    def created_written(self) -> bool:
        return TimestampField.CREATED in self.written


@dataclass
class ReconcileSummary:
    """Counters for one reconciliation run.

    ``visited`` lists the relative path of every pair in visit order, so
    callers can check that each directory was seen exactly once.
    """

    commit: bool
    matched: int = 0
    mismatched: int = 0
    updated: int = 0
    missing_target: int = 0
    missing_source: int = 0
    errors: int = 0
    visited: List[PurePath] = field(default_factory=list)
    reports: List[MismatchReport] = field(default_factory=list)

    @property
    def visited_count(self) -> int:
        return len(self.visited)

    def report_for(self, relative: Any) -> Optional[MismatchReport]:
        """Find the mismatch report for a relative path, if any."""
        wanted = PurePath(relative)
        for report in self.reports:
            if report.pair.relative == wanted:
                return report
        return None

    def as_dict(self) -> Dict[str, int]:
        return {
            'visited': self.visited_count,
            'matched': self.matched,
            'mismatched': self.mismatched,
            'updated': self.updated,
            'missing_target': self.missing_target,
            'missing_source': self.missing_source,
            'errors': self.errors,
        }
