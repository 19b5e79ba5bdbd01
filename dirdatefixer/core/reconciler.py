"""Paired tree walk that copies directory dates from a source tree to a target.

The walk visits the source and target trees in lockstep, depth-first and
pre-order. At every level the source's subdirectories are visited first;
the target's subdirectories are then visited only if the source did not
already have one with the same name. That second pass exists to report
target directories with no source counterpart, and the per-level set of
names makes sure no relative path is visited twice.
"""

from pathlib import Path, PurePath
from typing import Callable, List, Optional, Tuple, Union

from .._common.config import ReconcileConfig, TimestampField
from .._common.formatting import format_timestamp
from ..error_policies import ErrorPolicy, policy_from_config
from ..errors import DirDateFixerError
from .adapter import TimestampAdapter
from .node import DirectoryPair, MismatchReport, ReconcileSummary

# Errors recovered per directory; anything else propagates
_METADATA_ERRORS = (DirDateFixerError, OSError)


class TreeDateReconciler:
    """Copy modification and creation times from source directories to targets.

    Every visited pair produces exactly one diagnostic entry through
    ``output``: dates already match, a mismatch (reported or overwritten),
    or a directory missing on one side. Metadata failures go to the error
    policy; with the default policy they are reported and the walk goes on.

    Example:
        reconciler = TreeDateReconciler()
        summary = reconciler.reconcile("/mnt/old/photos", "/mnt/new/photos", commit=False)
        print(summary.mismatched, "directories would change")
    """

    def __init__(self,
                 adapter: Optional[TimestampAdapter] = None,
                 output: Optional[Callable[[str], None]] = None,
                 error_policy: Optional[ErrorPolicy] = None,
                 config: Optional[ReconcileConfig] = None):
        """Initialize the reconciler.

        Args:
            adapter: Where directories and timestamps come from
                (defaults to the local filesystem)
            output: Receives one diagnostic string per visited pair
                (defaults to print)
            error_policy: Decides what a metadata failure does to the walk
                (defaults to the policy described by ``config``)
            config: Listing and error options
        """
        self.config = config or ReconcileConfig()
        if adapter is None:
            # Imported here to keep core free of a hard dependency on adapters
            from ..adapters.filesystem import FileSystemTimestampAdapter
            adapter = FileSystemTimestampAdapter(
                follow_symlinks=self.config.follow_symlinks,
                include_hidden=self.config.include_hidden,
                exclude_dirs=self.config.exclude_dirs,
            )
        self.adapter = adapter
        self.output = output or print
        self.error_policy = error_policy or policy_from_config(self.config)

    def reconcile(self,
                  source_root: Union[str, PurePath],
                  target_root: Union[str, PurePath],
                  commit: bool) -> ReconcileSummary:
        """Walk both trees and reconcile every directory pair.

        Args:
            source_root: Root of the tree with the correct dates
            target_root: Root of the tree whose dates should be corrected
            commit: True to overwrite target timestamps, False to only report

        Returns:
            Counters and mismatch reports for the run
        """
        summary = ReconcileSummary(commit=commit)
        root = DirectoryPair(self._as_path(source_root), self._as_path(target_root))
        self._reconcile_pair(root, commit, summary)
        return summary

    def _as_path(self, path: Union[str, PurePath]) -> PurePath:
        return path if isinstance(path, PurePath) else Path(path)

    def _reconcile_pair(self, pair: DirectoryPair, commit: bool, summary: ReconcileSummary) -> None:
        summary.visited.append(pair.relative)

        source_exists, source_error = self._exists(pair.source)
        target_exists, target_error = self._exists(pair.target)
        failures = [e for e in (source_error, target_error) if e is not None]

        if failures:
            # A side that cannot be checked is neither compared nor descended into
            summary.errors += len(failures)
            self.output(f"{getattr(failures[0], 'path', pair.target)} - "
                        f"Unable to check directory: {failures[0]}")
            for error in failures:
                self.error_policy.handle(error, 'exists', pair)
        elif source_exists and target_exists:
            self._compare(pair, commit, summary)
        elif target_exists:
            summary.missing_source += 1
            self.output(f"{pair.target} - No corresponding source directory")
        elif source_exists:
            summary.missing_target += 1
            self.output(f" >> {pair.source} >> ? - No corresponding target directory")
        else:
            # Only the roots can get here; children are always listed from an existing side
            self.output(f"{pair.source} and {pair.target} - Neither directory exists")

        visited = set()
        for name in self._subdirectories(pair, pair.source, source_exists, summary):
            visited.add(name)
            self._reconcile_pair(pair.child(name), commit, summary)

        for name in self._subdirectories(pair, pair.target, target_exists, summary):
            if name in visited:
                continue
            self._reconcile_pair(pair.child(name), commit, summary)

    def _exists(self, path: PurePath) -> Tuple[bool, Optional[Exception]]:
        try:
            return self.adapter.exists(path), None
        except _METADATA_ERRORS as e:
            return False, e

    def _subdirectories(self,
                        pair: DirectoryPair,
                        path: PurePath,
                        exists: bool,
                        summary: ReconcileSummary) -> List[str]:
        if not exists:
            return []
        try:
            return list(self.adapter.list_subdirectories(path))
        except _METADATA_ERRORS as e:
            summary.errors += 1
            self.error_policy.handle(e, 'list_subdirectories', pair)
            return []

    def _compare(self, pair: DirectoryPair, commit: bool, summary: ReconcileSummary) -> None:
        try:
            source_times = self.adapter.read_timestamps(pair.source)
            target_times = self.adapter.read_timestamps(pair.target)
        except _METADATA_ERRORS as e:
            summary.errors += 1
            self.output(f"{pair.target} - Unable to compare dates/times: {e}")
            self.error_policy.handle(e, 'read_timestamps', pair)
            return

        # Without real creation metadata the created value is a stand-in
        report = MismatchReport(pair, source_times, target_times, commit,
                                compare_created=self.adapter.supports_creation_time_read())
        if not report.has_mismatch:
            summary.matched += 1
            self.output(f"{pair.target} - Dates/times already match. Skipping.")
            return

        summary.mismatched += 1
        summary.reports.append(report)
        if commit:
            self._overwrite(report, summary)
        self.output(self._describe(report))

    def _overwrite(self, report: MismatchReport, summary: ReconcileSummary) -> None:
        """Write each mismatching field on its own; one failure never undoes another."""
        target = report.pair.target
        for field in report.mismatched_fields:
            value = report.source.get(field)
            try:
                if field is TimestampField.MODIFIED:
                    self.adapter.set_modified(target, value)
                else:
                    self.adapter.set_created(target, value)
            except _METADATA_ERRORS as e:
                report.failed[field] = e
                summary.errors += 1
                operation = 'set_modified' if field is TimestampField.MODIFIED else 'set_created'
                self.error_policy.handle(e, operation, report.pair)
            else:
                report.written.append(field)

        if report.written:
            summary.updated += 1

    def _describe(self, report: MismatchReport) -> str:
        if not report.commit:
            outcome = "would be overwritten"
        elif report.written:
            outcome = "was overwritten"
        else:
            outcome = "could not be overwritten"

        lines = [f"{report.pair.target} {outcome} from dates on source directory: {report.pair.source}"]
        for field in report.mismatched_fields:
            if not report.commit:
                verb = "would overwrite"
            elif field in report.failed:
                verb = "could not overwrite"
            else:
                verb = "overwrites"
            lines.append(
                f"     {field.value} - S: {format_timestamp(report.source.get(field))}"
                f" -> {verb} -> T: {format_timestamp(report.target.get(field))}"
            )
        return "\n".join(lines)
