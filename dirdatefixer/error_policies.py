"""
Error handling policies for DirDateFixer.

This module provides a flexible error handling system through the Policy
pattern, allowing callers to decide what happens when reading or writing
the metadata of one directory fails during a reconciliation run.

The reconciler hands every failure to its policy. A policy that returns
lets the walk continue with the next field, sibling or descendant; a
policy that raises stops the walk.
"""

import logging
import sys
from abc import ABC, abstractmethod
from pathlib import PurePath
from typing import Any, Dict, List, Optional

from ._common.config import ReconcileConfig

logger = logging.getLogger(__name__)


def _path_of(error: Exception, pair: Any) -> Optional[PurePath]:
    """Best path to report for an error: the one the adapter named."""
    path = getattr(error, 'path', None)
    if path is not None:
        return PurePath(path)
    if pair is not None and hasattr(pair, 'target'):
        return pair.target
    return None


class ErrorPolicy(ABC):
    """
    Base class for error handling policies.

    Subclasses implement different strategies for handling errors
    that occur during metadata operations.
    """

    @abstractmethod
    def handle(self, error: Exception, operation: str, pair: Any) -> None:
        """
        Handle an error that occurred during a metadata operation.

        Args:
            error: The exception that was raised
            operation: Name of the adapter method that failed
                (e.g., 'read_timestamps', 'set_created')
            pair: The DirectoryPair being processed when the error occurred

        Raises:
            The error (or another exception) to stop the walk.
        """
        pass


class FailFastPolicy(ErrorPolicy):
    """
    Policy that immediately re-raises any error, stopping the walk.

    Mutations already applied to earlier directories stay applied.
    """

    def handle(self, error: Exception, operation: str, pair: Any) -> None:
        """Re-raise the error immediately."""
        raise error


class CollectErrorsPolicy(ErrorPolicy):
    """
    Policy that collects all errors without printing, for batch processing.

    Useful for collecting all errors and presenting them at the end.
    """

    def __init__(self):
        """Initialize the policy."""
        self.errors: List[Dict[str, Any]] = []
        self.skipped_paths: List[PurePath] = []

    def handle(self, error: Exception, operation: str, pair: Any) -> None:
        """Record the error and let the walk continue."""
        self._record(error, operation, pair)

    def _record(self, error: Exception, operation: str, pair: Any) -> Dict[str, Any]:
        path = _path_of(error, pair)
        record = {
            'path': path,
            'operation': operation,
            'error': error,
            'error_type': type(error).__name__,
            'error_message': str(error),
        }
        self.errors.append(record)
        if path is not None and path not in self.skipped_paths:
            self.skipped_paths.append(path)
        logger.debug("%s failed for %s: %s", operation, path, error)
        return record

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        return {
            'total_errors': len(self.errors),
            'read_errors': sum(1 for e in self.errors
                               if e['error_type'] == 'MetadataReadError'),
            'write_errors': sum(1 for e in self.errors
                                if e['error_type'] == 'MetadataWriteError'),
            'unsupported': sum(1 for e in self.errors
                               if e['error_type'] == 'UnsupportedMetadataOperation'),
            'skipped_paths': len(self.skipped_paths),
            'errors': self.errors,
        }


class ContinueOnErrorsPolicy(CollectErrorsPolicy):
    """
    Policy that reports errors and continues the walk.

    This is the default: one bad directory must not stop reconciliation
    of the rest of the tree. Errors are collected for later inspection.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, print warnings to stderr when errors occur
        """
        super().__init__()
        self.verbose = verbose

    def handle(self, error: Exception, operation: str, pair: Any) -> None:
        record = self._record(error, operation, pair)
        if self.verbose:
            if isinstance(getattr(error, 'cause', None), PermissionError):
                print(f"\nWARNING: Skipping inaccessible path '{record['path']}': {error}",
                      file=sys.stderr)
            else:
                print(f"\nWARNING: Error in {operation} for '{record['path']}': {error}",
                      file=sys.stderr)


class ThresholdPolicy(ContinueOnErrorsPolicy):
    """
    Policy that tolerates errors up to a threshold, then fails.

    Useful when some errors are expected (e.g. creation time not settable
    on a few directories) but many indicate a systemic problem.
    """

    def __init__(self, max_errors: int = 10, verbose: bool = True):
        """
        Initialize threshold policy.

        Args:
            max_errors: Maximum errors to tolerate before failing
            verbose: If True, print warnings for errors
        """
        super().__init__(verbose=verbose)
        self.max_errors = max_errors

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def handle(self, error: Exception, operation: str, pair: Any) -> None:
        """Handle error if under threshold, otherwise raise."""
        super().handle(error, operation, pair)
        if self.error_count > self.max_errors:
            raise RuntimeError(f"Error threshold exceeded ({self.max_errors} errors)") from error


def policy_from_config(config: ReconcileConfig) -> ErrorPolicy:
    """Create the error policy described by a configuration."""
    if config.fail_fast:
        return FailFastPolicy()
    if config.max_errors is not None:
        return ThresholdPolicy(max_errors=config.max_errors, verbose=config.verbose)
    return ContinueOnErrorsPolicy(verbose=config.verbose)
