"""Command line interface for DirDateFixer.

Two ways to name the trees:

    dirdatefixer -s D:/Photos -t E:/Photos [-c true]
    dirdatefixer -a D -b E -n Photos [-c true]

The second form only makes sense on Windows, where drives have letters.
Without ``-c true`` nothing is changed; the run only reports what would be.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from ._common.config import ReconcileConfig
from .api import drive_directory
from .core.reconciler import TreeDateReconciler


def parse_commit_mode(value: Optional[str]) -> bool:
    """Only the string "true" (any case) enables commit mode."""
    return value is not None and value.strip().lower() == "true"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dirdatefixer",
        description="Copy directory modification and creation dates from a source "
                    "tree onto a copy of it whose directory dates were lost.",
    )

    paths = parser.add_argument_group("paths")
    paths.add_argument(
        '--source-base-directory-path', '-s',
        dest='source',
        help="The full path to the base directory where the 'source' directories, "
             "with the correct file dates, are stored."
    )
    paths.add_argument(
        '--target-base-directory-path', '-t',
        dest='target',
        help="The full path to the base directory where the 'target' directories, "
             "with the incorrect file dates, are stored."
    )

    drives = parser.add_argument_group("drives (Windows)")
    drives.add_argument(
        '--source-drive', '-a',
        help="The drive letter for the 'source' disk/volume. Used with --subdirectory-name."
    )
    drives.add_argument(
        '--target-drive', '-b',
        help="The drive letter for the 'target' disk/volume. Used with --subdirectory-name."
    )
    drives.add_argument(
        '--subdirectory-name', '-n',
        help="Subdirectory to use on both --source-drive and --target-drive."
    )

    parser.add_argument(
        '--commit-mode', '-c',
        default="false",
        help="true to indicate that directory dates in the target hierarchy should be "
             "altered. defaults to false"
    )
    parser.add_argument(
        '--exclude',
        action='append',
        default=[],
        metavar='NAME',
        help="Directory name to skip on both sides (repeatable)"
    )
    parser.add_argument(
        '--no-symlinks',
        action='store_true',
        help="Do not descend into symlinked directories"
    )
    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help="Do not print warnings for directories whose dates could not be read or set"
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help="Enable debug logging"
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f"%(prog)s {__version__}"
    )
    return parser


def setup_logging(verbose: bool = False) -> None:
    """Configure logging to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.source and args.target:
        source_root = Path(args.source)
        target_root = Path(args.target)
    elif args.source_drive and args.target_drive and args.subdirectory_name:
        try:
            source_root = drive_directory(args.source_drive, args.subdirectory_name)
            target_root = drive_directory(args.target_drive, args.subdirectory_name)
        except ValueError as e:
            parser.error(str(e))
    else:
        # Neither complete option set given: show help, change nothing
        parser.print_help()
        return 0

    setup_logging(args.verbose)
    commit = parse_commit_mode(args.commit_mode)
    config = ReconcileConfig(
        follow_symlinks=not args.no_symlinks,
        exclude_dirs=set(args.exclude),
        verbose=not args.quiet,
    )

    source_root = source_root.absolute()
    target_root = target_root.absolute()
    print(f"sourceBaseDirectoryPath = {source_root}")
    print(f"targetBaseDirectoryPath = {target_root}")
    print(f"Mode: {'COMMIT' if commit else 'DRY RUN'}")
    print("-" * 60)

    reconciler = TreeDateReconciler(config=config)
    summary = reconciler.reconcile(source_root, target_root, commit)

    print("\n" + "=" * 60)
    print("Summary:")
    print(f"  Directory pairs visited: {summary.visited_count:,}")
    print(f"  Dates already matching:  {summary.matched:,}")
    print(f"  Dates mismatched:        {summary.mismatched:,}")
    print(f"  Directories updated:     {summary.updated:,}")
    print(f"  Missing in target:       {summary.missing_target:,}")
    print(f"  Missing in source:       {summary.missing_source:,}")
    print(f"  Errors encountered:      {summary.errors:,}")

    if not commit and summary.mismatched > 0:
        print("\nThis was a DRY RUN. Use --commit-mode true to actually update dates.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
