"""Tests for the command line interface."""

import sys
import os
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dirdatefixer.cli import main, parse_commit_mode, build_parser


SOURCE_NS = 1_600_000_000 * 10**9
TARGET_NS = 1_700_000_000 * 10**9


@pytest.fixture
def trees(tmp_path):
    source = tmp_path / "source"
    target = tmp_path / "target"
    (source / "a").mkdir(parents=True)
    (target / "a").mkdir(parents=True)
    for path in (source, source / "a"):
        os.utime(path, ns=(SOURCE_NS, SOURCE_NS))
    for path in (target, target / "a"):
        os.utime(path, ns=(TARGET_NS, TARGET_NS))
    return source, target


@pytest.mark.parametrize("value, expected", [
    ("true", True),
    ("TRUE", True),
    (" True ", True),
    ("false", False),
    ("yes", False),
    ("1", False),
    (None, False),
])
def test_parse_commit_mode(value, expected):
    assert parse_commit_mode(value) is expected


def test_missing_options_prints_usage(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "usage: dirdatefixer" in out
    assert "--source-base-directory-path" in out


def test_incomplete_drive_options_prints_usage(capsys):
    assert main(["-a", "D", "-b", "E"]) == 0
    assert "usage:" in capsys.readouterr().out


def test_dry_run_by_default(trees, capsys):
    source, target = trees

    assert main(["-s", str(source), "-t", str(target), "-q"]) == 0

    out = capsys.readouterr().out
    assert f"sourceBaseDirectoryPath = {source.absolute()}" in out
    assert "Mode: DRY RUN" in out
    assert "would be overwritten" in out
    assert "This was a DRY RUN" in out
    assert os.stat(target / "a").st_mtime_ns == TARGET_NS


def test_commit_mode(trees, capsys):
    source, target = trees

    assert main(["--source-base-directory-path", str(source),
                 "--target-base-directory-path", str(target),
                 "--commit-mode", "true", "--quiet"]) == 0

    out = capsys.readouterr().out
    assert "Mode: COMMIT" in out
    assert "Directories updated:     2" in out
    assert os.stat(target).st_mtime_ns == SOURCE_NS
    assert os.stat(target / "a").st_mtime_ns == SOURCE_NS


def test_exclude_option(trees, capsys):
    source, target = trees

    main(["-s", str(source), "-t", str(target), "--exclude", "a", "-c", "true", "-q"])

    assert os.stat(target / "a").st_mtime_ns == TARGET_NS
    assert "Directory pairs visited: 1" in capsys.readouterr().out


def test_bad_drive_letter_is_usage_error():
    with pytest.raises(SystemExit) as ctx:
        main(["-a", "DD", "-b", "E", "-n", "Photos"])
    assert ctx.value.code == 2


def test_parser_defaults():
    args = build_parser().parse_args(["-s", "x", "-t", "y"])
    assert args.commit_mode == "false"
    assert args.exclude == []
    assert not args.no_symlinks
