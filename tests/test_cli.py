"""
Tests for the command line entry point.
"""

import logging

import pytest

from fidruawatch.cli import main, parse_args


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("FIDRUAWATCH_HOME", str(tmp_path / "home"))
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_parse_args_defaults():
    args = parse_args([])
    assert args.folder is None
    assert args.log_level == "INFO"
    assert args.log_format == "text"


def test_parse_args_rejects_unknown_format():
    with pytest.raises(SystemExit):
        parse_args(["--log-format", "xml"])


def test_missing_folder_exits_with_error(tmp_path):
    assert main(["--folder", str(tmp_path / "missing")]) == 1


def test_no_folder_configured_exits_with_error():
    assert main([]) == 1
