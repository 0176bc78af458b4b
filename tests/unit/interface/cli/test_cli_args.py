from __future__ import annotations

"""
Unit tests for CLI Argument Parsing.

Verifies:
1. Defaults of the demonstration harness.
2. Mapping of CLI flags to configuration keys.
3. Restriction of the severity choice.
"""

import pytest

from systemlog.interface.cli.args import args_to_config, build_parser


def parse_args(arg_list):
    """Helper to simulate CLI argument parsing."""
    parser = build_parser()
    return parser.parse_args(arg_list)


def test_cli_defaults():
    """Verify defaults: errors log in the current directory, 1 MB, debug level."""
    args = parse_args([])
    config = args_to_config(args)

    assert config == {"name": None, "directory": None, "level": 4, "size_mb": 1}
    assert args.count == 1
    assert args.severity == "warning"
    assert args.message == "record %d"


def test_cli_flags_mapping():
    """Verify boolean flags are mapped correctly to config keys."""
    args = parse_args([
        "--persist-all",
        "--color",
        "--quiet",
        "--no-info-location",
    ])
    config = args_to_config(args)

    assert config["persist_all"] is True
    assert config["color"] is True
    assert config["console"] is False
    assert config["info_location"] is False


def test_cli_logger_setup_arguments():
    """Verify name, directory, level and size are captured."""
    args = parse_args(["--name", "app", "--dir", "/tmp/logs", "--level", "2", "--size", "0"])
    config = args_to_config(args)

    assert config["name"] == "app"
    assert config["directory"] == "/tmp/logs"
    assert config["level"] == 2
    assert config["size_mb"] == 0


def test_cli_rejects_unknown_severity():
    with pytest.raises(SystemExit):
        parse_args(["--severity", "fatal"])
