from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema of the demonstration harness and translates
parsed arguments into the raw configuration consumed by the validator.
"""

import argparse
from typing import Any, Dict

SEVERITIES = ("print", "debug", "info", "warning", "alert")

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the systemlog CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="systemlog",
        description="Emit log records through a size-rotated, zip-archived logger.",
    )

    # --- Logger Setup ---
    p.add_argument("--name", default=None, help="Base name of the log file (default: errors).")
    p.add_argument("--dir", dest="directory", default=None, help="Log directory (default: current).")
    p.add_argument(
        "--level",
        type=int,
        default=4,
        help="Most verbose severity emitted: 1=alert, 2=warning, 3=info, 4=debug.",
    )
    p.add_argument(
        "--size",
        dest="size_mb",
        type=int,
        default=1,
        help="Rotation threshold in MB; 0 disables the log file.",
    )

    # --- Workload ---
    p.add_argument("-n", "--count", type=int, default=1, help="Number of records to emit.")
    p.add_argument(
        "-s", "--severity",
        choices=SEVERITIES,
        default="warning",
        help="Severity of the emitted records.",
    )
    p.add_argument(
        "-m", "--message",
        default="record %d",
        help="printf-style template; the record index is its only argument.",
    )

    # --- Presentation ---
    p.add_argument("--persist-all", action="store_true", help="Persist info and debug records too.")
    p.add_argument("--color", action="store_true", help="Colour severity tags on the console.")
    p.add_argument("--quiet", action="store_true", help="Do not print records to stdout.")
    p.add_argument("--no-info-location", action="store_true", help="Omit caller location on info records.")

    # --- Diagnostics ---
    p.add_argument("--debug", action="store_true", help="Elevate internal diagnostics to DEBUG.")

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_config(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a raw logger configuration.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration for validate_config().
    """
    config: Dict[str, Any] = {
        "name": args.name,
        "directory": args.directory,
        "level": args.level,
        "size_mb": args.size_mb,
    }

    if args.persist_all:
        config["persist_all"] = True
    if args.color:
        config["color"] = True
    if args.quiet:
        config["console"] = False
    if args.no_info_location:
        config["info_location"] = False

    return config
