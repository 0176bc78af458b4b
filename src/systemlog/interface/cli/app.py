from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Stands in for the host program: bootstraps diagnostics, validates the
logger options, emits a configurable burst of records and reports which
log artifacts exist afterwards. Useful to watch rotation and archiving
happen without writing any code.
"""

import os
import sys
from typing import List, Optional

from systemlog.core.validator import validate_config
from systemlog.infra.logging import LoggingConfig, configure_logging, get_logger
from systemlog.interface.cli import args as cli_args
from systemlog.logger import Logger, set_default_logger

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 ok, 2 invalid options, 130 interrupted).
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Diagnostics bootstrap (stderr; stdout carries the records)
    configure_logging(LoggingConfig(level="DEBUG" if args.debug else "WARNING"))

    # 3. Validation phase
    if args.count < 0:
        print(f"ERROR: --count must be >= 0, got {args.count}", file=sys.stderr)
        return 2
    try:
        config, _ = validate_config(cli_args.args_to_config(args), strict=True)
    except (TypeError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    # 4. Logger construction (stale artifacts of a previous run are cleared)
    log = Logger(config)
    log.remove_stale_files()
    set_default_logger(log)
    logger.debug(f"Logger ready: {log!r}")

    # 5. Workload phase
    emit = getattr(log, args.severity)
    try:
        for i in range(args.count):
            emit(args.message, i)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        log.close()
        return 130

    # 6. Drain background archives before reporting
    log.flush()
    log.close()
    set_default_logger(None)

    _print_summary(log, args.count)
    return 0

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_summary(log: Logger, count: int) -> None:
    """Print the emitted count, rotation count and the artifacts on disk."""
    cfg = log.config
    print(f"Records emitted: {count}")
    print(f"Rotations: {log.sink.rotations}")
    if not cfg.persistence_enabled:
        print("Log file disabled (size 0).")
        return
    for label, path in (("log", cfg.log_path), ("backup", cfg.backup_path), ("archive", cfg.archive_path)):
        if os.path.exists(path):
            print(f"  - {label}: {path} ({os.path.getsize(path):,} bytes)")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
