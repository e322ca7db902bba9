"""
Asset Sanity - CLI.

============================================================
RESPONSIBILITY
============================================================
Command-line interface for the asset registry checks.

- check: read-only, exit 1 when any chain has violations
- fix:   repairs, exit 1 only when I/O errors occurred

============================================================
USAGE
============================================================
python -m asset_sanity check --root path/to/assets-repo
python -m asset_sanity fix --root path/to/assets-repo --git
python -m asset_sanity check --chain ethereum --chain classic

============================================================
"""

import argparse
import asyncio
import json
import logging
import sys
import uuid
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from asset_sanity.config import SanityConfig, load_config, parse_chains
from asset_sanity.exceptions import ConfigurationError
from asset_sanity.logging_setup import setup_logging
from asset_sanity.models import Chain
from asset_sanity.orchestrator import create_eth_forks_action, run_sanity_checks


logger = logging.getLogger(__name__)


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


# ============================================================
# CLI ARGUMENT PARSER
# ============================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="asset-sanity",
        description="Sanity check and fix for Ethereum-fork asset folders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  check   - Report folder structure violations (no changes)
  fix     - Format info files, fix logo names and checksum casing

Examples:
  %(prog)s check --root ../assets
  %(prog)s fix --root ../assets --git
  %(prog)s check --chain ethereum --log-format json
        """
    )

    parser.add_argument(
        "command",
        choices=["check", "fix"],
        help="Action to run",
    )

    # --------------------------------------------------------
    # Repository Options
    # --------------------------------------------------------
    repo_group = parser.add_argument_group("Repository Options")

    repo_group.add_argument(
        "--root",
        type=str,
        metavar="PATH",
        help="Repository root containing blockchains/ (default: config or cwd)",
    )

    repo_group.add_argument(
        "--chain",
        action="append",
        choices=[c.value for c in Chain],
        metavar="CHAIN",
        help="Restrict to a chain; repeatable (default: all Ethereum forks)",
    )

    repo_group.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="YAML configuration file",
    )

    # --------------------------------------------------------
    # Execution Options
    # --------------------------------------------------------
    execution_group = parser.add_argument_group("Execution Options")

    execution_group.add_argument(
        "--concurrency",
        type=int,
        metavar="N",
        help="Max concurrent filesystem operations (default: 8)",
    )

    execution_group.add_argument(
        "--git",
        action="store_true",
        help="Rename with `git mv` instead of a plain rename",
    )

    execution_group.add_argument(
        "--json",
        action="store_true",
        help="Print the final report as JSON",
    )

    # --------------------------------------------------------
    # Logging Options
    # --------------------------------------------------------
    logging_group = parser.add_argument_group("Logging Options")

    logging_group.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO)",
    )

    logging_group.add_argument(
        "--log-format",
        type=str,
        choices=["json", "text"],
        help="Logging format (default: text)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version="%(prog)s 1.0.0",
    )

    return parser


# ============================================================
# CLI CONFIGURATION BUILDER
# ============================================================

def build_config(args: argparse.Namespace) -> SanityConfig:
    """
    Build configuration from file/environment, then CLI overrides.

    Raises:
        ConfigurationError: invalid values
    """
    config = load_config(Path(args.config) if args.config else None)

    if args.root:
        config.layout = replace(config.layout, root=Path(args.root))
    if args.chain:
        config.chains = parse_chains(args.chain)
    if args.concurrency is not None:
        config.concurrency = args.concurrency
    if args.git:
        config.use_git = True
    if args.log_level:
        config.log_level = args.log_level
    if args.log_format:
        config.log_format = args.log_format

    errors = config.validate()
    if errors:
        raise ConfigurationError(f"Invalid configuration: {', '.join(errors)}")
    return config


# ============================================================
# COMMANDS
# ============================================================

async def run_check(config: SanityConfig, as_json: bool = False) -> int:
    """Run every check step; non-zero when any reports errors."""
    action = create_eth_forks_action(config)
    reports = await run_sanity_checks(action.get_sanity_checks(), config.concurrency)

    failed = [r for r in reports if not r.result.passed]

    if as_json:
        print(json.dumps([r.to_dict() for r in reports], indent=2))
    else:
        for report in reports:
            status = "OK" if report.result.passed else f"FAILED ({len(report.result.errors)})"
            print(f"[{status}] {report.name}")
            for error in report.result.errors:
                print(f"    - {error}")

    logger.info(f"{action.name}: {len(reports) - len(failed)}/{len(reports)} checks passed")
    return EXIT_FAILED if failed else EXIT_OK


async def run_fix(config: SanityConfig, as_json: bool = False) -> int:
    """Run the sanity fix; non-zero only when I/O errors occurred."""
    action = create_eth_forks_action(config)
    report = await action.sanity_fix()

    if as_json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(f"{action.name}: {report.move_count} renames")
        for warning in report.warnings:
            print(f"    ! {warning}")
        for error in report.errors:
            print(f"    - {error}")

    return EXIT_OK if report.success else EXIT_FAILED


# ============================================================
# MAIN ENTRY POINT
# ============================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Command line arguments (default: sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(
        level=config.log_level,
        log_format=config.log_format,
        run_id=f"{args.command}_{uuid.uuid4().hex[:8]}",
    )

    runner = run_check if args.command == "check" else run_fix
    try:
        return asyncio.run(runner(config, as_json=args.json))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


# ============================================================
# MODULE EXECUTION
# ============================================================

if __name__ == "__main__":
    sys.exit(main())
