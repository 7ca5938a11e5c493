"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m distributor_cli generate balances.json [--kind address|string] [--hash-keys] [--out PATH]
    python -m distributor_cli verify artifact.json [--kind address|string] [--json]
    python -m distributor_cli hash IDENTIFIER [IDENTIFIER ...] [--json]
    python -m distributor_cli config --init|--show

Environment Variables:
    DISTRIBUTOR_IDENTIFIER_KIND   Default identifier kind (address, string)
    DISTRIBUTOR_HASH_KEYS         Hash raw string keys (default: false)
    DISTRIBUTOR_JSON_INDENT       Indent of written artifacts (default: 2)
    DISTRIBUTOR_LOG_LEVEL         Log level (default: INFO)
    DISTRIBUTOR_LOG_FILE          Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

import yaml

from distributor import __version__
from distributor.config import IDENTIFIER_KINDS, RuntimeConfig, set_default_config
from distributor_cli.commands import generate, identifier_hash, verify


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2

DEFAULT_CONFIG_PATH = "distributor.yaml"


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def load_config(path: Path | None = None) -> RuntimeConfig:
    """
    Load CLI configuration.

    An explicit path must exist; otherwise ./distributor.yaml is used when
    present. Environment variables override file values.
    """
    if path is None and Path(DEFAULT_CONFIG_PATH).exists():
        path = Path(DEFAULT_CONFIG_PATH)
    if path is None:
        return RuntimeConfig.from_env()
    return RuntimeConfig.from_yaml(path).with_env_overrides()


def get_default_config_template() -> str:
    """YAML template holding every setting at its default value."""
    return yaml.safe_dump(RuntimeConfig().to_dict(), sort_keys=False)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="distributor",
        description="Merkle distributor CLI - Generate and verify distribution artifacts.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to YAML configuration file (default: ./{DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate command ---
    generate_parser = subparsers.add_parser(
        "generate",
        help="Build a distribution artifact from a balance map",
        description="Compute the Merkle root and every claim proof for a balance map.",
    )
    generate_parser.add_argument(
        "input",
        type=str,
        help="Balance map JSON file",
    )
    generate_parser.add_argument(
        "--kind",
        type=str,
        choices=list(IDENTIFIER_KINDS),
        default=None,
        help="Identifier kind (default: from config, address)",
    )
    generate_parser.add_argument(
        "--hash-keys",
        action="store_true",
        default=False,
        help="Treat string keys as raw identifiers and hash them",
    )
    generate_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Output path for the artifact (default: stdout)",
    )
    generate_parser.set_defaults(func=generate.generate_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a distribution artifact offline",
        description="Check every proof, the token total and the rebuilt root.",
    )
    verify_parser.add_argument(
        "artifact",
        type=str,
        help="Distribution artifact JSON file",
    )
    verify_parser.add_argument(
        "--kind",
        type=str,
        choices=list(IDENTIFIER_KINDS),
        default=None,
        help="Identifier kind (default: from config, address)",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- hash command ---
    hash_parser = subparsers.add_parser(
        "hash",
        help="Hash raw string identifiers",
        description="Print keccak256(utf8(identifier)) for each identifier.",
    )
    hash_parser.add_argument(
        "identifiers",
        nargs="+",
        help="Raw identifiers (e.g. UUIDs)",
    )
    hash_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output a JSON object of identifier -> hash",
    )
    hash_parser.set_defaults(func=identifier_hash.hash_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path for config file (default: {DEFAULT_CONFIG_PATH})",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (DISTRIBUTOR_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: distributor config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)
    set_default_config(config)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if log_level == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
