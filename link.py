#!/usr/bin/env python3
"""
symlistow - Link developer-facing binary names to installed executables.

Each source binary is verified by running its version call, then linked
into the link directory. An existing link with a different version is
replaced after confirmation (or unconditionally with --yes).

Usage:
    link.py                          # Link binaries declared in config
    link.py /opt/rg-14.1.0/rg ...    # Link the given binaries
    link.py --yes SOURCE ...         # Replace mismatched links without asking
    link.py --check PATH ...         # Only verify, print versions
"""

import argparse
import json
import os
import sys

# Add current directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from symlistow.bulk import link_binaries, specs_from_config, specs_from_paths
from symlistow.collectors import collect_verified_binaries
from symlistow.common import is_ci_environment, vlog
from symlistow.config import load_config, validate_config
from symlistow.logging_config import setup_logging
from symlistow.verification import verify_binary


def resolve_interactive(args: argparse.Namespace, configured: bool) -> bool:
    """Decide whether replacements are confirmed interactively."""
    if args.yes:
        return False
    if is_ci_environment() or not sys.stdin.isatty():
        vlog("No interactive terminal, forcing non-interactive mode", args.verbose)
        return False
    if args.interactive:
        return True
    return configured


def cmd_check(args: argparse.Namespace, version_flag: str, timeout: float | None) -> int:
    """Verify the given paths and print their versions."""

    def verifier(path: str) -> str:
        return verify_binary(path, version_flag=version_flag, timeout=timeout, verbose=args.verbose)

    verified = collect_verified_binaries(args.sources, verifier=verifier)
    if args.json:
        print(json.dumps([v.to_dict() for v in verified], indent=2))
    return 0 if len(verified) == len(args.sources) else 1


def cmd_link(args: argparse.Namespace) -> int:
    """Verify and link binaries, from arguments or from config."""
    try:
        config = load_config(args.config, verbose=args.verbose)
    except ValueError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    for warning in validate_config(config):
        print(f"Warning: {warning}", file=sys.stderr)

    version_flag = args.version_flag or config.version_flag

    if args.check:
        return cmd_check(args, version_flag, config.timeout_seconds)

    try:
        specs = specs_from_paths(args.sources) if args.sources else specs_from_config(config)
    except ValueError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1
    if not specs:
        print("No binaries to link: pass SOURCE paths or declare binaries in config", file=sys.stderr)
        return 1

    result = link_binaries(
        specs,
        args.link_dir or config.expanded_link_dir,
        resolve_interactive(args, config.interactive),
        version_flag=version_flag,
        timeout=config.timeout_seconds,
        verbose=args.verbose,
    )

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    elif args.verbose:
        print(result.summary(), file=sys.stderr)

    return 0 if result.success else 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="symlistow - version-aware binary symlinks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config", "-c",
        help="Configuration file (YAML, or JSON by extension)",
    )
    parser.add_argument(
        "--link-dir", "-d",
        help="Directory to create links in (default from config: ~/.local/bin)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Replace links with a different version without asking",
    )
    mode.add_argument(
        "--interactive", "-i",
        action="store_true",
        help="Ask before replacing links with a different version",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only verify the given paths and print their versions",
    )
    parser.add_argument(
        "--version-flag",
        help="Argument that makes a binary print its version (default: --version)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--log-file",
        help="Also write a debug log, including all tracing, to this file",
    )
    parser.add_argument(
        "sources",
        nargs="*",
        help="Source binaries to link (or verify with --check)",
    )

    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    if args.check and not args.sources:
        parser.error("--check requires at least one PATH")

    return cmd_link(args)


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
