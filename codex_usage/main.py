"""
Codex usage monitor - CLI entry point.
"""

import argparse
import json
import os
import sys

from .api import UsageAPIError, fetch_usage
from .auth import CredentialsError, get_credentials
from .constants import FETCHING_CLEAR_WIDTH, ICONS, REQUEST_TIMEOUT, VERSION
from .formatting import render_fancy, render_oneline, render_plain
from .rendering import paint


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="codex-usage",
        description="Show Codex usage limits for the logged-in ChatGPT account",
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "-p",
        "--plain",
        action="store_true",
        help="Plain key/value output for scripts",
    )
    output.add_argument(
        "--json",
        action="store_true",
        help="Print the parsed usage data as JSON",
    )
    output.add_argument(
        "--oneline",
        action="store_true",
        help="Single compact line for status bars",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable ANSI colors (also honours NO_COLOR)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=REQUEST_TIMEOUT,
        help=f"HTTP timeout in seconds (default: {REQUEST_TIMEOUT:g})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print diagnostics to stderr",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def use_color(args: argparse.Namespace) -> bool:
    return not args.no_color and not os.environ.get("NO_COLOR")


def run(args: argparse.Namespace) -> int:
    color = use_color(args)
    fancy = not (args.plain or args.json or args.oneline)

    if fancy:
        print()
        icon = paint(ICONS["diamond"], "cyan", color=color)
        print(f"  {icon} Fetching usage data... ", end="", flush=True)

    creds = get_credentials()
    if args.verbose:
        kind = "OAuth token" if creds.is_oauth else "API key"
        print(f"Using {kind} from {creds.source}", file=sys.stderr)

    report = fetch_usage(creds, timeout=args.timeout, verbose=args.verbose)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    elif args.plain:
        print("\n".join(render_plain(report)))
    elif args.oneline:
        print(render_oneline(report, color=color))
    else:
        print("\r" + " " * FETCHING_CLEAR_WIDTH + "\r", end="")
        print("\n".join(render_fancy(report, color=color)))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        return run(args)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    except (CredentialsError, UsageAPIError) as e:
        label = paint("Error:", "red", "bold", color=use_color(args))
        print(f"\n  {label} {e}\n", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
