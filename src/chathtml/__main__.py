#!/usr/bin/env python3
"""Command-line interface for chathtml."""

from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import NoReturn

from . import DEFAULT_OPTIONS, ConfigurationError, SanitizeOptions, Sanitizer, UnknownTagPolicy


def _get_version() -> str:
    try:
        return version("chathtml")
    except PackageNotFoundError:  # pragma: no cover
        return "dev"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="chathtml",
        description="Sanitize chat-message markup, or extract its plain text.",
        epilog=(
            "Examples:\n"
            "  chathtml reply.html\n"
            "  echo '<b>bold<i>both</b>' | chathtml -\n"
            "  chathtml reply.html --format text\n"
            "  chathtml reply.html --escape-unknown --errors\n"
            "  chathtml reply.html --allow h3 --block h3\n"
            "\n"
            "If you don't have the 'chathtml' command available, use:\n"
            "  python -m chathtml ...\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "path",
        nargs="?",
        help="File to sanitize, or '-' to read from stdin",
    )
    parser.add_argument(
        "--format",
        choices=["html", "text"],
        default="html",
        help="Output format (default: html)",
    )
    parser.add_argument(
        "--escape-unknown",
        action="store_true",
        help="Escape disallowed tags as text instead of dropping them",
    )
    parser.add_argument(
        "--no-collapsible",
        action="store_false",
        dest="collapsible",
        help="Drop the collapsible marker from <blockquote>",
    )
    parser.add_argument(
        "--allow",
        action="append",
        default=[],
        metavar="TAG",
        help="Allow an extra tag (repeatable)",
    )
    parser.add_argument("--block", action="append", default=[], metavar="TAG", help="Classify TAG as block")
    parser.add_argument("--inline", action="append", default=[], metavar="TAG", help="Classify TAG as inline")
    parser.add_argument(
        "--self-closing",
        action="append",
        default=[],
        metavar="TAG",
        help="Classify TAG as self-closing",
    )
    parser.add_argument(
        "--errors",
        action="store_true",
        help="Print every repair made to stderr",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"chathtml {_get_version()}",
    )

    args = parser.parse_args(argv)

    if not args.path:
        parser.print_help(sys.stderr)
        raise SystemExit(1)

    return args


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()

    return Path(path).read_text()


def _build_options(args: argparse.Namespace) -> SanitizeOptions:
    return DEFAULT_OPTIONS.replace(
        allowed_tags=DEFAULT_OPTIONS.allowed_tags | set(args.allow),
        unknown_tags=UnknownTagPolicy.ESCAPE if args.escape_unknown else UnknownTagPolicy.DROP,
        allow_collapsible_quotes=args.collapsible,
        block_tags=args.block,
        inline_tags=args.inline,
        self_closing_tags=args.self_closing,
    )


def main() -> NoReturn | None:
    args = _parse_args(sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s [%(name)s] %(message)s",
    )

    try:
        options = _build_options(args)
    except ConfigurationError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2) from e

    result = Sanitizer(_read_text(args.path), options=options, collect_errors=args.errors)

    if args.errors:
        for repair in result.errors:
            print(str(repair), file=sys.stderr)

    output = result.to_text() if args.format == "text" else result.to_html()
    sys.stdout.write(output)
    sys.stdout.write("\n")
    return None


if __name__ == "__main__":
    main()
