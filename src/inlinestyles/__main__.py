#!/usr/bin/env python3
"""Command-line interface for inlinestyles."""

from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from . import Document, InlineOptions
from .errors import InlineStylesError

_XML_SUFFIXES = {".svg", ".xml", ".xhtml"}


def _get_version() -> str:
    try:
        return version("inlinestyles")
    except PackageNotFoundError:  # pragma: no cover
        return "dev"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="inlinestyles",
        description="Move <style> rules into the style attributes of the elements they match.",
        epilog=(
            "Examples:\n"
            "  inlinestyles page.html\n"
            "  inlinestyles icon.svg -o icon.min.svg\n"
            "  cat page.html | inlinestyles - --keep-multi-matched\n"
            "\n"
            "If you don't have the 'inlinestyles' command available, use:\n"
            "  python -m inlinestyles ...\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "path",
        nargs="?",
        help="HTML or SVG file to process, or '-' to read from stdin",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Write the result to this file instead of stdout",
    )
    parser.add_argument(
        "--xml",
        action="store_true",
        help="Parse the input as XML (implied for .svg, .xml and .xhtml files)",
    )
    parser.add_argument(
        "--keep-multi-matched",
        action="store_false",
        dest="only_matched_once",
        help="Also inline selectors that match more than one element",
    )
    parser.add_argument(
        "--keep-selectors",
        action="store_false",
        dest="remove_matched_selectors",
        help="Leave applied selectors in their stylesheet",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print the output",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log each selector decision to stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"inlinestyles {_get_version()}",
    )

    args = parser.parse_args(argv)

    if not args.path:
        parser.print_help(sys.stderr)
        raise SystemExit(1)

    return args


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()

    return Path(path).read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    xml = args.xml or Path(args.path).suffix.lower() in _XML_SUFFIXES
    options = InlineOptions(
        only_matched_once=args.only_matched_once,
        remove_matched_selectors=args.remove_matched_selectors,
    )

    try:
        doc = Document(_read_input(args.path), xml=xml).inline_styles(options)
    except InlineStylesError as e:
        print(f"{args.path}: {e}", file=sys.stderr)
        raise SystemExit(2) from e

    output = doc.to_html(pretty=args.pretty)
    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        return

    sys.stdout.write(output)
    if not output.endswith("\n"):
        sys.stdout.write("\n")


if __name__ == "__main__":
    main()
