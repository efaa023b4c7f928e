#!/usr/bin/env python3
"""
Detect and format Bible references in markdown files.

Run from the api directory.

Usage:
    python -m scripts.format_verses detect NOTES.md
    python -m scripts.format_verses format NOTES.md [--embed] [--in-place]
    python -m scripts.format_verses expand "Rom 8:1, 3-5"

Examples:
    # List unlinked references with their link previews
    cd api && python -m scripts.format_verses detect ~/notes/sermon.md

    # Link every reference and print the result
    cd api && python -m scripts.format_verses format ~/notes/sermon.md

    # Embed every reference, rewriting the file
    cd api && python -m scripts.format_verses format ~/notes/sermon.md --embed --in-place
"""

import argparse
import logging
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import LOG_LEVEL
from services.verses import VerseFormatterService, ReferenceParseError


def read_file(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def cmd_detect(service: VerseFormatterService, args) -> int:
    text = read_file(args.file)
    detected = service.detect(text)
    limit = args.limit if args.limit is not None else service.settings.max_verses

    if not detected:
        print("No unformatted Bible references found.")
        return 0

    print(f"Detected {len(detected)} Bible reference(s):")
    print("-" * 60)
    for ref in detected[:limit] if limit > 0 else detected:
        preview = service.preview(ref)
        print(f"  {ref.start:>6}-{ref.end:<6} {ref.text}")
        if ref.original_text != ref.text:
            print(f"      original: {ref.original_text}")
        print(f"      link:     {preview['link']}")
    if 0 < limit < len(detected):
        print(f"  ... {len(detected) - limit} more")
    return 0


def cmd_format(service: VerseFormatterService, args) -> int:
    text = read_file(args.file)
    formatted, count = service.format_document(text, embed=args.embed)

    if args.in_place:
        with open(args.file, "w", encoding="utf-8") as f:
            f.write(formatted)
        print(f"Formatted {count} reference(s) in {args.file}")
    else:
        sys.stdout.write(formatted)
    return 0


def cmd_expand(service: VerseFormatterService, args) -> int:
    refs = service.expand(args.reference)
    if not refs:
        print(f"Not a recognizable reference: {args.reference}")
        return 1
    for ref in refs:
        print(ref.target)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Detect and format Bible references in markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m scripts.format_verses detect notes.md
  python -m scripts.format_verses format notes.md --in-place
  python -m scripts.format_verses expand "Jude 3"
        """
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    detect_parser = subparsers.add_parser("detect", help="List unlinked references")
    detect_parser.add_argument("file", help="Markdown file to scan")
    detect_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum references to show (default: max_verses setting)"
    )

    format_parser = subparsers.add_parser("format", help="Link or embed every reference")
    format_parser.add_argument("file", help="Markdown file to format")
    format_parser.add_argument(
        "--embed",
        action="store_true",
        help="Embed verses instead of linking them"
    )
    format_parser.add_argument(
        "--in-place",
        action="store_true",
        help="Rewrite the file instead of printing the result"
    )

    expand_parser = subparsers.add_parser("expand", help="Expand one reference")
    expand_parser.add_argument("reference", help='Reference, e.g. "Rom 8:1, 3-5"')

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else LOG_LEVEL)

    service = VerseFormatterService()
    commands = {
        "detect": cmd_detect,
        "format": cmd_format,
        "expand": cmd_expand,
    }

    try:
        return commands[args.command](service, args)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1
    except ReferenceParseError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
