#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def build_parser(default_limit: int = 10) -> argparse.ArgumentParser:
    from tenorgrab.core.models import DELIVERY_TARGETS, MEDIA_QUALITIES

    parser = argparse.ArgumentParser(
        prog="tenorgrab",
        description="Search Tenor and print links. With -c or -d, one random result is copied or downloaded.",
    )
    parser.add_argument("terms", nargs="*", help="Search terms, joined with spaces")
    parser.add_argument("-n", "--num", type=int, default=default_limit, help="Number of results (1-50)")
    parser.add_argument("-c", "--copy", action="store_true", help="Copy a random link to the clipboard")
    parser.add_argument("-d", "--download", action="store_true", help="Download a random result to the Pictures folder")
    parser.add_argument(
        "-t",
        "--type",
        dest="target",
        choices=DELIVERY_TARGETS,
        default="page",
        help="Print/copy the Tenor page link or the direct media link",
    )
    parser.add_argument("-f", "--format", dest="quality", choices=MEDIA_QUALITIES, default="gif", help="Media variant")
    parser.add_argument("-q", "--quiet", action="store_true", help="Do not print the result list")
    parser.add_argument("-e", "--extended", action="store_true", help="Dump the full response as JSON")
    parser.add_argument("--debug", action="store_true", help="Verbose logging on stderr")
    parser.add_argument("--set-key", metavar="KEY", help="Store a Tenor API key and exit")
    return parser


def main(argv: list[str] | None = None) -> int:
    from tenorgrab.core.engine import run
    from tenorgrab.core.environment import Environment
    from tenorgrab.core.errors import TenorGrabError
    from tenorgrab.core.models import SearchOptions
    from tenorgrab.core.settings import load_settings, save_api_key
    from tenorgrab.tools._common import setup_logging

    settings = load_settings()
    search_cfg = settings.get("search") or {}
    parser = build_parser(default_limit=int(search_cfg.get("default_limit", 10)))
    args = parser.parse_args(argv)
    setup_logging(debug=args.debug, quiet=args.quiet)

    if args.set_key is not None:
        try:
            path = save_api_key(args.set_key, settings)
        except TenorGrabError as exc:
            print(f"error: {exc.message}", file=sys.stderr)
            return 1
        print(f"API key saved to {path}", file=sys.stderr)
        return 0

    if not 1 <= args.num <= 50:
        parser.error("-n must be between 1 and 50")

    options = SearchOptions(
        query=" ".join(args.terms) or str(search_cfg.get("default_query", "hello")),
        limit=args.num,
        copy_link=args.copy,
        download=args.download,
        target=args.target,
        quality=args.quality,
        quiet=args.quiet,
        extended=args.extended,
    )

    try:
        run(options, Environment.from_runtime(), settings)
    except TenorGrabError as exc:
        print(f"error [{exc.code}]: {exc.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
