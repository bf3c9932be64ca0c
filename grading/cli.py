"""Command-line helpers for previewing and running station marking."""
from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from config.settings import settings
from stations.catalog import load_catalog

from .errors import MarkingError
from .pipeline import build_pipeline
from .submission import parse_body


def _read(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as handle:
        return handle.read()


def preview(path: str, *, show_schema: bool = False) -> int:
    catalog = load_catalog(settings.STATIONS_PATH)
    pipeline = build_pipeline(settings, catalog)
    try:
        request = pipeline.compile(parse_body(_read(path)))
    except MarkingError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    print("--- system ---")
    print(request.system_prompt)
    print("--- user ---")
    print(request.user_prompt)
    if show_schema:
        print("--- schema ---")
        print(json.dumps(request.output_schema, indent=2))
    return 0


def grade(path: str) -> int:
    catalog = load_catalog(settings.STATIONS_PATH)
    pipeline = build_pipeline(settings, catalog)
    status, body = pipeline.handle(_read(path))
    print(json.dumps(body, indent=2, ensure_ascii=False))
    return 0 if status == 200 else 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="station-marking")
    sub = parser.add_subparsers(dest="command", required=True)

    preview_cmd = sub.add_parser("preview", help="Print the compiled grading instruction without calling the model")
    preview_cmd.add_argument("submission", help="Path to a submission JSON file, or - for stdin")
    preview_cmd.add_argument("--schema", action="store_true", help="Also print the output schema")

    grade_cmd = sub.add_parser("grade", help="Mark a submission end to end")
    grade_cmd.add_argument("submission", help="Path to a submission JSON file, or - for stdin")

    args = parser.parse_args(argv)
    if args.command == "preview":
        return preview(args.submission, show_schema=args.schema)
    return grade(args.submission)


if __name__ == "__main__":
    sys.exit(main())
