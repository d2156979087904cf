"""
CLI (Command Line Interface).

    classchanges fetch                 scrape the form, extract, write latest.json
    classchanges parse <text> ...      extract from texts given on the command line
    classchanges api                   scrape + extract, print the JSON response body
    classchanges show                  print latest.json as tables

Note:
- Extraction lives in classchanges/pipeline.py; this module only wires it up
- `parse` and `api` print JSON only, so their output can be piped
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from classchanges.config import CONVENTIONS, PipelineConfig, load_config
from classchanges.display import filter_changes, render_changes
from classchanges.pipeline import build_response, records_to_json, run
from classchanges.scrape import FetchError, fetch_announcements
from classchanges.storage import load_latest_changes, save_snapshot


def _config_from_args(args: argparse.Namespace) -> PipelineConfig:
    return load_config(year=args.year, convention=args.convention)


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _read_texts(args: argparse.Namespace) -> list[str]:
    texts = [t for t in (args.text or []) if t.strip()]
    if args.file:
        p = Path(args.file)
        texts.extend(line for line in p.read_text(encoding="utf-8").splitlines() if line.strip())
    return texts


def _cmd_fetch(args: argparse.Namespace) -> int:
    """
    Scrape the form page, extract change records and save the snapshot.
    """
    config = _config_from_args(args)

    print("FETCH form page")
    try:
        page = fetch_announcements(args.url)
    except FetchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Form: {page.title}")
    print(f"Found {len(page.items)} items")

    records = run(page.items, config, verbose=True)
    print(f"Extracted {len(records)} change records")

    try:
        latest = save_snapshot(records, page.title, out_dir=args.out_dir)
    except OSError as e:
        print(f"Error: could not write snapshot: {e}", file=sys.stderr)
        return 1
    print(f"Saved: {latest}")
    return 0


def _cmd_parse(args: argparse.Namespace) -> int:
    """
    Run the pipeline over texts from the command line and/or a file.
    """
    config = _config_from_args(args)
    try:
        texts = _read_texts(args)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not texts:
        print("Please provide announcement text or --file.", file=sys.stderr)
        return 1

    _print_json(records_to_json(run(texts, config)))
    return 0


def _cmd_api(args: argparse.Namespace) -> int:
    """
    Print what the changes endpoint would return: a list of records, or
    {"error": ...} with a non-zero exit code.
    """
    config = _config_from_args(args)
    status, body = build_response(lambda: fetch_announcements(args.url).items, config)
    _print_json(body)
    return 0 if status == 200 else 1


def _cmd_show(args: argparse.Namespace) -> int:
    """
    Show the latest snapshot, optionally for one class and/or date.
    """
    changes = load_latest_changes(args.snapshot)
    changes = filter_changes(changes, class_year=args.class_year, date=args.date)
    zero_based = CONVENTIONS[args.convention or "zero-based"].offset != 0
    render_changes(changes, zero_based=zero_based)
    return 0


def _add_pipeline_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--year", type=int, default=None, help="Reference year (default: $CLASSCHANGES_REFERENCE_YEAR or 2026)")
    p.add_argument(
        "--convention",
        choices=sorted(CONVENTIONS),
        default=None,
        help="Period numbering in records (default: zero-based)",
    )


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="classchanges", description="Class schedule change extractor")
    sub = parser.add_subparsers(dest="command", required=True)

    p_fetch = sub.add_parser("fetch", help="Scrape the form and save latest.json")
    p_fetch.add_argument("--url", type=str, default=None, help="Form page URL (default: $FORM_URL)")
    p_fetch.add_argument("--out-dir", type=Path, default=None, help="Output directory (default: $OUTPUT_DIR)")
    _add_pipeline_options(p_fetch)

    p_parse = sub.add_parser("parse", help="Extract changes from given texts")
    p_parse.add_argument("text", nargs="*", help="Announcement text(s)")
    p_parse.add_argument("--file", type=str, default=None, help="File with one announcement per line")
    _add_pipeline_options(p_parse)

    p_api = sub.add_parser("api", help="Print the JSON response for the current form")
    p_api.add_argument("--url", type=str, default=None, help="Form page URL (default: $FORM_URL)")
    _add_pipeline_options(p_api)

    p_show = sub.add_parser("show", help="Show the latest snapshot")
    p_show.add_argument("--class", dest="class_year", type=str, default=None, help="Class, e.g. 1F")
    p_show.add_argument("--date", type=str, default=None, help="Date, e.g. 2026-02-18")
    p_show.add_argument("--snapshot", type=Path, default=None, help="Snapshot file (default: latest.json)")
    p_show.add_argument("--convention", choices=sorted(CONVENTIONS), default=None, help="How periods were numbered")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "fetch":
        raise SystemExit(_cmd_fetch(args))
    if args.command == "parse":
        raise SystemExit(_cmd_parse(args))
    if args.command == "api":
        raise SystemExit(_cmd_api(args))
    if args.command == "show":
        raise SystemExit(_cmd_show(args))

    raise SystemExit(2)
