"""
cli.py

Run the class prefixer outside Anki.

    class-prefixer add src/App.tsx src/Nav.jsx
    class-prefixer remove src/App.tsx --prefix tw-
    class-prefixer add src/App.tsx --regex "\\w+ClassName" --dry-run
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

from .utils.config_utils import (
    load_config_file,
    load_host_settings,
    load_prefixer_config,
)
from .utils.engine import rewrite_classes
from .utils.file_utils import is_file_supported, read_source
from .utils.logger import format_file_line
from .utils.runner import process_files, summarize_report


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="class-prefixer",
        description="Add or remove a class-name prefix in JSX/TSX className values.",
    )
    ap.add_argument("mode", choices=("add", "remove"), help="Add the prefix or strip it.")
    ap.add_argument("files", nargs="+", help="Source file(s) to rewrite in place.")
    ap.add_argument("--config", help="JSON settings file (same keys as config.json).")
    ap.add_argument("--prefix", help="Prefix to add/remove (default: app-).")
    ap.add_argument("--skip", action="append", metavar="CLASS", help="Class left unprefixed when adding. Repeatable.")
    ap.add_argument("--pattern", action="append", metavar="WILDCARD", help="Wildcard attribute name, e.g. '*ClassName'. Repeatable.")
    ap.add_argument("--regex", action="append", metavar="FRAGMENT", help="Regex attribute-name fragment; switches to regex mode. Repeatable.")
    ap.add_argument("--dry-run", action="store_true", help="Report what would change; write nothing.")
    ap.add_argument("--no-format", action="store_true", help="Skip format_command even when auto_format is on.")
    ap.add_argument("--stdout", action="store_true", help="Print the rewritten text of a single file instead of writing it.")
    ap.add_argument("--no-log", action="store_true", help="Do not write a run log.")
    ap.add_argument("--verbose", action="store_true", help="Debug logging.")
    return ap


def _snapshot_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    snapshot = load_config_file(args.config)
    if args.prefix is not None:
        snapshot["prefix"] = args.prefix
    if args.skip:
        snapshot["skip_classes"] = list(args.skip)
    if args.pattern:
        snapshot["custom_patterns"] = list(args.pattern)
    if args.regex:
        snapshot["use_regex"] = True
        snapshot["custom_regex_patterns"] = list(args.regex)
    if args.no_log:
        snapshot["write_run_log"] = False
    return snapshot


def _print_stdout(path: str, snapshot: Dict[str, Any], adding: bool) -> int:
    settings = load_host_settings(snapshot)
    if not is_file_supported(path, settings.supported_extensions):
        print(f"[!] Unsupported file type: {path}", file=sys.stderr)
        return 1
    try:
        text = read_source(path)
    except (OSError, UnicodeDecodeError) as e:
        print(f"[!] Could not read {path}: {e}", file=sys.stderr)
        return 1
    result = rewrite_classes(text, load_prefixer_config(snapshot), adding)
    for w in result.warnings:
        print(f"[!] {w}", file=sys.stderr)
    sys.stdout.write(result.text)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        snapshot = _snapshot_from_args(args)
    except (OSError, ValueError) as e:
        print(f"[!] Could not load config: {e}", file=sys.stderr)
        return 2

    adding = args.mode == "add"

    if args.stdout:
        if len(args.files) != 1:
            ap.error("--stdout takes exactly one file")
        return _print_stdout(args.files[0], snapshot, adding)

    config = load_prefixer_config(snapshot)
    settings = load_host_settings(snapshot)
    report = process_files(
        args.files,
        config,
        settings,
        adding=adding,
        dry_run=args.dry_run,
        auto_format=False if args.no_format else None,
    )

    lines: List[str] = [format_file_line(fr) for fr in report["files"]]
    for w in report["warnings"]:
        lines.append(f"[!] {w}")
    lines.append("")
    lines.append(summarize_report(report))
    if report.get("log_path"):
        lines.append(f"Log: {report['log_path']}")
    print("\n".join(lines))

    return 1 if report["errors"] else 0


if __name__ == "__main__":
    sys.exit(main())
