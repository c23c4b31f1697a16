"""
log_cleanup.py

Prune old Class Prefixer run reports.

The run-log writer calls delete_old_log_files() before every new report.
It can also be run directly:

    python -m class_prefixer.modules.log_cleanup --hours 6 --dry-run
"""

from __future__ import annotations

import argparse
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .prefixer.utils.data_defs import DEFAULT_LOG_DIR, DEFAULT_LOG_MAX_AGE_HOURS

log = logging.getLogger(__name__)

# ==========================
# Defaults
# ==========================

LOGS_ROOT = DEFAULT_LOG_DIR
MAX_AGE_HOURS = DEFAULT_LOG_MAX_AGE_HOURS
REPORT_GLOB = "*.md"


# ==========================
# Helpers
# ==========================

def _report_files(root: Path, pattern: str) -> Iterable[Path]:
    # ! Non-recursive: reports are written flat into the log dir
    return (p for p in root.glob(pattern) if p.is_file())


def _modified_before(path: Path, cutoff: datetime) -> bool:
    try:
        return datetime.fromtimestamp(path.stat().st_mtime) < cutoff
    except OSError:
        # ? Vanished or unreadable; not ours to judge
        return False


def delete_old_log_files(
    base_dir: Optional[Path | str] = None,
    max_age_hours: Optional[int] = None,
    dry_run: bool = False,
    pattern: str = REPORT_GLOB,
) -> List[Path]:
    """
    * Remove reports in `base_dir` last modified more than `max_age_hours` ago.
    - `base_dir` defaults to LOGS_ROOT, `max_age_hours` to MAX_AGE_HOURS.
    - `max_age_hours <= 0` turns pruning off.
    - Returns the files removed (or, with dry_run, the ones that would be).
    """
    root = LOGS_ROOT if base_dir is None else Path(base_dir)
    hours = MAX_AGE_HOURS if max_age_hours is None else max_age_hours
    if hours <= 0 or not root.is_dir():
        return []

    cutoff = datetime.now() - timedelta(hours=hours)
    stale = [p for p in _report_files(root, pattern) if _modified_before(p, cutoff)]
    if dry_run:
        return stale

    removed: List[Path] = []
    for path in stale:
        try:
            path.unlink()
        except OSError as e:
            log.warning("Could not delete old report %s: %s", path, e)
            continue
        removed.append(path)
    return removed


# ==========================
# Direct execution
# ==========================

def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Delete old Class Prefixer run reports.")
    ap.add_argument("--dir", default=str(LOGS_ROOT), help=f"Log directory (default: {LOGS_ROOT})")
    ap.add_argument("--hours", type=int, default=MAX_AGE_HOURS, help="Age threshold in hours; 0 disables.")
    ap.add_argument("--pattern", default=REPORT_GLOB, help="Glob selecting report files.")
    ap.add_argument("--dry-run", action="store_true", help="List what would be deleted.")
    args = ap.parse_args(argv)

    removed = delete_old_log_files(args.dir, args.hours, dry_run=args.dry_run, pattern=args.pattern)
    verb = "Would delete" if args.dry_run else "Deleted"
    if not removed:
        print(f"Nothing older than {args.hours}h in {args.dir}")
        return 0
    print(f"{verb} {len(removed)} file(s):")
    for p in removed:
        print(f"  - {p}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
