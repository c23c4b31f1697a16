from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

from ... import log_cleanup
from .data_defs import FileOutcome, FileReport, HostSettings, TS_FORMAT
from .text_utils import normalize_newlines, safe_truncate

__all__ = ["highlight_diff_snippet", "format_file_line", "write_run_log"]

log = logging.getLogger(__name__)

REPORT_PREFIX = "Class_Prefixer__"


# --- Internal helpers for human-friendly previews ---------------------------

def highlight_diff_snippet(
    before: str,
    after: str,
    max_len: int = 240,
    context: int = 40,
) -> Tuple[str, str]:
    """
    * Return BEFORE/AFTER strings with the changed region highlighted.
    - Wrap the differing span in [[...]] for both before and after.
    - Trim to a small window around the change, with basic max_len clipping.
    """
    b = before or ""
    a = after or ""

    def clip(s: str) -> str:
        return safe_truncate(s, max_len)

    if b == a:
        return clip(b), clip(a)

    # 1) Common prefix length
    prefix = 0
    for cb, ca in zip(b, a):
        if cb != ca:
            break
        prefix += 1

    # 2) Common suffix length (avoid crossing prefix)
    suffix = 0
    for cb, ca in zip(reversed(b), reversed(a)):
        if len(b) - suffix <= prefix or len(a) - suffix <= prefix:
            break
        if cb != ca:
            break
        suffix += 1

    b_diff_end = len(b) - suffix
    a_diff_end = len(a) - suffix

    # 3) Window around the change
    win_start = max(0, prefix - context)
    b_window = b[win_start:min(len(b), b_diff_end + context)]
    a_window = a[win_start:min(len(a), a_diff_end + context)]

    def mark(s: str, start: int, end: int) -> str:
        start = max(0, min(len(s), start))
        end = max(start, min(len(s), end))
        return s[:start] + "[[" + s[start:end] + "]]" + s[end:]

    b_marked = mark(b_window, prefix - win_start, b_diff_end - win_start)
    a_marked = mark(a_window, prefix - win_start, a_diff_end - win_start)
    return clip(b_marked), clip(a_marked)


def format_file_line(fr: FileReport) -> str:
    """
    $ One summary line per file, shared by the run log and the CLI.
      e.g. "changed     src/App.tsx  (direct: 2, expressions: 1)"
    """
    line = f"{fr.outcome.value:<11} {fr.path}"
    if fr.outcome in (FileOutcome.CHANGED, FileOutcome.UNCHANGED):
        line += f"  (direct: {fr.direct_values}, expressions: {fr.expression_blocks}"
        if fr.unbalanced_skipped:
            line += f", unbalanced skipped: {fr.unbalanced_skipped}"
        line += ")"
    if fr.formatted is not None:
        line += "  formatted" if fr.formatted else "  format failed"
    if fr.error:
        line += f"  ! {fr.error}"
    return line


# --- Run log -----------------------------------------------------------------

def _one_line(s: str) -> str:
    return normalize_newlines(s).replace("\n", " ⏎ ")


def write_run_log(
    report: Dict[str, Any],
    settings: HostSettings,
    files: Sequence[FileReport],
) -> Optional[Path]:
    """\
    * Emit a markdown log summarizing one add/remove run.
    - Old reports in `log_dir` are pruned first (log_max_age_hours).
    - Returns the Path to the written file, or None if disabled or on error.
    """
    if not settings.write_run_log:
        return None

    ts_fmt = settings.ts_format or TS_FORMAT
    ts = datetime.now().strftime(ts_fmt)
    out_dir = Path(settings.log_dir)

    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        log_cleanup.delete_old_log_files(out_dir, max_age_hours=settings.log_max_age_hours, pattern=f"{REPORT_PREFIX}*.md")
    except OSError as e:
        log.error("Could not prepare log dir %s: %s", out_dir, e)
        return None

    lines: List[str] = []

    # Header
    mode = "add" if report.get("adding") else "remove"
    lines.append(f"# Class Prefixer — {mode} — {ts}")
    lines.append("")

    # Settings section
    lines.append("## Settings")
    lines.append(f"- prefix: `{report.get('prefix', '')}`")
    lines.append(f"- DRY_RUN: {bool(report.get('dry_run', False))}")
    lines.append(f"- use_regex: {bool(report.get('use_regex', False))}")
    lines.append(f"- attribute fragments: `{' | '.join(report.get('fragments') or [])}`")
    lines.append(f"- log_dir: `{settings.log_dir}`")
    lines.append("")

    # Summary
    lines.append("## Summary")
    for outcome in FileOutcome:
        n = sum(1 for fr in files if fr.outcome is outcome)
        lines.append(f"- {outcome.value}: {n}")
    lines.append("")

    warnings = list(report.get("warnings") or [])
    if warnings:
        lines.append("## Warnings")
        for w in warnings:
            lines.append(f"- {w}")
        lines.append("")

    lines.append("## Files")
    for fr in files:
        lines.append(f"- `{format_file_line(fr)}`")
        if fr.outcome is FileOutcome.CHANGED and fr.before != fr.after:
            b, a = highlight_diff_snippet(_one_line(fr.before), _one_line(fr.after))
            lines.append(f"  - BEFORE: `{b}`")
            lines.append(f"  - AFTER:  `{a}`")
    lines.append("")

    out_path = out_dir / f"{REPORT_PREFIX}{ts}.md"
    try:
        out_path.write_text("\n".join(lines), encoding="utf-8")
    except OSError as e:
        log.error("Could not write run log %s: %s", out_path, e)
        return None
    return out_path
