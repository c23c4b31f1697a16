from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Sequence, Union
import logging

from .data_defs import FileOutcome, FileReport, HostSettings, PrefixerConfig, DEFAULT_EXTENSIONS
from .engine import rewrite_classes
from .file_utils import is_file_supported, read_source, run_formatter, write_source
from .logger import write_run_log
from .regex_utils import build_attribute_matcher

__all__ = ["process_files", "summarize_report"]

log = logging.getLogger(__name__)


# =========================
# Batch runner (pure Python; shared by toolbar + CLI)
# =========================
def process_files(
    paths: Sequence[Union[str, Path]],
    config: PrefixerConfig,
    settings: HostSettings,
    *,
    adding: bool,
    dry_run: bool = False,
    auto_format: bool | None = None,
) -> Dict[str, Any]:
    """\
    * Rewrite each file in `paths`, one engine call per file.
    - Unsupported extensions are reported and left untouched.
    - Unchanged files are never written and never formatted.
    - Read/write/format failures are recorded per file; the run continues.
    - Returns a report dict (counters, warnings, per-file FileReport list, log path).
    """
    fmt = config.auto_format if auto_format is None else auto_format
    # ! Compile once per run so every invalid regex warns exactly once
    matcher = build_attribute_matcher(config)

    files: List[FileReport] = []
    for raw in paths:
        path = Path(raw)
        if not is_file_supported(path, settings.supported_extensions):
            files.append(FileReport(path=str(path), outcome=FileOutcome.UNSUPPORTED))
            continue

        try:
            before = read_source(path)
        except (OSError, UnicodeDecodeError) as e:
            log.error("Could not read %s: %s", path, e)
            files.append(FileReport(path=str(path), outcome=FileOutcome.ERROR, error=str(e)))
            continue

        result = rewrite_classes(before, config, adding, matcher=matcher)
        fr = FileReport(
            path=str(path),
            outcome=FileOutcome.CHANGED if result.changed else FileOutcome.UNCHANGED,
            direct_values=result.direct_values,
            expression_blocks=result.expression_blocks,
            unbalanced_skipped=result.unbalanced_skipped,
            before=before,
            after=result.text,
        )

        if result.changed and not dry_run:
            try:
                write_source(path, result.text)
            except OSError as e:
                log.error("Could not write %s: %s", path, e)
                fr.outcome = FileOutcome.ERROR
                fr.error = str(e)
                files.append(fr)
                continue
            if fmt and settings.format_command:
                ok, msg = run_formatter(path, settings.format_command)
                fr.formatted = ok
                if not ok:
                    fr.error = f"format: {msg}"

        files.append(fr)

    report: Dict[str, Any] = {
        "adding": adding,
        "dry_run": dry_run,
        "prefix": config.prefix,
        "use_regex": config.use_regex,
        "fragments": list(matcher.fragments),
        "extensions": list(settings.supported_extensions),
        "warnings": list(matcher.warnings),
        "files": files,
        "changed": sum(1 for f in files if f.outcome is FileOutcome.CHANGED),
        "unchanged": sum(1 for f in files if f.outcome is FileOutcome.UNCHANGED),
        "unsupported": sum(1 for f in files if f.outcome is FileOutcome.UNSUPPORTED),
        "errors": sum(1 for f in files if f.outcome is FileOutcome.ERROR),
    }
    report["log_path"] = write_run_log(report, settings, files)
    return report


def summarize_report(report: Dict[str, Any]) -> str:
    """
    * One-line, user-facing summary in the wording of the toolbar tooltips.
    - Example: 'Prefix "app-" added (2 files)'
    """
    adding = bool(report.get("adding"))
    prefix = report.get("prefix", "")
    changed = int(report.get("changed", 0) or 0)
    unsupported = int(report.get("unsupported", 0) or 0)
    errors = int(report.get("errors", 0) or 0)

    if changed == 0:
        if unsupported and not (report.get("unchanged") or errors):
            exts = ", ".join(report.get("extensions") or DEFAULT_EXTENSIONS)
            msg = f"This file type is not supported. Supported file types: {exts}"
        elif adding:
            msg = "Did not find any classes to prefix"
        else:
            msg = "Did not find any prefixes to remove"
    else:
        verb = "would be" if report.get("dry_run") else ""
        action = "added" if adding else "removed"
        files_label = f"{changed} file" + ("" if changed == 1 else "s")
        msg = f'Prefix "{prefix}" {verb + " " if verb else ""}{action} ({files_label})'

    if errors:
        msg += f" • {errors} error" + ("" if errors == 1 else "s")
    return msg
