from __future__ import annotations

# * Standard library
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union
import logging
import traceback

# * Anki/Qt – optional at import time to keep unit tests simple
try:  # pragma: no cover
    from aqt import mw  # type: ignore
except Exception:  # pragma: no cover
    mw = None  # Allow import outside Anki (e.g., tests, CLI)

from .utils.config_utils import load_host_settings, load_prefixer_config
from .utils.data_defs import HostSettings, PrefixerConfig
from .utils.engine import add_prefix, remove_prefix, rewrite_classes
from .utils.runner import process_files, summarize_report

__all__ = [
    "add_prefix",
    "remove_prefix",
    "rewrite_classes",
    "PrefixerConfig",
    "run_prefixer",
    "run_add_prefix_from_toolbar",
    "run_remove_prefix_from_toolbar",
]

ADDON_PACKAGE = __name__.split(".")[0]

log = logging.getLogger(__name__)


# -----------------------------
# Public API wrapper (host runs)
# ------------------------------
def run_prefixer(
    paths: Sequence[Union[str, Path]],
    *,
    adding: bool,
    snapshot: Optional[Dict[str, Any]] = None,
    dry_run: bool = False,
) -> Dict[str, Any]:
    """
    Entry point used by host modules.

    - paths: source files to rewrite in place
    - adding: True to add the prefix, False to strip it
    - snapshot: raw settings dict (config.json shape); defaults fill the gaps
    - dry_run: compute and log, but never write or format

    Returns the runner's report dict.
    """
    config = load_prefixer_config(snapshot)
    settings = load_host_settings(snapshot)
    return process_files(paths, config, settings, adding=adding, dry_run=dry_run)


# ------------------------------
# Toolbar entrypoints
# ------------------------------
def run_add_prefix_from_toolbar() -> None:
    _run_from_toolbar(adding=True)


def run_remove_prefix_from_toolbar() -> None:
    _run_from_toolbar(adding=False)


def _prompt_source_files(settings: HostSettings, last_dir: Optional[str]) -> List[str]:
    """Ask for source files; the dialog filter mirrors supported_extensions."""
    from aqt.qt import QFileDialog  # type: ignore

    patterns = " ".join(f"*{ext}" for ext in settings.supported_extensions)
    start_dir = str(last_dir or Path.home())
    files, _ = QFileDialog.getOpenFileNames(
        mw,
        "Class Prefixer: choose source files",
        start_dir,
        f"Source files ({patterns});;All files (*)",
    )
    return list(files or [])


def _remember_last_dir(manager, files: List[str]) -> None:
    try:
        manager.set("last_dir", str(Path(files[0]).parent))
    except Exception as e:
        log.debug("Could not remember last_dir: %s", e)


def _run_from_toolbar(adding: bool) -> None:
    """
    Launcher wired to the toolbar/menu actions.
    Reads the add-on config, asks for files, rewrites them, then notifies.
    """
    if mw is None:  # pragma: no cover
        # ! Calling from outside Anki – use the CLI instead
        raise RuntimeError("run_*_from_toolbar() must be called from within Anki (aqt.mw unavailable).")

    from aqt.utils import showText, showWarning, tooltip  # type: ignore

    from ...assets.config_manager import ConfigManager

    manager = ConfigManager(ADDON_PACKAGE)
    settings = manager.host_settings()
    files = _prompt_source_files(settings, manager.get("last_dir"))
    if not files:
        tooltip("Class Prefixer: cancelled", period=3000)
        return
    _remember_last_dir(manager, files)

    try:
        report = process_files(files, manager.prefixer_config(), settings, adding=adding)
    except Exception:
        err = traceback.format_exc()
        showText(f"Class Prefixer failed:\n\n{err}", title="Class Prefixer Error")
        return

    # * One warning per invalid regex pattern
    for warning in report.get("warnings") or []:
        showWarning(f"ClassPrefixer: {warning}", title="Class Prefixer")

    try:
        tooltip(f"ClassPrefixer: {summarize_report(report)}", period=5000)
    except Exception as e:
        log.debug("Tooltip failed: %s", e)

    if report.get("errors"):
        lines = [f"{f.path}: {f.error}" for f in report.get("files") or [] if f.error]
        showText("Some files could not be processed:\n\n" + "\n".join(lines), title="Class Prefixer")
