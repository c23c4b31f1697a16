from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
import json
import os

from .data_defs import (
    HostSettings,
    PrefixerConfig,
    DEFAULT_EXTENSIONS,
    DEFAULT_LOG_DIR,
    DEFAULT_LOG_MAX_AGE_HOURS,
    DEFAULT_PREFIX,
    DEFAULT_REGEX_PATTERNS,
    TS_FORMAT,
)
from .regex_utils import screen_regex_fragments

__all__ = [
    "apply_config_defaults",
    "load_prefixer_config",
    "load_host_settings",
    "load_config_file",
    "validate_config_snapshot",
]

LIST_KEYS = ("skip_classes", "custom_patterns", "custom_regex_patterns", "supported_extensions")


def _coerce_int(val: Any, fallback: int) -> int:
    try:
        return int(val)
    except (TypeError, ValueError):
        return fallback


def _coerce_str_list(val: Any) -> List[str]:
    """* Accept a list, a single string, or None; drop blanks, keep order."""
    if val is None:
        return []
    if isinstance(val, str):
        val = [val]
    if not isinstance(val, (list, tuple, set, frozenset)):
        return []
    return [str(v).strip() for v in val if str(v).strip()]


def _norm_path(p: Optional[str]) -> Optional[Path]:
    if not p:
        return None
    try:
        return Path(os.path.expanduser(p)).resolve()
    except (OSError, RuntimeError):
        return None


def apply_config_defaults(snapshot: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    * Ensure every known key exists; do NOT clobber explicit values.
    - Light-touch; type coercion happens in load_prefixer_config / load_host_settings.
    """
    out = dict(snapshot or {})
    out.setdefault("prefix", DEFAULT_PREFIX)
    out.setdefault("skip_classes", [])
    out.setdefault("auto_format", False)
    out.setdefault("custom_patterns", [])
    out.setdefault("use_regex", False)
    out.setdefault("custom_regex_patterns", list(DEFAULT_REGEX_PATTERNS))
    out.setdefault("format_command", "")
    out.setdefault("supported_extensions", list(DEFAULT_EXTENSIONS))
    out.setdefault("log_dir", str(DEFAULT_LOG_DIR))
    out.setdefault("ts_format", TS_FORMAT)
    out.setdefault("log_max_age_hours", DEFAULT_LOG_MAX_AGE_HOURS)
    out.setdefault("write_run_log", True)
    return out


def load_prefixer_config(snapshot: Optional[Dict[str, Any]] = None, **overrides: Any) -> PrefixerConfig:
    """
    * Build the immutable engine config from a raw settings dict.
    - `overrides` (e.g. from CLI flags) win over the snapshot when not None.
    - A blank or non-string prefix falls back to DEFAULT_PREFIX.
    """
    data = apply_config_defaults(snapshot)
    for key, val in overrides.items():
        if val is not None:
            data[key] = val

    prefix = data.get("prefix")
    if not isinstance(prefix, str) or not prefix:
        prefix = DEFAULT_PREFIX

    return PrefixerConfig(
        prefix=prefix,
        skip_classes=frozenset(_coerce_str_list(data.get("skip_classes"))),
        custom_patterns=tuple(_coerce_str_list(data.get("custom_patterns"))),
        use_regex=bool(data.get("use_regex")),
        custom_regex_patterns=tuple(_coerce_str_list(data.get("custom_regex_patterns"))),
        auto_format=bool(data.get("auto_format")),
    )


def load_host_settings(snapshot: Optional[Dict[str, Any]] = None) -> HostSettings:
    """Host-side settings: formatter, file gate, run logs."""
    data = apply_config_defaults(snapshot)

    exts: List[str] = []
    for ext in _coerce_str_list(data.get("supported_extensions")) or list(DEFAULT_EXTENSIONS):
        ext = ext.lower()
        exts.append(ext if ext.startswith(".") else "." + ext)

    # ? Created lazily by the run-log writer, not here
    log_dir_path = _norm_path(str(data.get("log_dir") or "")) or DEFAULT_LOG_DIR

    return HostSettings(
        format_command=str(data.get("format_command") or "").strip(),
        supported_extensions=tuple(exts),
        log_dir=str(log_dir_path),
        ts_format=str(data.get("ts_format") or TS_FORMAT),
        log_max_age_hours=_coerce_int(data.get("log_max_age_hours"), DEFAULT_LOG_MAX_AGE_HOURS),
        write_run_log=bool(data.get("write_run_log", True)),
    )


def load_config_file(config_path: Union[str, Path, None]) -> Dict[str, Any]:
    """Read a JSON settings file (same shape as config.json); {} when absent."""
    if not config_path:
        return {}
    cfg_path = Path(config_path).expanduser()
    data = json.loads(cfg_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{cfg_path}: expected a JSON object, got {type(data).__name__}")
    return data


def validate_config_snapshot(snapshot: Dict[str, Any]) -> Tuple[bool, List[str]]:
    """
    * Check a settings dict before it is saved.
    - Return (ok, messages). Messages name every problem found, not just the first.
    """
    problems: List[str] = []
    if not isinstance(snapshot, dict):
        return False, ["Settings must be a JSON object."]

    prefix = snapshot.get("prefix", DEFAULT_PREFIX)
    if not isinstance(prefix, str) or not prefix.strip():
        problems.append("'prefix' must be a non-empty string.")
    elif prefix != prefix.strip() or any(ch.isspace() for ch in prefix):
        problems.append("'prefix' must not contain whitespace.")

    for key in LIST_KEYS:
        val = snapshot.get(key)
        if val is not None and not isinstance(val, list):
            problems.append(f"'{key}' must be a list of strings.")

    for key in ("auto_format", "use_regex", "write_run_log"):
        val = snapshot.get(key)
        if val is not None and not isinstance(val, bool):
            problems.append(f"'{key}' must be true or false.")

    # ! Checked as one alternation, the way the matcher compiles them
    _, rejected = screen_regex_fragments(_iter_regex_fragments(snapshot.get("custom_regex_patterns")))
    for _patt, msg in rejected:
        problems.append(f"Invalid regex pattern: {msg}")

    return (not problems), problems


def _iter_regex_fragments(val: Any) -> Iterable[str]:
    if isinstance(val, list):
        return _coerce_str_list(val)
    return []
