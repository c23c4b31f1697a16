from __future__ import annotations

# =========================
# File-system helpers (gate, read/write, formatter)
# =========================
# ! Host-side I/O only; the engine never touches files.

from pathlib import Path
from typing import List, Sequence, Tuple, Union
import logging
import shlex
import subprocess

from .data_defs import DEFAULT_EXTENSIONS

__all__ = [
    "is_file_supported",
    "read_source",
    "write_source",
    "build_format_args",
    "run_formatter",
]

log = logging.getLogger(__name__)

FORMAT_TIMEOUT_SECONDS = 60


def is_file_supported(path: Union[str, Path], extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> bool:
    """* Case-insensitive suffix test against the supported extensions."""
    name = str(path).lower()
    return any(name.endswith(ext.lower()) for ext in extensions)


def read_source(path: Union[str, Path]) -> str:
    """
    * Read a source file as UTF-8 without newline translation.
    - Line endings must survive a rewrite byte-for-byte.
    """
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_source(path: Union[str, Path], text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def build_format_args(command: str, path: Union[str, Path]) -> List[str]:
    """
    * Split `command` into argv and substitute the {path} placeholder.
    - When the command has no {path} placeholder the path is appended.
    """
    args = shlex.split(command)
    if not args:
        return []
    target = str(path)
    if any("{path}" in a for a in args):
        return [a.replace("{path}", target) for a in args]
    return args + [target]


def run_formatter(path: Union[str, Path], command: str) -> Tuple[bool, str]:
    """
    * Run the configured formatter on one rewritten file.
    - Return (ok, message). Failures are reported, never raised.
    """
    args = build_format_args(command, path)
    if not args:
        return False, "no format_command configured"
    try:
        proc = subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=FORMAT_TIMEOUT_SECONDS,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        log.error("Formatter failed for %s: %s", path, e)
        return False, str(e)

    if proc.returncode != 0:
        msg = (proc.stderr or proc.stdout or "").strip() or f"exit code {proc.returncode}"
        log.error("Formatter exited with %s for %s: %s", proc.returncode, path, msg)
        return False, msg
    return True, "ok"

