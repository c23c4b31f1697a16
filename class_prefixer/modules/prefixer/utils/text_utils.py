from __future__ import annotations

# =========================
# Text helpers (class lists, previews)
# =========================
# ! Token-level prefix logic lives here; no scanning, no I/O.

from typing import AbstractSet, Iterable, List, Optional
import re

# * Precompiled regexes
WS_REGEX = re.compile(r"\s+")

__all__ = [
    "split_classes",
    "process_classes",
    "normalize_newlines",
    "safe_truncate",
]


def split_classes(class_string: str) -> List[str]:
    """* Split a class list on whitespace runs; empty tokens are dropped."""
    return [c for c in WS_REGEX.split(class_string or "") if c]


def _prefix_token(token: str, prefix: str, skip_classes: AbstractSet[str]) -> str:
    # Already prefixed tokens stay as-is so "add" is idempotent
    if token.startswith(prefix):
        return token
    if token in skip_classes:
        return token
    return prefix + token


def _unprefix_token(token: str, prefix: str) -> str:
    if token.startswith(prefix):
        return token[len(prefix):]
    return token


def process_classes(
    class_string: str,
    prefix: str,
    skip_classes: Optional[Iterable[str]] = None,
    adding: bool = True,
) -> str:
    """
    * Add or strip `prefix` on every token of one whitespace-separated class list.
    - Adding: tokens already carrying the prefix, or exactly listed in
      `skip_classes`, are left alone.
    - Removing: exactly one leading prefix is stripped; `skip_classes` is ignored.
    - Tokens are rejoined with single spaces, so irregular whitespace collapses
      even when no token changed.
    """
    tokens = split_classes(class_string)
    if adding:
        skip = frozenset(skip_classes or ())
        out = [_prefix_token(t, prefix, skip) for t in tokens]
    else:
        out = [_unprefix_token(t, prefix) for t in tokens]
    return " ".join(out)


def normalize_newlines(s: str) -> str:
    """* Convert CRLF/CR to LF for consistent previews."""
    if not s:
        return ""
    return s.replace("\r\n", "\n").replace("\r", "\n")


def safe_truncate(s: str, max_chars: int) -> str:
    """
    * Clip a preview string to `max_chars`, marking the cut with an ellipsis.
    """
    if max_chars <= 0 or not s:
        return s or ""
    if len(s) <= max_chars:
        return s
    return s[: max(max_chars - 1, 0)] + "…"
