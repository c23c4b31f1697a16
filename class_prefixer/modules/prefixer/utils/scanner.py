from __future__ import annotations

# =========================
# Character scanners (brace matching, quoted strings)
# =========================
# ! Plain left-to-right state machines over unparsed source text.
# ! Template literals are opaque: nothing inside `...` (including ${...}) is
# ! interpreted for braces or quotes. Interpolations are never re-entered.

from typing import Callable, Iterator, List, Optional

from .data_defs import QuotedSpan, ScanState

__all__ = [
    "find_matching_brace",
    "iter_quoted_strings",
    "replace_quoted_strings",
]

QUOTE_STATES = {
    "'": ScanState.IN_SINGLE,
    '"': ScanState.IN_DOUBLE,
    "`": ScanState.IN_TEMPLATE,
}
CLOSERS = {state: ch for ch, state in QUOTE_STATES.items()}

Visitor = Callable[[str, str], str]


def find_matching_brace(text: str, open_index: int) -> Optional[int]:
    """
    * Return the index of the "}" closing the "{" at `open_index`, or None.
    - Braces inside single/double quotes and template literals do not count.
    - A backslash inside any string state consumes the next character.
    """
    depth = 0
    state = ScanState.NORMAL
    i = open_index
    n = len(text)

    while i < n:
        ch = text[i]

        if state is not ScanState.NORMAL:
            if ch == "\\":
                i += 2
                continue
            if ch == CLOSERS[state]:
                state = ScanState.NORMAL
            i += 1
            continue

        if ch in QUOTE_STATES:
            state = QUOTE_STATES[ch]
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1

    return None


def _skip_template(text: str, i: int) -> int:
    """Return the index just past the template literal opened at text[i]."""
    n = len(text)
    j = i + 1
    while j < n:
        ch = text[j]
        if ch == "\\":
            j += 2
            continue
        if ch == "`":
            return j + 1
        j += 1
    return n


def _find_string_close(text: str, i: int) -> Optional[int]:
    """Return the index of the quote closing the string opened at text[i]."""
    quote = text[i]
    n = len(text)
    j = i + 1
    while j < n:
        ch = text[j]
        if ch == "\\":
            j += 2
            continue
        if ch == quote:
            return j
        j += 1
    return None


def iter_quoted_strings(text: str) -> Iterator[QuotedSpan]:
    """
    * Lazily yield every single/double-quoted string in `text`.
    - Escapes stay verbatim in `content` (nothing is decoded).
    - Template literals are skipped whole; quotes inside them never open strings.
    - An unterminated string ends the scan: the rest of the text belongs to it.
      Scanning does not resume after the lone quote. Expression bodies never
      reach this case, since find_matching_brace finds no close for them.
    """
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "`":
            i = _skip_template(text, i)
            continue
        if ch == '"' or ch == "'":
            close = _find_string_close(text, i)
            if close is None:
                return
            yield QuotedSpan(start=i, end=close + 1, quote=ch, content=text[i + 1:close])
            i = close + 1
            continue
        i += 1


def replace_quoted_strings(text: str, visit: Visitor) -> str:
    """
    * Rewrite the content of every quoted string via `visit(content, quote)`.
    - Original quote characters are re-emitted around the visitor's result.
    - Everything outside the strings is copied through unchanged.
    """
    out: List[str] = []
    last = 0
    for span in iter_quoted_strings(text):
        out.append(text[last:span.start])
        out.append(span.quote + visit(span.content, span.quote) + span.quote)
        last = span.end
    out.append(text[last:])
    return "".join(out)
