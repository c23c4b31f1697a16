from __future__ import annotations

from typing import List, Optional, Sequence, Tuple
import logging
import re

from .data_defs import (
    AttributeMatcher,
    PrefixerConfig,
    RewriteResult,
    DEFAULT_CUSTOM_PATTERNS,
)
from .regex_utils import CLASSES_GROUP, build_attribute_matcher
from .scanner import find_matching_brace, replace_quoted_strings
from .text_utils import process_classes

__all__ = ["rewrite_classes", "add_prefix", "remove_prefix"]

log = logging.getLogger(__name__)


# =========================
# Public entrypoints
# =========================
def add_prefix(text: str, config: PrefixerConfig) -> str:
    """* Prefix every class token; returns `text` itself when nothing changed."""
    return rewrite_classes(text, config, adding=True).text


def remove_prefix(text: str, config: PrefixerConfig) -> str:
    """* Strip the prefix from every class token; the skip list is not applied."""
    return rewrite_classes(text, config, adding=False).text


def rewrite_classes(
    text: str,
    config: PrefixerConfig,
    adding: bool,
    *,
    fallback_patterns: Sequence[str] = DEFAULT_CUSTOM_PATTERNS,
    matcher: Optional[AttributeMatcher] = None,
) -> RewriteResult:
    """\
    * Orchestrate both passes over one buffer.
    - Pass 1 rewrites direct quoted values (name="a b").
    - Pass 2 rewrites quoted strings inside expression values (name={...}),
      working on pass 1's output.
    - `changed` is False when the output is identical to the input; `text` is
      then the very same input object.
    """
    if matcher is None:
        matcher = build_attribute_matcher(config, fallback_patterns=fallback_patterns)
    skip = config.skip_classes if adding else frozenset()

    def _visit(content: str, _quote: str = "") -> str:
        return process_classes(content, config.prefix, skip, adding)

    working, direct_n = _rewrite_direct_values(text, matcher.direct_rx, _visit)
    working, blocks_n, skipped_n = _rewrite_expression_values(working, matcher.expression_rx, _visit)

    changed = working != text
    return RewriteResult(
        text=working if changed else text,
        changed=changed,
        adding=adding,
        direct_values=direct_n,
        expression_blocks=blocks_n,
        unbalanced_skipped=skipped_n,
        warnings=list(matcher.warnings),
    )


# =========================
# Passes
# =========================
def _rewrite_direct_values(text: str, rx: re.Pattern, visit) -> Tuple[str, int]:
    """
    * Replace only the captured class list of each direct quoted value.
    - The attribute name, "=", spacing and both quote characters are kept as-is.
    """
    out: List[str] = []
    last = 0
    count = 0
    for m in rx.finditer(text):
        start, end = m.span(CLASSES_GROUP)
        out.append(text[last:start])
        out.append(visit(m.group(CLASSES_GROUP)))
        last = end
        count += 1
    if not count:
        return text, 0
    out.append(text[last:])
    return "".join(out), count


def _rewrite_expression_values(text: str, rx: re.Pattern, visit) -> Tuple[str, int, int]:
    """
    * Rewrite quoted strings inside every name={ ... } expression value.
    - Unbalanced openers are left untouched; the search resumes after the "{".
    - After a rewrite the search resumes past the closing "}", so nested
      attribute openers inside a rewritten body are never visited twice.
    """
    out: List[str] = []
    last = 0
    pos = 0
    blocks = 0
    skipped = 0

    while True:
        m = rx.search(text, pos)
        if m is None:
            break
        open_index = m.end() - 1
        close_index = find_matching_brace(text, open_index)
        if close_index is None:
            log.debug("Unbalanced braces after %r at offset %d; skipped", m.group(0), m.start())
            skipped += 1
            pos = m.end()
            continue

        body = text[open_index + 1:close_index]
        out.append(text[last:open_index + 1])
        out.append(replace_quoted_strings(body, visit))
        last = close_index
        pos = close_index + 1
        blocks += 1

    if not blocks:
        return text, 0, skipped
    out.append(text[last:])
    return "".join(out), blocks, skipped
