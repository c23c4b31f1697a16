from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple
import logging
import re

from .data_defs import (
    AttributeMatcher,
    PrefixerConfig,
    DEFAULT_ATTRIBUTE,
    DEFAULT_CUSTOM_PATTERNS,
)


# =========================
# Regex helpers (attribute names, wildcard expansion, validation)
# =========================
# ! All attribute-name pattern logic lives here (no I/O, no Anki).

__all__ = [
    "wildcard_to_regex",
    "join_alternation",
    "validate_fragment",
    "screen_regex_fragments",
    "dedupe_preserving_order",
    "collect_fragments",
    "build_attribute_matcher",
]

log = logging.getLogger(__name__)

# * `*` in a wildcard template stands for a (possibly empty) identifier-like run
WILDCARD_RUN = r"[\w$-]*"

# * Group name for the captured class list in the direct-value pattern
CLASSES_GROUP = "classes"

# * Value openers shared by both passes
DIRECT_VALUE_SUFFIX = r"\s*=\s*[\"'`](?P<%s>[^\"'`]*)[\"'`]" % CLASSES_GROUP
EXPRESSION_SUFFIX = r"\s*=\s*\{"


def wildcard_to_regex(wild: str) -> str:
    """
    * Turn an attribute-name template into a regex fragment.
    - Literal parts are escaped; every `*` becomes [\\w$-]*.
    - Example: "*ClassName" -> "[\\w$-]*ClassName"
    """
    return WILDCARD_RUN.join(re.escape(part) for part in str(wild).split("*"))


def join_alternation(fragments: Sequence[str]) -> str:
    """* Wrap every fragment in (?:...) and join them into one group."""
    return "(?:%s)" % "|".join("(?:%s)" % f for f in fragments)


def validate_fragment(fragment: str, accepted: Sequence[str] = ()) -> Tuple[bool, str]:
    """
    * Try compiling one user-supplied attribute-name fragment.
    - Return (ok, message). On failure, message contains the reason.
    - Compiled joined with the `accepted` fragments inside the same wrapper the
      matcher uses, so a stray ")", a clashing (?P<classes>...) group or a
      group name reused from an earlier fragment is caught before the join.
    """
    alternation = join_alternation(list(accepted) + [fragment])
    try:
        re.compile(alternation + DIRECT_VALUE_SUFFIX)
        re.compile(alternation + EXPRESSION_SUFFIX)
    except re.error as e:
        return False, f"pattern={fragment!r}: {e}"
    return True, "ok"


def screen_regex_fragments(
    patterns: Iterable[str],
    accepted: Sequence[str] = (re.escape(DEFAULT_ATTRIBUTE),),
) -> Tuple[List[str], List[Tuple[str, str]]]:
    """
    * Accept regex fragments one by one against everything accepted so far.
    - Returns (accepted, rejected) where rejected holds (pattern, reason).
    - Blank entries and repeats are skipped silently.
    """
    ok_parts: List[str] = list(accepted)
    rejected: List[Tuple[str, str]] = []
    for patt in patterns:
        patt = str(patt)
        if not patt.strip() or patt in ok_parts:
            continue
        ok, msg = validate_fragment(patt, ok_parts)
        if not ok:
            rejected.append((patt, msg))
            continue
        ok_parts.append(patt)
    return ok_parts, rejected


def dedupe_preserving_order(items: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    uniq: List[str] = []
    for item in items:
        if item not in seen:
            uniq.append(item)
            seen.add(item)
    return uniq


def collect_fragments(
    config: PrefixerConfig,
    *,
    fallback_patterns: Sequence[str] = DEFAULT_CUSTOM_PATTERNS,
) -> Tuple[List[str], List[str]]:
    """
    * Resolve the attribute-name fragments for one run.
    - Returns (fragments, warnings). The default attribute always comes first.
    - Regex mode: custom_regex_patterns are used verbatim; a fragment that does
      not compile alongside the ones before it is dropped and reported, one
      warning each.
    - Wildcard mode: custom_patterns (or `fallback_patterns` when empty) are
      expanded with wildcard_to_regex.
    """
    base = [re.escape(DEFAULT_ATTRIBUTE)]
    warnings: List[str] = []

    if config.use_regex:
        parts, rejected = screen_regex_fragments(config.custom_regex_patterns, base)
        for patt, msg in rejected:
            warning = f"Invalid regex pattern: {patt}"
            log.warning("%s (%s)", warning, msg)
            warnings.append(warning)
    else:
        names = list(config.custom_patterns) or list(fallback_patterns)
        parts = base + [wildcard_to_regex(w) for w in names if str(w).strip()]

    return dedupe_preserving_order(parts), warnings


def build_attribute_matcher(
    config: PrefixerConfig,
    *,
    fallback_patterns: Sequence[str] = DEFAULT_CUSTOM_PATTERNS,
) -> AttributeMatcher:
    """
    * Compile the attribute alternation once per invocation.
    - `direct_rx` finds name="..." / name='...' / name=`...` and captures the
      class list as group "classes".
    - `expression_rx` finds name={ and ends right after the opening brace.
    """
    fragments, warnings = collect_fragments(config, fallback_patterns=fallback_patterns)
    alternation = join_alternation(fragments)
    return AttributeMatcher(
        alternation=alternation,
        direct_rx=re.compile(alternation + DIRECT_VALUE_SUFFIX),
        expression_rx=re.compile(alternation + EXPRESSION_SUFFIX),
        fragments=tuple(fragments),
        warnings=tuple(warnings),
    )
