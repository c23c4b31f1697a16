import inspect
import logging
import re

from class_prefixer.modules.prefixer.utils.data_defs import PrefixerConfig
from class_prefixer.modules.prefixer.utils.regex_utils import (
    build_attribute_matcher,
    collect_fragments,
    dedupe_preserving_order,
    screen_regex_fragments,
    validate_fragment,
    wildcard_to_regex,
)


def test_wildcard_to_regex_escapes_literals():
    assert wildcard_to_regex("*ClassName") == r"[\w$-]*ClassName"
    assert wildcard_to_regex("data.*") == r"data\.[\w$-]*"


def test_bare_wildcard_matches_any_name():
    rx = re.compile(r"^(?:%s)$" % wildcard_to_regex("*"))
    assert rx.match("anything")
    assert rx.match("")
    assert not rx.match("has space")


def test_validate_fragment():
    assert validate_fragment(r"\w+Class") == (True, "ok")
    ok, msg = validate_fragment("[unclosed")
    assert not ok
    assert "[unclosed" in msg


def test_validate_fragment_rejects_clashing_group_name():
    ok, _ = validate_fragment(r"(?P<classes>x)")
    assert not ok


def test_dedupe_preserving_order():
    assert dedupe_preserving_order(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


def test_default_attribute_always_first():
    fragments, warnings = collect_fragments(PrefixerConfig())
    assert fragments[0] == "className"
    assert fragments[1:] == [r"[\w$-]*ClassName"]
    assert warnings == []


def test_custom_wildcards_replace_fallback():
    cfg = PrefixerConfig(custom_patterns=("tw*", "*ClassName"))
    fragments, _ = collect_fragments(cfg)
    assert fragments == ["className", r"tw[\w$-]*", r"[\w$-]*ClassName"]


def test_regex_mode_uses_fragments_verbatim():
    cfg = PrefixerConfig(use_regex=True, custom_regex_patterns=(r"\w+ClassName", r"\w+ClassName"))
    fragments, warnings = collect_fragments(cfg)
    assert fragments == ["className", r"\w+ClassName"]
    assert warnings == []


def test_invalid_regex_is_dropped_with_one_warning(caplog):
    """Each invalid fragment yields exactly one warning; valid ones survive."""
    cfg = PrefixerConfig(
        use_regex=True,
        custom_regex_patterns=("(bad", r"\w+Class", "[worse", "  "),
    )
    with caplog.at_level(logging.WARNING):
        fragments, warnings = collect_fragments(cfg)
    assert fragments == ["className", r"\w+Class"]
    assert warnings == ["Invalid regex pattern: (bad", "Invalid regex pattern: [worse"]
    assert sum("Invalid regex pattern" in r.getMessage() for r in caplog.records) == 2


def test_matcher_direct_rx_captures_class_list():
    m = build_attribute_matcher(PrefixerConfig())
    hit = m.direct_rx.search('<a iconClassName = "x y">')
    assert hit is not None
    assert hit.group("classes") == "x y"
    assert m.direct_rx.search('<a class="x">') is None


def test_matcher_expression_rx_ends_after_brace():
    m = build_attribute_matcher(PrefixerConfig())
    text = "<a className={cn('x')}>"
    hit = m.expression_rx.search(text)
    assert hit is not None
    assert text[hit.end() - 1] == "{"


def test_matcher_carries_warnings():
    cfg = PrefixerConfig(use_regex=True, custom_regex_patterns=("(",))
    m = build_attribute_matcher(cfg)
    assert m.fragments == ("className",)
    assert m.warnings == ("Invalid regex pattern: (",)


def test_fragments_reusing_a_group_name_keep_the_first():
    """Fragments that compile alone but clash when joined: the later one is dropped."""
    cfg = PrefixerConfig(
        use_regex=True,
        custom_regex_patterns=(r"(?P<n>icon)ClassName", r"(?P<n>wrap)ClassName"),
    )
    m = build_attribute_matcher(cfg)
    assert m.fragments == ("className", r"(?P<n>icon)ClassName")
    assert m.warnings == (r"Invalid regex pattern: (?P<n>wrap)ClassName",)
    hit = m.direct_rx.search('<a iconClassName="x" />')
    assert hit is not None and hit.group("classes") == "x"


def test_validate_fragment_against_accepted():
    assert validate_fragment(r"(?P<n>b)", [r"(?P<m>a)"]) == (True, "ok")
    ok, msg = validate_fragment(r"(?P<n>b)", [r"(?P<n>a)"])
    assert not ok
    assert "redefinition" in msg


def test_screen_regex_fragments_skips_blanks_and_repeats():
    accepted, rejected = screen_regex_fragments([" ", r"\w+X", r"\w+X", "("])
    assert accepted == ["className", r"\w+X"]
    assert [p for p, _ in rejected] == ["("]


def test_matcher_compiles_without_flags():
    assert "flags" not in inspect.signature(build_attribute_matcher).parameters
    m = build_attribute_matcher(PrefixerConfig())
    assert m.direct_rx.flags == m.expression_rx.flags == re.compile("").flags
    assert m.direct_rx.search('<a CLASSNAME="x">') is None
