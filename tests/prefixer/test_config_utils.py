import json
from pathlib import Path

import pytest

from class_prefixer.modules.prefixer.utils.config_utils import (
    apply_config_defaults,
    load_config_file,
    load_host_settings,
    load_prefixer_config,
    validate_config_snapshot,
)
from class_prefixer.modules.prefixer.utils.data_defs import DEFAULT_EXTENSIONS

PACKAGE_CONFIG = Path(__file__).resolve().parents[2] / "class_prefixer" / "config.json"


def test_defaults_fill_missing_keys_only():
    out = apply_config_defaults({"prefix": "tw-"})
    assert out["prefix"] == "tw-"
    assert out["skip_classes"] == []
    assert out["custom_regex_patterns"] == [r"\w+ClassName"]
    assert out["auto_format"] is False
    assert out["write_run_log"] is True


def test_shipped_config_is_valid():
    """The add-on's default config.json passes its own validation."""
    data = json.loads(PACKAGE_CONFIG.read_text(encoding="utf-8"))
    ok, problems = validate_config_snapshot(data)
    assert ok, problems
    assert data["auto_format"] is False


def test_load_prefixer_config_coerces_lists():
    cfg = load_prefixer_config({
        "prefix": "x-",
        "skip_classes": ["hidden", " ", "sr-only"],
        "custom_patterns": "*ClassName",
        "use_regex": 0,
    })
    assert cfg.prefix == "x-"
    assert cfg.skip_classes == frozenset({"hidden", "sr-only"})
    assert cfg.custom_patterns == ("*ClassName",)
    assert cfg.use_regex is False


def test_blank_prefix_falls_back_to_default():
    assert load_prefixer_config({"prefix": ""}).prefix == "app-"
    assert load_prefixer_config({"prefix": 3}).prefix == "app-"


def test_overrides_win_unless_none():
    cfg = load_prefixer_config({"prefix": "a-"}, prefix="b-", use_regex=None)
    assert cfg.prefix == "b-"
    assert cfg.use_regex is False


def test_host_settings_normalize_extensions(tmp_path):
    settings = load_host_settings({
        "supported_extensions": ["TSX", ".JS"],
        "log_dir": str(tmp_path / "logs"),
        "log_max_age_hours": "6",
    })
    assert settings.supported_extensions == (".tsx", ".js")
    assert settings.log_max_age_hours == 6
    assert not (tmp_path / "logs").exists()


def test_host_settings_defaults():
    settings = load_host_settings({"supported_extensions": [], "log_max_age_hours": "x"})
    assert settings.supported_extensions == DEFAULT_EXTENSIONS
    assert settings.log_max_age_hours == 24
    assert settings.format_command == ""


def test_load_config_file(tmp_path):
    assert load_config_file(None) == {}
    path = tmp_path / "cfg.json"
    path.write_text('{"prefix": "tw-"}', encoding="utf-8")
    assert load_config_file(path) == {"prefix": "tw-"}


def test_load_config_file_rejects_non_object(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config_file(path)


def test_validate_reports_every_problem():
    ok, problems = validate_config_snapshot({
        "prefix": "a b",
        "skip_classes": "hidden",
        "use_regex": "yes",
        "custom_regex_patterns": ["(", r"\w+Class", "[x"],
    })
    assert not ok
    assert "'prefix' must not contain whitespace." in problems
    assert "'skip_classes' must be a list of strings." in problems
    assert "'use_regex' must be true or false." in problems
    assert sum(p.startswith("Invalid regex pattern") for p in problems) == 2


def test_validate_rejects_non_dict():
    assert validate_config_snapshot([]) == (False, ["Settings must be a JSON object."])


def test_validate_empty_prefix():
    ok, problems = validate_config_snapshot({"prefix": "  "})
    assert not ok
    assert problems == ["'prefix' must be a non-empty string."]


def test_validate_catches_group_names_clashing_across_fragments():
    ok, problems = validate_config_snapshot({
        "custom_regex_patterns": [r"(?P<n>icon)ClassName", r"(?P<n>wrap)ClassName"],
    })
    assert not ok
    assert len(problems) == 1
    assert problems[0].startswith("Invalid regex pattern: pattern='(?P<n>wrap)ClassName'")
