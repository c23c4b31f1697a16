"""
Command-line runs; every test passes --no-log so nothing lands on the Desktop.
"""
import json

import pytest

from class_prefixer.modules.prefixer.cli import build_parser, main


@pytest.fixture
def app_file(tmp_path):
    path = tmp_path / "App.tsx"
    path.write_text("<div className={cn('a', \"b\")} />\n", encoding="utf-8")
    return path


def test_add_rewrites_in_place(app_file, capsys):
    assert main(["add", str(app_file), "--no-log"]) == 0
    assert app_file.read_text(encoding="utf-8") == "<div className={cn('app-a', \"app-b\")} />\n"
    out = capsys.readouterr().out
    assert "changed" in out
    assert 'Prefix "app-" added (1 file)' in out
    assert "Log:" not in out


def test_remove_with_custom_prefix(tmp_path, capsys):
    path = tmp_path / "a.jsx"
    path.write_text('<p className="tw-a tw-b" />', encoding="utf-8")
    assert main(["remove", str(path), "--prefix", "tw-", "--no-log"]) == 0
    assert path.read_text(encoding="utf-8") == '<p className="a b" />'
    assert 'Prefix "tw-" removed (1 file)' in capsys.readouterr().out


def test_skip_flag(tmp_path):
    path = tmp_path / "a.js"
    path.write_text('<p className="a hidden" />', encoding="utf-8")
    main(["add", str(path), "--skip", "hidden", "--no-log"])
    assert path.read_text(encoding="utf-8") == '<p className="app-a hidden" />'


def test_dry_run_leaves_file(app_file, capsys):
    before = app_file.read_text(encoding="utf-8")
    assert main(["add", str(app_file), "--dry-run", "--no-log"]) == 0
    assert app_file.read_text(encoding="utf-8") == before
    assert "would be added" in capsys.readouterr().out


def test_stdout_mode(app_file, capsys):
    before = app_file.read_text(encoding="utf-8")
    assert main(["add", str(app_file), "--stdout"]) == 0
    assert capsys.readouterr().out == "<div className={cn('app-a', \"app-b\")} />\n"
    assert app_file.read_text(encoding="utf-8") == before


def test_stdout_mode_needs_one_file(app_file):
    with pytest.raises(SystemExit):
        main(["add", str(app_file), str(app_file), "--stdout"])


def test_stdout_mode_unsupported_file(tmp_path, capsys):
    path = tmp_path / "a.html"
    path.write_text("<div></div>", encoding="utf-8")
    assert main(["add", str(path), "--stdout"]) == 1
    assert "Unsupported file type" in capsys.readouterr().err


def test_regex_flag_and_invalid_pattern_warning(tmp_path, capsys):
    path = tmp_path / "a.tsx"
    path.write_text('<a fooClassName="x" barClass="y" />', encoding="utf-8")
    assert main(["add", str(path), "--regex", r"\w+ClassName", "--regex", "(", "--no-log"]) == 0
    assert path.read_text(encoding="utf-8") == '<a fooClassName="app-x" barClass="y" />'
    assert "[!] Invalid regex pattern: (" in capsys.readouterr().out


def test_config_file(tmp_path, app_file):
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"prefix": "x-", "write_run_log": False}), encoding="utf-8")
    assert main(["add", str(app_file), "--config", str(cfg)]) == 0
    assert "x-a" in app_file.read_text(encoding="utf-8")


def test_bad_config_file_exits_2(tmp_path, app_file, capsys):
    cfg = tmp_path / "cfg.json"
    cfg.write_text("[]", encoding="utf-8")
    assert main(["add", str(app_file), "--config", str(cfg)]) == 2
    assert "Could not load config" in capsys.readouterr().err


def test_missing_file_exits_1(tmp_path, capsys):
    assert main(["add", str(tmp_path / "Gone.tsx"), "--no-log"]) == 1
    assert "1 error" in capsys.readouterr().out


def test_unsupported_only(tmp_path, capsys):
    path = tmp_path / "a.css"
    path.write_text(".a{}", encoding="utf-8")
    assert main(["add", str(path), "--no-log"]) == 0
    assert "This file type is not supported." in capsys.readouterr().out


def test_parser_rejects_unknown_mode():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["toggle", "a.tsx"])
