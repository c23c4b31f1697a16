import shlex
import sys

from class_prefixer.modules.prefixer.utils.file_utils import (
    build_format_args,
    is_file_supported,
    read_source,
    run_formatter,
    write_source,
)


def test_supported_extensions_are_case_insensitive():
    assert is_file_supported("src/App.TSX")
    assert is_file_supported("a/b.js")
    assert not is_file_supported("index.html")
    assert not is_file_supported("notes.tsx.bak")
    assert is_file_supported("page.vue", (".vue",))


def test_crlf_survives_read_and_write(tmp_path):
    """Line endings are neither translated on read nor on write."""
    path = tmp_path / "a.tsx"
    path.write_bytes(b'<a className="x" />\r\n')
    text = read_source(path)
    assert text == '<a className="x" />\r\n'
    write_source(path, text.replace('"x"', '"app-x"'))
    assert path.read_bytes() == b'<a className="app-x" />\r\n'


def test_build_format_args_substitutes_path():
    assert build_format_args("npx prettier --write {path}", "/s/A.tsx") == [
        "npx", "prettier", "--write", "/s/A.tsx",
    ]


def test_build_format_args_appends_path_without_placeholder():
    assert build_format_args("eslint --fix", "a b.tsx") == ["eslint", "--fix", "a b.tsx"]


def test_build_format_args_empty_command():
    assert build_format_args("", "a.tsx") == []
    assert build_format_args("   ", "a.tsx") == []


def test_run_formatter_success(tmp_path):
    target = tmp_path / "a.tsx"
    target.write_text("x", encoding="utf-8")
    cmd = shlex.quote(sys.executable) + ' -c "import sys; open(sys.argv[1], \'a\').write(\'!\')" {path}'
    ok, msg = run_formatter(target, cmd)
    assert ok, msg
    assert target.read_text(encoding="utf-8") == "x!"


def test_run_formatter_nonzero_exit_is_reported(tmp_path):
    cmd = shlex.quote(sys.executable) + ' -c "import sys; sys.stderr.write(\'boom\'); sys.exit(3)"'
    ok, msg = run_formatter(tmp_path / "a.tsx", cmd)
    assert not ok
    assert msg == "boom"


def test_run_formatter_missing_binary(tmp_path):
    ok, msg = run_formatter(tmp_path / "a.tsx", "definitely-not-a-real-formatter-binary {path}")
    assert not ok
    assert msg


def test_run_formatter_without_command(tmp_path):
    assert run_formatter(tmp_path / "a.tsx", "") == (False, "no format_command configured")
