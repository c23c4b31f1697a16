"""
Shared fixtures for the class prefixer tests.
"""
import pytest

from class_prefixer.modules.prefixer.utils.config_utils import load_host_settings
from class_prefixer.modules.prefixer.utils.data_defs import PrefixerConfig


@pytest.fixture
def config():
    """Baseline config: prefix "app-", wildcard "*ClassName", no skips."""
    return PrefixerConfig(prefix="app-", custom_patterns=("*ClassName",))


@pytest.fixture
def settings(tmp_path):
    """Host settings writing run logs under tmp_path, formatter off."""
    return load_host_settings({"log_dir": str(tmp_path / "logs"), "format_command": ""})


@pytest.fixture
def source_tree(tmp_path):
    """A small project with one changeable, one inert and one unsupported file."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "App.tsx").write_text('<div className="foo bar"></div>\n', encoding="utf-8")
    (src / "util.js").write_text("export const x = 1;\n", encoding="utf-8")
    (src / "page.html").write_text('<div className="foo"></div>\n', encoding="utf-8")
    return src
