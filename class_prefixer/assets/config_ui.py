# pyright: reportMissingImports=false
# mypy: disable_error_code=import

import html
import json
import os
from typing import Any, Dict, Optional

from aqt.qt import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QTextBrowser,
    QSplitter, Qt, QWidget, QTextEdit, QPlainTextEdit,
)
from aqt import mw
import markdown
from aqt.utils import showInfo

from ..modules.prefixer.utils.config_utils import (
    load_config_file,
    load_prefixer_config,
    validate_config_snapshot,
)
from ..modules.prefixer.utils.engine import rewrite_classes

ADDON_DIR = os.path.dirname(os.path.dirname(__file__))
README_PATH = os.path.join(ADDON_DIR, "README.md")
DEFAULT_CONFIG_PATH = os.path.join(ADDON_DIR, "config.json")

SAMPLE_SOURCE = (
    '<div className="card shadow">\n'
    "  <Icon iconClassName=\"w-4 h-4\" />\n"
    "  <p className={cn('text-sm', active && \"font-bold\", `gap-${n}`)}>Hi</p>\n"
    "</div>\n"
)


def _render_readme() -> str:
    """README.md as HTML, or a short notice when it cannot be read."""
    if not os.path.exists(README_PATH):
        return "<i>No README.md found for this add-on.</i>"
    try:
        with open(README_PATH, "r", encoding="utf-8") as f:
            md_text = f.read()
    except OSError as exc:
        return f"<b>Error loading README.md:</b><br><pre>{html.escape(str(exc))}</pre>"
    return markdown.markdown(md_text, extensions=["tables", "fenced_code"])


class ConfigDialog(QDialog):
    """
    * Settings window: README | JSON editor over a live preview.
    - The preview runs the engine on a sample snippet with the unsaved JSON,
      so pattern and prefix edits can be checked before saving.
    """

    def __init__(self, addon_name: str, config_manager_cls, parent=None):
        super().__init__(parent or mw)
        self.addon_name = addon_name
        self.config_manager = config_manager_cls(addon_name)

        self.setWindowTitle("Class Prefixer Settings")
        self.setWindowFlags(Qt.WindowType.Window)
        self.setWindowModality(Qt.WindowModality.ApplicationModal)
        self.resize(1000, 680)

        main_layout = QVBoxLayout(self)
        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self._build_readme_panel())
        splitter.addWidget(self._build_editor_panel())
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 1)
        main_layout.addWidget(splitter)
        main_layout.addLayout(self._build_button_row())

        self.readme_browser.setHtml(_render_readme())
        self.load_config()
        self.on_preview(adding=True)

    # =====================
    # Layout
    # =====================

    def _build_readme_panel(self) -> QWidget:
        panel = QWidget()
        layout = QVBoxLayout(panel)
        self.readme_browser = QTextBrowser()
        self.readme_browser.setOpenExternalLinks(True)
        layout.addWidget(QLabel("README"))
        layout.addWidget(self.readme_browser)
        return panel

    def _build_editor_panel(self) -> QWidget:
        panel = QWidget()
        layout = QVBoxLayout(panel)
        vsplit = QSplitter(Qt.Orientation.Vertical)

        editor_box = QWidget()
        editor_layout = QVBoxLayout(editor_box)
        self.config_editor = QTextEdit()
        self.config_editor.setLineWrapMode(QTextEdit.LineWrapMode.NoWrap)
        editor_layout.addWidget(QLabel("config.json"))
        editor_layout.addWidget(self.config_editor)

        preview_box = QWidget()
        preview_layout = QVBoxLayout(preview_box)
        self.sample_editor = QPlainTextEdit(SAMPLE_SOURCE)
        self.preview_output = QPlainTextEdit()
        self.preview_output.setReadOnly(True)
        self.preview_status = QLabel("")

        preview_buttons = QHBoxLayout()
        add_btn = QPushButton("Preview add")
        add_btn.clicked.connect(lambda _checked=False: self.on_preview(adding=True))
        remove_btn = QPushButton("Preview remove")
        remove_btn.clicked.connect(lambda _checked=False: self.on_preview(adding=False))
        preview_buttons.addWidget(QLabel("Sample source"))
        preview_buttons.addStretch(1)
        preview_buttons.addWidget(add_btn)
        preview_buttons.addWidget(remove_btn)

        preview_layout.addLayout(preview_buttons)
        preview_layout.addWidget(self.sample_editor)
        preview_layout.addWidget(QLabel("Result"))
        preview_layout.addWidget(self.preview_output)
        preview_layout.addWidget(self.preview_status)

        vsplit.addWidget(editor_box)
        vsplit.addWidget(preview_box)
        layout.addWidget(vsplit)
        return panel

    def _build_button_row(self) -> QHBoxLayout:
        row = QHBoxLayout()
        save_button = QPushButton("Save")
        save_button.clicked.connect(self.on_save)
        restore_button = QPushButton("Restore Defaults")
        restore_button.clicked.connect(self.on_restore_defaults)
        close_button = QPushButton("Close")
        close_button.clicked.connect(self.close)
        row.addStretch(1)
        row.addWidget(save_button)
        row.addWidget(restore_button)
        row.addWidget(close_button)
        return row

    # =====================
    # Actions
    # =====================

    def load_config(self) -> None:
        """Load config via ConfigManager and display it as pretty JSON."""
        config = self.config_manager.load_config()
        self.config_editor.setPlainText(json.dumps(config, indent=4))

    def _parse_editor(self) -> Optional[Dict[str, Any]]:
        """Editor text as a dict; shows the JSON error and returns None on failure."""
        try:
            parsed = json.loads(self.config_editor.toPlainText())
        except json.JSONDecodeError as exc:
            showInfo(f"JSON error:\n{exc}")
            return None
        return parsed

    def on_preview(self, adding: bool) -> None:
        snapshot = self._parse_editor()
        if snapshot is None:
            return
        ok, problems = validate_config_snapshot(snapshot)
        if not ok:
            self.preview_status.setText(" • ".join(problems))
            return

        result = rewrite_classes(self.sample_editor.toPlainText(), load_prefixer_config(snapshot), adding)
        self.preview_output.setPlainText(result.text)
        if not result.changed:
            status = "No class lists changed."
        else:
            status = f"direct: {result.direct_values}, expressions: {result.expression_blocks}"
            if result.unbalanced_skipped:
                status += f", unbalanced skipped: {result.unbalanced_skipped}"
        self.preview_status.setText(status)

    def on_save(self) -> None:
        """Validate the JSON in the editor, then save it through ConfigManager."""
        parsed = self._parse_editor()
        if parsed is None:
            return

        ok, problems = validate_config_snapshot(parsed)
        if not ok:
            showInfo("Not saved:\n\n" + "\n".join(f"• {p}" for p in problems))
            return

        self.config_manager.save_config(parsed)
        showInfo("Configuration saved.")

    def on_restore_defaults(self) -> None:
        """Overwrite the stored config with the shipped config.json."""
        try:
            default_config = load_config_file(DEFAULT_CONFIG_PATH)
        except (OSError, ValueError) as exc:
            showInfo(f"Could not read the shipped config.json:\n{exc}")
            return

        self.config_manager.save_config(default_config)
        self.config_editor.setPlainText(json.dumps(default_config, indent=4))
        showInfo("Defaults Restored.")
