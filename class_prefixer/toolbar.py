# pyright: reportMissingImports=false
# mypy: disable_error_code=import

import os
import traceback
import importlib
from collections import OrderedDict
from typing import Callable, Dict, List, Optional

from aqt import mw
from aqt.qt import QAction, QIcon, QMenu
from aqt.utils import showText

import json

ADDON_DIR = os.path.dirname(__file__)
ADDON_PACKAGE = __name__.split(".")[0]
MENU_TITLE = "Class Prefixer"
ACTIONS_PATH = os.path.join(ADDON_DIR, "assets", "actions.json")

# ! Submenus created so far, keyed by their full "A::B" path
_MENUS: Dict[str, QMenu] = {}


# Local definition to ensure UTF-8 reading for JSON files
def load_json_file(path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _get_menu(submenu_name: str) -> QMenu:
    """
    * Return (creating on demand) the menu for an "A::B::C" path under Tools.
    """
    if submenu_name in _MENUS:
        return _MENUS[submenu_name]

    parent: QMenu = mw.form.menuTools
    path = ""
    for part in submenu_name.split("::"):
        path = f"{path}::{part}" if path else part
        if path not in _MENUS:
            _MENUS[path] = parent.addMenu(part)
        parent = _MENUS[path]
    return parent


def register_addon_tool(
    name: str,
    callback: Callable[[], None],
    submenu_name: str = MENU_TITLE,
    icon: Optional[str] = None,
    enabled: bool = True,
    order_index: Optional[int] = None,
) -> Optional[QAction]:
    """
    & Add one QAction to `submenu_name`.
    & `order_index` inserts before the action currently at that position.
    """
    if not enabled:
        return None

    menu = _get_menu(submenu_name)
    action = QAction(name, mw)
    if icon:
        icon_path = os.path.join(ADDON_DIR, icon)
        if os.path.exists(icon_path):
            action.setIcon(QIcon(icon_path))
    action.triggered.connect(lambda _checked=False, cb=callback: cb())

    existing = menu.actions()
    if order_index is not None and 0 <= order_index < len(existing):
        menu.insertAction(existing[order_index], action)
    else:
        menu.addAction(action)
    return action


# * Hard-coded "Class Prefixer Settings" action kept out of actions.json
def _open_settings():
    """
    * Opens the settings dialog (README + JSON editor).
    ^ Lazy import keeps startup fast.
    """
    from .assets.config_ui import ConfigDialog
    from .assets.config_manager import ConfigManager

    dlg = ConfigDialog(ADDON_PACKAGE, ConfigManager)
    dlg.exec()


def register_hardcoded_settings(order_index=None):
    """
    & Register a persistent 'Class Prefixer Settings' menu item.
    & This keeps it OUT of actions.json.
    """
    register_addon_tool(
        name="Class Prefixer Settings",
        callback=_open_settings,
        submenu_name=MENU_TITLE,
        enabled=True,
        order_index=order_index,
    )


def _resolve_module(module_path: str) -> str:
    # ^ actions.json may name modules relative to the add-on package (".modules.prefixer")
    if module_path.startswith("."):
        return ADDON_PACKAGE + module_path
    return module_path


def load_actions_manifest(entries: List[dict]) -> "OrderedDict[str, List[dict]]":
    """
    ! Build an ordered manifest: { submenu_name: [entries...] } in file order.
    - Separators, labels and entries missing a module/function are dropped.
    """
    manifest: "OrderedDict[str, List[dict]]" = OrderedDict()

    for entry in entries:
        entry_type = (entry.get("type") or "").strip()
        name = (entry.get("name") or "").strip()
        if not name:
            continue
        if entry_type in ("separator", "label"):
            continue

        raw_submenu = (entry.get("submenu") or "").strip()
        submenu_name = MENU_TITLE
        if raw_submenu:
            submenu_name += f"::{raw_submenu}"

        if not entry.get("function") or not entry.get("module"):
            continue

        manifest.setdefault(submenu_name, []).append(entry)
    return manifest


# Loads the actions listed in assets/actions.json into the Tools menu.
def load_tools_from_config():
    if not os.path.exists(ACTIONS_PATH):
        register_hardcoded_settings()
        return

    manifest = load_actions_manifest(load_json_file(ACTIONS_PATH))

    # ^ Register entries by position within each submenu (no sorting)
    for submenu_name, entries in manifest.items():
        for idx, entry in enumerate(entries):
            try:
                module = importlib.import_module(_resolve_module(entry["module"]))
                callback = getattr(module, entry["function"])
            except Exception:
                err = traceback.format_exc()
                showText(
                    f"[{MENU_TITLE}] Failed to import '{entry['name']}' from {entry['module']}.{entry['function']}:\n\n{err}",
                    title=MENU_TITLE + " Error"
                )
                continue

            register_addon_tool(
                name=entry["name"],
                callback=callback,
                submenu_name=submenu_name,
                icon=entry.get("icon"),
                enabled=entry.get("enabled", True),
                order_index=idx,  # ! explicit position from file order
            )

    # Add hard-coded item last
    register_hardcoded_settings()
