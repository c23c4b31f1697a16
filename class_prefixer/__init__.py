# pyright: reportMissingImports=false
# mypy: disable_error_code=import

# Register the Class Prefixer menu once Anki's main window exists.
# ^ Outside a running Anki (tests, CLI) mw is None or aqt is unusable; nothing is registered.
try:
    from aqt import mw
except Exception:
    mw = None

if mw is not None:
    from aqt.gui_hooks import main_window_did_init

    from .toolbar import load_tools_from_config

    main_window_did_init.append(load_tools_from_config)
