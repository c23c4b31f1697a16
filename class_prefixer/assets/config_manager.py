# pyright: reportMissingImports=false
# mypy: disable_error_code=import

from typing import Any, Dict

from aqt import mw

from ..modules.prefixer.utils.config_utils import (
    apply_config_defaults,
    load_host_settings,
    load_prefixer_config,
)
from ..modules.prefixer.utils.data_defs import HostSettings, PrefixerConfig


class ConfigManager:
    """
    * Anki-backed settings store for the add-on.
    - `config` is the raw dict with every known key filled in.
    - `prefixer_config()` / `host_settings()` give the typed views the
      runner needs.
    """

    def __init__(self, addon_name: str):
        self.addon_name = addon_name
        self.config: Dict[str, Any] = self.load_config()

    def load_config(self) -> Dict[str, Any]:
        return apply_config_defaults(mw.addonManager.getConfig(self.addon_name) or {})

    def save_config(self, new_config: Dict[str, Any]) -> None:
        mw.addonManager.writeConfig(self.addon_name, new_config)
        self.config = apply_config_defaults(new_config)

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Update one key and persist the whole snapshot."""
        updated = dict(self.config)
        updated[key] = value
        self.save_config(updated)

    def prefixer_config(self) -> PrefixerConfig:
        return load_prefixer_config(self.config)

    def host_settings(self) -> HostSettings:
        return load_host_settings(self.config)
