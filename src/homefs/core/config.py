# src/homefs/core/config.py
"""
HomeFS - Remote File Explorer Server - Configuration Management
Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as published
by the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program. If not, see <https://www.gnu.org/licenses/>.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from . import constants
from .exceptions import ConfigurationError

log = logging.getLogger(__name__)

# --- Default Configuration Values ---
# Central source of truth for all application settings and their defaults.

DEFAULT_SETTINGS = {
    # Filesystem settings
    "home_path": str(Path.home()),
    "search_pacing_ms": constants.SEARCH_PACING_MS,

    # Core settings
    "server_host": constants.DEFAULT_HOST,
    "server_port": constants.DEFAULT_PORT,
    "log_level": "INFO",
}


class ConfigManager:
    """
    Manages application settings using a JSON file for all configuration.
    Values passed to apply_overrides() (e.g. from the command line) win over
    the file for the current run but are never written back.
    """

    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = Path(config_file) if config_file else constants.CONFIG_FILE
        self._json_cache: Dict[str, Any] = {}
        self._overrides: Dict[str, Any] = {}
        self._load_from_file()

    def _load_from_file(self):
        """
        Loads configuration from the JSON file into the cache, ensuring that
        defaults are present for any missing keys.
        """
        self._json_cache = DEFAULT_SETTINGS.copy()
        if not self.config_file.exists():
            log.info("No config file found. Will use and save default settings.")
            self._save_to_file()
            return

        try:
            with self.config_file.open("r", encoding="utf-8") as f:
                user_config = json.load(f)
            if not isinstance(user_config, dict):
                raise ValueError("top-level JSON value must be an object")
            self._json_cache.update(user_config)
            log.info(f"Configuration loaded from {self.config_file}")
        except (IOError, ValueError) as e:
            log.error(f"Failed to load config file, using defaults instead: {e}")
            self._json_cache = DEFAULT_SETTINGS.copy()

    def _save_to_file(self):
        """Saves the configuration cache to the JSON file."""
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with self.config_file.open("w", encoding="utf-8") as f:
                json.dump(self._json_cache, f, indent=4)
            log.debug(f"Configuration saved to {self.config_file}")
        except IOError as e:
            log.error(f"Failed to save config file: {e}")
            raise ConfigurationError(f"Cannot save configuration: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._overrides:
            return self._overrides[key]
        return self._json_cache.get(key, default)

    def apply_overrides(self, **overrides: Any):
        """Applies run-only values; None means 'not given'."""
        for key, value in overrides.items():
            if value is None:
                continue
            if key not in DEFAULT_SETTINGS:
                log.warning(f"Ignoring unknown configuration override: '{key}'")
                continue
            self._overrides[key] = value

    def get_home_path(self) -> Path:
        """Returns the resolved home directory every request is confined to."""
        raw = self.get("home_path")
        if not raw:
            raise ConfigurationError("No home path configured.")
        home = Path(raw).expanduser().resolve()
        if not home.is_dir():
            raise ConfigurationError(f"Home path is not a directory: {home}")
        return home

    def get_search_pacing(self) -> float:
        """Returns the per-match search pause in seconds."""
        try:
            pacing_ms = float(self.get("search_pacing_ms", constants.SEARCH_PACING_MS))
        except (TypeError, ValueError):
            log.warning("Invalid 'search_pacing_ms' value, using the default.")
            pacing_ms = constants.SEARCH_PACING_MS
        return max(pacing_ms, 0.0) / 1000.0
