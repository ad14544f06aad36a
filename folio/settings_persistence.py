"""Settings persistence for per-book reader preferences.

This module provides persistent storage for reader settings indexed by
book path: the chosen font, theme, line-number display, manual page
layout and the page the reader was on. Settings are stored in an
OS-appropriate location and survive application restarts.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .font_config import FONT_CONFIGS, MAX_FONT_SIZE, MIN_FONT_SIZE
from .themes import THEME_STYLES

logger = logging.getLogger(__name__)


class SettingsKeys:
    """Constants for settings keys."""

    FONT_FAMILY = "font_family"
    FONT_SIZE = "font_size"
    THEME = "theme"
    SHOW_LINE_NUMBERS = "show_line_numbers"
    LAST_PAGE = "last_page"
    AUTO_WIDTH = "auto_width"
    LINE_WIDTH = "line_width"
    PAGE_HEIGHT = "page_height"


class SettingsPersistence:
    """Manages persistent storage of per-book settings.

    Settings are stored in a JSON file in the user's config directory,
    indexed by the absolute path of the book being read.
    """

    def __init__(self):
        """Initialize settings persistence."""
        self._config_dir = Path(platformdirs.user_config_dir("folio"))
        self._settings_file = self._config_dir / "settings.json"
        self._settings_cache: Optional[Dict[str, Dict[str, Any]]] = None

    def _ensure_config_dir(self) -> None:
        """Ensure the config directory exists."""
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create config directory {self._config_dir}: {e}")

    def _load_all_settings(self) -> Dict[str, Dict[str, Any]]:
        """Load all settings from disk.

        Returns:
            Dictionary mapping book paths to their settings.
            Returns empty dict if file doesn't exist or can't be read.
        """
        if self._settings_cache is not None:
            return self._settings_cache

        if not self._settings_file.exists():
            self._settings_cache = {}
            return self._settings_cache

        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)

            if not isinstance(data, dict):
                logger.warning("Settings file has invalid format (not a dict), ignoring")
                self._settings_cache = {}
                return self._settings_cache

            self._settings_cache = data
            return self._settings_cache

        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            self._settings_cache = {}
            return self._settings_cache

    def _save_all_settings(self, settings: Dict[str, Dict[str, Any]]) -> bool:
        """Save all settings to disk atomically.

        Returns:
            True if save was successful, False otherwise.
        """
        self._ensure_config_dir()

        temp_file = self._settings_file.with_suffix('.tmp')

        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(settings, f, indent=2, ensure_ascii=False)

            temp_file.replace(self._settings_file)

            self._settings_cache = settings
            return True

        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False

    def load_settings(self, book_path: Optional[str]) -> Dict[str, Any]:
        """Load settings for a specific book.

        Invalid values are dropped so callers can fall back to defaults.

        Args:
            book_path: Path to the book. If None, returns empty dict.

        Returns:
            Dictionary of valid settings for the book.
        """
        if book_path is None:
            return {}

        try:
            abs_path = os.path.abspath(book_path)
        except (OSError, ValueError):
            logger.warning(f"Invalid book path: {book_path}")
            return {}

        all_settings = self._load_all_settings()
        book_settings = all_settings.get(abs_path, {})

        if not isinstance(book_settings, dict):
            logger.warning(f"Settings for {abs_path} are not a dict, ignoring")
            return {}

        valid = {}
        for key, value in book_settings.items():
            if self.validate_setting(key, value):
                valid[key] = value
            else:
                logger.warning(f"Ignoring invalid setting {key}={value!r} for {abs_path}")
        return valid

    def save_settings(self, book_path: Optional[str], settings: Dict[str, Any]) -> bool:
        """Save settings for a specific book.

        Args:
            book_path: Path to the book. If None, returns False.
            settings: Dictionary of settings to save.

        Returns:
            True if save was successful, False otherwise.
        """
        if book_path is None:
            return False

        try:
            abs_path = os.path.abspath(book_path)
        except (OSError, ValueError):
            logger.warning(f"Invalid book path: {book_path}")
            return False

        all_settings = self._load_all_settings()
        all_settings[abs_path] = settings
        return self._save_all_settings(all_settings)

    def validate_setting(self, key: str, value: Any) -> bool:
        """Validate a setting value.

        Returns:
            True if setting is valid, False otherwise.
        """
        if value is None:
            return True  # None means "not set"

        if key == SettingsKeys.FONT_FAMILY:
            return value in FONT_CONFIGS

        if key == SettingsKeys.THEME:
            return value in THEME_STYLES

        if key in (SettingsKeys.SHOW_LINE_NUMBERS, SettingsKeys.AUTO_WIDTH):
            return isinstance(value, bool)

        if key == SettingsKeys.FONT_SIZE:
            if isinstance(value, bool) or not isinstance(value, int):
                return False
            return MIN_FONT_SIZE <= value <= MAX_FONT_SIZE

        if key == SettingsKeys.LAST_PAGE:
            if isinstance(value, bool) or not isinstance(value, int):
                return False
            return value >= 0

        if key in (SettingsKeys.LINE_WIDTH, SettingsKeys.PAGE_HEIGHT):
            if isinstance(value, bool) or not isinstance(value, int):
                return False
            return value >= 1

        # Unknown settings are considered valid (forward compatibility)
        return True

    def clear_cache(self) -> None:
        """Clear the in-memory cache of settings."""
        self._settings_cache = None


# Global instance
_persistence: Optional[SettingsPersistence] = None


def get_persistence() -> SettingsPersistence:
    """Get the global settings persistence instance.

    Returns:
        The singleton SettingsPersistence instance.
    """
    global _persistence
    if _persistence is None:
        _persistence = SettingsPersistence()
    return _persistence
