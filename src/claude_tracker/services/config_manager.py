"""Application settings wrapping QSettings."""

import logging

from PySide6.QtCore import QObject, Signal, Slot, QSettings

from claude_tracker.config import (
    DEFAULT_MAX_WORKERS,
    DEFAULT_THEME,
    TrackerConfig,
    default_claude_projects_dir,
    default_cursor_user_dir,
)

logger = logging.getLogger(__name__)

# Default values
DEFAULTS = {
    "general/claudeProjectsDir": str(default_claude_projects_dir()),
    "general/cursorUserDir": str(default_cursor_user_dir()),
    "general/maxWorkers": DEFAULT_MAX_WORKERS,
    "appearance/theme": DEFAULT_THEME,
    "advanced/debugLogging": False,
}


class ConfigManager(QObject):
    """Saved user settings.

    The pipeline never reads settings itself; callers turn them into a
    TrackerConfig once at startup with ``tracker_config()``.
    """

    settings_changed = Signal(str)  # key

    def __init__(self, parent=None):
        super().__init__(parent)
        self._settings = QSettings()

    @Slot(str, result=str)
    def get_string(self, key: str) -> str:
        return str(self._settings.value(key, DEFAULTS.get(key, "")))

    @Slot(str, result=int)
    def get_int(self, key: str) -> int:
        val = self._settings.value(key, DEFAULTS.get(key, 0))
        try:
            return int(val)
        except (ValueError, TypeError):
            logger.warning("Ignoring non-integer setting %s=%r", key, val)
            return DEFAULTS.get(key, 0)

    @Slot(str, result=bool)
    def get_bool(self, key: str) -> bool:
        val = self._settings.value(key, DEFAULTS.get(key, False))
        if isinstance(val, bool):
            return val
        if isinstance(val, str):
            return val.lower() in ("true", "1", "yes")
        return bool(val)

    @Slot(str, str)
    def set_string(self, key: str, value: str):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)

    @Slot(str, int)
    def set_int(self, key: str, value: int):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)

    @Slot(str, bool)
    def set_bool(self, key: str, value: bool):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)

    @Slot(str)
    def reset(self, key: str):
        """Drop a saved value so the default applies again."""
        self._settings.remove(key)
        self.settings_changed.emit(key)

    def tracker_config(self) -> TrackerConfig:
        """Snapshot the current settings as an immutable run configuration."""
        return TrackerConfig(
            claude_projects_dir=self.get_string("general/claudeProjectsDir"),
            cursor_user_dir=self.get_string("general/cursorUserDir"),
            max_workers=self.get_int("general/maxWorkers"),
            theme=self.get_string("appearance/theme"),
        )

    def debug_logging(self) -> bool:
        return self.get_bool("advanced/debugLogging")
