"""Application configuration manager wrapping QSettings."""

import logging
import os
from pathlib import Path

from PySide6.QtCore import QObject, Signal, Slot, QSettings

from claude_usage_stats.services.stats_cache import StatsCache

logger = logging.getLogger(__name__)

# Default values
DEFAULTS = {
    "general/claudeDir": "~/.claude",
    "stats/topProjects": 10,
    "stats/cacheFile": "stats-cache.json",
    "advanced/debugLogging": False,
}


class ConfigManager(QObject):
    """Centralized application settings."""

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

    # Derived locations
    def claude_dir(self) -> Path:
        return Path(os.path.expanduser(self.get_string("general/claudeDir")))

    def projects_root(self) -> Path:
        return self.claude_dir() / "projects"

    def stats_cache_path(self) -> Path:
        return self.claude_dir() / self.get_string("stats/cacheFile")

    def top_projects(self) -> int:
        return max(self.get_int("stats/topProjects"), 0)

    @Slot()
    def clear_cache(self):
        """Delete the cached usage snapshot."""
        cache = StatsCache(self.stats_cache_path())
        if cache.clear():
            logger.info("Cleared stats cache %s", cache.path)
