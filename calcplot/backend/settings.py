import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)

SETTINGS_ENV = "CALCPLOT_SETTINGS"
DEFAULT_SETTINGS_FILE = Path.home() / ".calcplot" / "settings.json"


def default_settings_path() -> Path:
    override = os.environ.get(SETTINGS_ENV)
    return Path(override).expanduser() if override else DEFAULT_SETTINGS_FILE


class SettingsStore:
    """
    Small string key-value store persisted as a JSON object.
    A missing or unreadable file behaves as an empty store.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else default_settings_path()
        self._values: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Error loading settings from %s, using defaults: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.error("Settings file %s does not hold an object, using defaults", self.path)
            return {}
        logger.info("Settings loaded from %s", self.path)
        return {str(k): str(v) for k, v in data.items()}

    def _save(self):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self._values, f, indent=4)
            logger.info("Settings saved to %s", self.path)
        except OSError as e:
            logger.error("Error saving settings to %s: %s", self.path, e)

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str):
        self._values[key] = str(value)
        self._save()
