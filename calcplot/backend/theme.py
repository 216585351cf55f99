import logging
from typing import Callable, Dict, List, Optional

from calcplot.backend.settings import SettingsStore

logger = logging.getLogger(__name__)

THEME_KEY = "calculator-theme"
LIGHT = "light"
DARK = "dark"
DEFAULT_THEME = LIGHT

# background/grid/axis/function drive the plot; the rest style the widgets
PALETTES: Dict[str, Dict[str, str]] = {
    LIGHT: {
        "background": "#F9FAFB",
        "grid": "#E5E7EB",
        "axis": "#6B7280",
        "function": "#3B82F6",
        "window": "#E5E7EB",
        "panel": "#F3F4F6",
        "button": "#FFFFFF",
        "text": "#111827",
    },
    DARK: {
        "background": "#111827",
        "grid": "#374151",
        "axis": "#9CA3AF",
        "function": "#60A5FA",
        "window": "#0f1113",
        "panel": "#17181A",
        "button": "#2b2d30",
        "text": "#E6EEF3",
    },
}


class ThemeManager:
    """Tracks the light/dark flag, persists changes and notifies subscribers."""

    def __init__(self, store: SettingsStore):
        self.store = store
        self.theme = DEFAULT_THEME
        self._listeners: List[Callable[[str], None]] = []

    @property
    def is_dark(self) -> bool:
        return self.theme == DARK

    @property
    def colors(self) -> Dict[str, str]:
        return PALETTES[self.theme]

    def subscribe(self, callback: Callable[[str], None]):
        self._listeners.append(callback)

    def apply(self, theme: Optional[str]):
        if theme not in PALETTES:
            logger.warning("Unknown theme %r, falling back to %s", theme, DEFAULT_THEME)
            theme = DEFAULT_THEME
        self.theme = theme
        for callback in self._listeners:
            callback(theme)

    def change(self, theme: str):
        """Persist a new theme and apply it (subscribers redraw with its colours)."""
        logger.info("Switching theme to %s", theme)
        self.store.set(THEME_KEY, theme)
        self.apply(theme)

    def load(self) -> str:
        self.apply(self.store.get(THEME_KEY) or DEFAULT_THEME)
        return self.theme
