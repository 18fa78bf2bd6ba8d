"""
Theme Preference

DESIGN DECISION: Resolving a theme is a PURE function of the stored
preference and the platform's dark-mode hint. Nothing here touches the
page; the front end is the one place that applies the resolved theme.
"""

from expense_tracker.log import get_logger
from expense_tracker.models.user_settings import Theme
from expense_tracker.services.storage import KeyValueStore


logger = get_logger(__name__)

_TOGGLE_ORDER = {
    Theme.LIGHT: Theme.DARK,
    Theme.DARK: Theme.SYSTEM,
    Theme.SYSTEM: Theme.LIGHT,
}


def resolve_theme(theme: Theme, prefers_dark: bool) -> str:
    """Concrete theme to render: 'light' or 'dark'."""
    if theme == Theme.SYSTEM:
        return "dark" if prefers_dark else "light"
    return theme.value


class ThemeManager:
    """Persists the theme preference under its own key."""

    def __init__(self, store: KeyValueStore, key: str = "expense-tracker-theme"):
        self._store = store
        self._key = key

    def get_theme(self) -> Theme:
        """Stored preference; SYSTEM when unset or unrecognised."""
        raw = self._store.get(self._key)
        if raw is None:
            return Theme.SYSTEM
        try:
            return Theme(raw.strip().strip('"'))
        except ValueError:
            logger.warning("theme_value_unrecognised", value=raw)
            return Theme.SYSTEM

    def set_theme(self, theme: Theme) -> None:
        theme = Theme(theme)
        self._store.set(self._key, theme.value)
        logger.info("theme_changed", theme=theme.value)

    def toggle_theme(self) -> Theme:
        """Cycle light -> dark -> system -> light."""
        next_theme = _TOGGLE_ORDER[self.get_theme()]
        self.set_theme(next_theme)
        return next_theme

    def is_dark_mode(self, prefers_dark: bool = False) -> bool:
        return resolve_theme(self.get_theme(), prefers_dark) == "dark"
