from speciescatalog.ui.theme.loader import (
    ThemeMode,
    apply_app_theme,
    current_theme_mode,
    load_stylesheet,
    normalize_theme_mode,
)

__all__ = [
    "ThemeMode",
    "apply_app_theme",
    "current_theme_mode",
    "load_stylesheet",
    "normalize_theme_mode",
]
