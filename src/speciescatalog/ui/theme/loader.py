from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from PySide6.QtWidgets import QApplication


ThemeMode = Literal["light", "dark"]

_THEME_DIR = Path(__file__).resolve().parent
_THEME_MODE_PROPERTY = "speciescatalog.theme_mode"
_BASE_QSS = "window.qss"
_MODE_QSS: dict[str, str] = {
    "light": "window_light.qss",
    "dark": "window_dark.qss",
}


def normalize_theme_mode(mode: str | None, default: ThemeMode = "light") -> ThemeMode:
    normalized = str(mode or "").strip().casefold()
    if normalized == "dark":
        return "dark"
    if normalized == "light":
        return "light"
    return default


def current_theme_mode(default: ThemeMode = "light") -> ThemeMode:
    """Theme mode last applied to the running application."""
    app = QApplication.instance()
    if app is None:
        return default
    return normalize_theme_mode(app.property(_THEME_MODE_PROPERTY), default)


@lru_cache(maxsize=None)
def _read_qss(file_name: str) -> str:
    path = _THEME_DIR / file_name
    if not path.is_file():
        return ""
    return path.read_text(encoding="utf-8").strip()


def load_stylesheet(mode: str | None = "light") -> str:
    # Mode sheet last so its colors win over the shared layout rules.
    normalized = normalize_theme_mode(mode)
    sheets = (_read_qss(_BASE_QSS), _read_qss(_MODE_QSS[normalized]))
    return "\n\n".join(sheet for sheet in sheets if sheet)


def apply_app_theme(app: QApplication, *, mode: str | None = "light") -> ThemeMode:
    normalized = normalize_theme_mode(mode)
    app.setProperty(_THEME_MODE_PROPERTY, normalized)
    app.setStyleSheet(load_stylesheet(normalized))
    return normalized
