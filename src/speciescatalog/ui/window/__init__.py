from __future__ import annotations

from speciescatalog.ui.window.app_dialogs import AppConfirmDialog
from speciescatalog.ui.window.frameless_dialog import DialogTitleBar, FramelessDialog

__all__ = [
    "AppConfirmDialog",
    "DialogTitleBar",
    "FramelessDialog",
]
