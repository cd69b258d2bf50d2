from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QPoint, Qt, Signal
from PySide6.QtWidgets import QDialog, QFrame, QHBoxLayout, QLabel, QToolButton, QVBoxLayout, QWidget

from speciescatalog.ui.theme.loader import current_theme_mode, normalize_theme_mode


class DialogTitleBar(QWidget):
    """Title strip that drags its window and offers a close button."""

    close_requested = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("DialogTitleBar")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self._grab_offset: QPoint | None = None

        self._title_label = QLabel(self)
        self._title_label.setObjectName("DialogTitleLabel")
        self._title_label.setTextFormat(Qt.TextFormat.PlainText)

        self._close_button = QToolButton(self)
        self._close_button.setObjectName("DialogCloseButton")
        self._close_button.setText("×")
        self._close_button.setToolTip("Close")
        self._close_button.setAutoRaise(True)
        self._close_button.setFixedSize(30, 24)
        self._close_button.setCursor(Qt.CursorShape.PointingHandCursor)
        self._close_button.clicked.connect(self.close_requested.emit)

        row = QHBoxLayout(self)
        row.setContentsMargins(10, 7, 8, 7)
        row.setSpacing(6)
        row.addWidget(self._title_label, 1)
        row.addWidget(self._close_button)

    @property
    def close_button(self) -> QToolButton:
        return self._close_button

    def title(self) -> str:
        return self._title_label.text()

    def set_title(self, text: str) -> None:
        self._title_label.setText(text)

    def mousePressEvent(self, event) -> None:
        pressed_close = self._close_button.geometry().contains(event.position().toPoint())
        if event.button() != Qt.MouseButton.LeftButton or pressed_close:
            super().mousePressEvent(event)
            return
        self._grab_offset = event.globalPosition().toPoint() - self.window().frameGeometry().topLeft()
        event.accept()

    def mouseMoveEvent(self, event) -> None:
        if self._grab_offset is None:
            super().mouseMoveEvent(event)
            return
        self.window().move(event.globalPosition().toPoint() - self._grab_offset)
        event.accept()

    def mouseReleaseEvent(self, event) -> None:
        if self._grab_offset is None or event.button() != Qt.MouseButton.LeftButton:
            super().mouseReleaseEvent(event)
            return
        self._grab_offset = None
        event.accept()


class FramelessDialog(QDialog):
    """Modal dialog drawn inside a themed frame.

    Content goes into ``body_layout``. The frame carries a ``themeMode``
    property so stylesheets can tell light and dark dialogs apart.
    """

    def __init__(
        self,
        title: str = "",
        parent: Optional[QWidget] = None,
        *,
        theme_mode: str | None = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("FramelessDialog")
        self.setWindowFlags(Qt.WindowType.Dialog | Qt.WindowType.FramelessWindowHint)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)
        self.setModal(True)
        self.setMinimumSize(420, 200)
        self._theme_mode = normalize_theme_mode(theme_mode, current_theme_mode())

        self._frame = QFrame(self)
        self._frame.setObjectName("FramelessDialogFrame")
        self._frame.setProperty("themeMode", self._theme_mode)
        outer = QVBoxLayout(self)
        outer.setContentsMargins(14, 14, 14, 14)
        outer.addWidget(self._frame)

        self.title_bar = DialogTitleBar(self._frame)
        self.title_bar.close_requested.connect(self.reject)

        self.body = QWidget(self._frame)
        self.body.setObjectName("DialogBody")
        self.body_layout = QVBoxLayout(self.body)
        self.body_layout.setContentsMargins(14, 14, 14, 14)
        self.body_layout.setSpacing(10)

        stack = QVBoxLayout(self._frame)
        stack.setContentsMargins(0, 0, 0, 0)
        stack.setSpacing(0)
        stack.addWidget(self.title_bar)
        stack.addWidget(self.body, 1)

        self.set_dialog_title(title)

    @property
    def theme_mode(self) -> str:
        return self._theme_mode

    def dialog_title(self) -> str:
        return self.title_bar.title()

    def set_dialog_title(self, title: str) -> None:
        self.title_bar.set_title(title)
        self.setWindowTitle(title)
