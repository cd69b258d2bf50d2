from __future__ import annotations

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QWidget

from speciescatalog.ui.window.frameless_dialog import FramelessDialog


class AppConfirmDialog(FramelessDialog):
    """Cancel/confirm prompt.

    Confirming only emits ``confirmed``; the owner closes the dialog once its
    own work has finished, using ``set_busy`` meanwhile.
    """

    confirmed = Signal()

    def __init__(
        self,
        *,
        title: str,
        message: str = "",
        confirm_text: str = "Confirm",
        cancel_text: str = "Cancel",
        busy_text: str = "",
        danger: bool = False,
        parent: QWidget | None = None,
        theme_mode: str | None = None,
    ) -> None:
        super().__init__(title=title, parent=parent, theme_mode=theme_mode)
        self.setMinimumSize(420, 180)
        self.resize(480, 200)
        self._confirm_text = confirm_text
        self._busy_text = busy_text or confirm_text
        self._busy = False

        if message:
            message_label = QLabel(message, self.body)
            message_label.setWordWrap(True)
            message_label.setObjectName("DialogMessage")
            self.body_layout.addWidget(message_label)
        self.body_layout.addStretch(1)

        footer = QHBoxLayout()
        footer.setContentsMargins(0, 0, 0, 0)
        footer.setSpacing(8)
        footer.addStretch(1)

        self.cancel_button = QPushButton(cancel_text, self.body)
        self.cancel_button.setObjectName("DialogSecondaryButton")
        self.cancel_button.clicked.connect(self.reject)
        footer.addWidget(self.cancel_button)

        self.confirm_button = QPushButton(confirm_text, self.body)
        self.confirm_button.setObjectName("DialogDangerButton" if danger else "DialogPrimaryButton")
        self.confirm_button.clicked.connect(self._on_confirm_clicked)
        footer.addWidget(self.confirm_button)
        self.body_layout.addLayout(footer)

        self.cancel_button.setFocus()

    @property
    def busy(self) -> bool:
        return self._busy

    def set_busy(self, busy: bool) -> None:
        self._busy = bool(busy)
        self.confirm_button.setEnabled(not self._busy)
        self.cancel_button.setEnabled(not self._busy)
        self.title_bar.close_button.setEnabled(not self._busy)
        self.confirm_button.setText(self._busy_text if self._busy else self._confirm_text)

    def reject(self) -> None:
        if self._busy:
            return
        super().reject()

    def _on_confirm_clicked(self) -> None:
        if self._busy:
            return
        self.confirmed.emit()
