from __future__ import annotations

from PySide6.QtCore import QEvent, QObject, Qt, QTimer
from PySide6.QtWidgets import QFrame, QLabel, QVBoxLayout, QWidget

from speciescatalog.app.notifications import SEVERITY_NORMAL, Notification, normalize_severity


_TOAST_TIMEOUT_MS = 4_000
_DESTRUCTIVE_TOAST_TIMEOUT_MS = 6_000
_TOAST_WIDTH = 340
_MARGIN = 16
_MAX_VISIBLE = 4
_MAX_HISTORY = 50


class ToastFrame(QFrame):
    def __init__(self, notification: Notification, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.notification = notification
        self.setObjectName("Toast")
        self.setProperty("destructive", "true" if notification.destructive else "false")
        self.setFixedWidth(_TOAST_WIDTH)
        self.setCursor(Qt.CursorShape.PointingHandCursor)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 10, 12, 10)
        layout.setSpacing(2)

        title_label = QLabel(notification.title, self)
        title_label.setObjectName("ToastTitle")
        title_label.setWordWrap(True)
        layout.addWidget(title_label)

        if notification.description:
            description_label = QLabel(notification.description, self)
            description_label.setObjectName("ToastDescription")
            description_label.setTextFormat(Qt.TextFormat.PlainText)
            description_label.setWordWrap(True)
            layout.addWidget(description_label)

    def mouseReleaseEvent(self, event) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            self.close()
            self.deleteLater()
            event.accept()
            return
        super().mouseReleaseEvent(event)


class ToastNotifier(QWidget):
    """Stack of transient toasts pinned to the bottom-right of ``host``."""

    def __init__(self, host: QWidget) -> None:
        super().__init__(host)
        self.setObjectName("ToastNotifier")
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, False)
        self._host = host
        self._history: list[Notification] = []

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(8)
        self._layout.addStretch(1)

        host.installEventFilter(self)
        self.hide()

    @property
    def history(self) -> tuple[Notification, ...]:
        return tuple(self._history)

    def notify(self, title: str, description: str = "", severity: str = SEVERITY_NORMAL) -> None:
        notification = Notification(
            title=str(title or "").strip(),
            description=str(description or "").strip(),
            severity=normalize_severity(severity),
        )
        self._history.append(notification)
        del self._history[:-_MAX_HISTORY]

        toast = ToastFrame(notification, self)
        self._layout.addWidget(toast)
        toast.destroyed.connect(self._reposition)
        self._trim_visible()
        timeout = _DESTRUCTIVE_TOAST_TIMEOUT_MS if notification.destructive else _TOAST_TIMEOUT_MS
        QTimer.singleShot(timeout, toast, toast.deleteLater)

        self.show()
        self.raise_()
        self._reposition()

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if watched is self._host and event.type() in (QEvent.Type.Resize, QEvent.Type.Show):
            self._reposition()
        return super().eventFilter(watched, event)

    def _toasts(self) -> list[ToastFrame]:
        toasts: list[ToastFrame] = []
        for index in range(self._layout.count()):
            widget = self._layout.itemAt(index).widget()
            if isinstance(widget, ToastFrame):
                toasts.append(widget)
        return toasts

    def _trim_visible(self) -> None:
        toasts = self._toasts()
        for toast in toasts[: max(0, len(toasts) - _MAX_VISIBLE)]:
            self._layout.removeWidget(toast)
            toast.deleteLater()

    def _reposition(self, *_args) -> None:
        self.adjustSize()
        width = _TOAST_WIDTH
        height = min(self.sizeHint().height(), max(0, self._host.height() - 2 * _MARGIN))
        x = max(0, self._host.width() - width - _MARGIN)
        y = max(0, self._host.height() - height - _MARGIN)
        self.setGeometry(x, y, width, height)
