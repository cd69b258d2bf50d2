from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QSize, Qt, QUrl
from PySide6.QtGui import QPixmap
from PySide6.QtNetwork import QNetworkAccessManager, QNetworkReply, QNetworkRequest
from PySide6.QtWidgets import QLabel, QSizePolicy, QWidget


_LOGGER = logging.getLogger("speciescatalog.ui")
_REMOTE_SCHEMES = ("http", "https")


class RemoteImageLabel(QLabel):
    """Label that shows an image from a local path or an http(s) URL.

    The image is scaled to cover the label, cropping the overflow.
    """

    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        height: int = 160,
        network: QNetworkAccessManager | None = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("SpeciesCardImage")
        self.setFixedHeight(height)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._network = network
        self._source = ""
        self._pixmap = QPixmap()
        self._pending: QNetworkReply | None = None

    @property
    def source(self) -> str:
        return self._source

    def has_image(self) -> bool:
        return not self._pixmap.isNull()

    def set_source(self, source: str | None) -> None:
        normalized = str(source or "").strip()
        if normalized == self._source:
            return
        self._source = normalized
        self._pixmap = QPixmap()
        self.clear()
        self._abort_pending()
        if not normalized:
            return

        url = QUrl(normalized)
        if url.scheme().casefold() in _REMOTE_SCHEMES:
            self._fetch(url)
            return
        path = Path(url.toLocalFile() if url.isLocalFile() else normalized).expanduser()
        pixmap = QPixmap(str(path))
        if pixmap.isNull():
            _LOGGER.warning("Could not load species image from %s", path)
            return
        self._set_pixmap(pixmap)

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self._render()

    def _fetch(self, url: QUrl) -> None:
        if self._network is None:
            self._network = QNetworkAccessManager(self)
        request = QNetworkRequest(url)
        request.setAttribute(
            QNetworkRequest.Attribute.RedirectPolicyAttribute,
            QNetworkRequest.RedirectPolicy.NoLessSafeRedirectPolicy,
        )
        reply = self._network.get(request)
        # The manager is shared across cards; the reply must die with this label.
        reply.setParent(self)
        self._pending = reply
        source = self._source
        reply.finished.connect(lambda: self._handle_reply(reply, source))

    def _handle_reply(self, reply: QNetworkReply, source: str) -> None:
        try:
            if reply is self._pending:
                self._pending = None
            if source != self._source:
                return
            if reply.error() != QNetworkReply.NetworkError.NoError:
                _LOGGER.warning("Could not fetch species image %s: %s", source, reply.errorString())
                return
            pixmap = QPixmap()
            if not pixmap.loadFromData(bytes(reply.readAll().data())):
                _LOGGER.warning("Species image %s is not a readable image.", source)
                return
            self._set_pixmap(pixmap)
        finally:
            reply.deleteLater()

    def _abort_pending(self) -> None:
        pending = self._pending
        self._pending = None
        if pending is not None:
            pending.abort()

    def _set_pixmap(self, pixmap: QPixmap) -> None:
        self._pixmap = pixmap
        self._render()

    def _render(self) -> None:
        if self._pixmap.isNull():
            return
        target = QSize(max(1, self.width()), max(1, self.height()))
        scaled = self._pixmap.scaled(
            target,
            Qt.AspectRatioMode.KeepAspectRatioByExpanding,
            Qt.TransformationMode.SmoothTransformation,
        )
        x = max(0, (scaled.width() - target.width()) // 2)
        y = max(0, (scaled.height() - target.height()) // 2)
        self.setPixmap(scaled.copy(x, y, target.width(), target.height()))
