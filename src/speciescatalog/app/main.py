from __future__ import annotations

import logging
import sys
from typing import Sequence

from PySide6.QtCore import QLocale, Qt
from PySide6.QtGui import QAction
from PySide6.QtNetwork import QNetworkAccessManager
from PySide6.QtWidgets import (
    QApplication,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from speciescatalog.app.db_debug import db_debug_enabled
from speciescatalog.app.notifications import SEVERITY_DESTRUCTIVE, Notifier, error_text
from speciescatalog.app.settings_store import (
    load_dark_mode,
    load_session_user_id,
    load_supabase_settings,
    save_dark_mode,
    settings_path,
)
from speciescatalog.app.species_models import SpeciesRecord
from speciescatalog.app.species_store import SpeciesStore, SupabaseSpeciesStore, SupabaseSpeciesStoreConfig
from speciescatalog.ui.theme.loader import apply_app_theme
from speciescatalog.ui.widgets.species_card import SpeciesCard
from speciescatalog.ui.widgets.toast import ToastNotifier


APP_VERSION = "0.1.0"
_CARDS_PER_ROW = 3
_LOGGER = logging.getLogger("speciescatalog.app")


class SpeciesCatalogWindow(QMainWindow):
    """Lists species as cards and reloads them when a card asks for a refresh."""

    def __init__(
        self,
        *,
        store: SpeciesStore,
        session_id: str,
        dark_mode_enabled: bool = False,
        notifier: Notifier | None = None,
        locale: QLocale | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Species Catalog")
        self.resize(1040, 720)

        self._store = store
        self._session_id = session_id
        self._dark_mode_enabled = dark_mode_enabled
        self._locale = locale
        self._cards: list[SpeciesCard] = []
        self._loading = False
        self._refresh_pending = False
        self._image_network = QNetworkAccessManager(self)

        central = QWidget(self)
        central.setObjectName("SpeciesCatalogCentral")
        root = QVBoxLayout(central)
        root.setContentsMargins(16, 16, 16, 16)
        root.setSpacing(10)

        header = QHBoxLayout()
        header.setSpacing(8)
        title = QLabel("Species List", central)
        title.setObjectName("SpeciesCatalogTitle")
        header.addWidget(title)
        header.addStretch(1)
        self.status_label = QLabel("", central)
        self.status_label.setObjectName("SpeciesCatalogStatus")
        header.addWidget(self.status_label)
        self.refresh_button = QPushButton("Refresh", central)
        self.refresh_button.setObjectName("DialogSecondaryButton")
        self.refresh_button.clicked.connect(self.refresh_current_view)
        header.addWidget(self.refresh_button)
        root.addLayout(header)

        scroll = QScrollArea(central)
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QScrollArea.Shape.NoFrame)
        self._grid_host = QWidget(scroll)
        self._grid_host.setObjectName("SpeciesGridHost")
        self._grid = QGridLayout(self._grid_host)
        self._grid.setContentsMargins(0, 0, 0, 0)
        self._grid.setSpacing(16)
        self._grid.setAlignment(Qt.AlignmentFlag.AlignTop | Qt.AlignmentFlag.AlignLeft)
        scroll.setWidget(self._grid_host)
        root.addWidget(scroll, 1)

        self.setCentralWidget(central)
        self.notifier: Notifier = notifier or ToastNotifier(central)
        self._build_menu()

    @property
    def cards(self) -> tuple[SpeciesCard, ...]:
        return tuple(self._cards)

    def refresh_current_view(self) -> None:
        if self._loading:
            # The pending list may predate a change; load again once it lands.
            self._refresh_pending = True
            return
        self._loading = True
        self._refresh_pending = False
        self.refresh_button.setEnabled(False)
        self.status_label.setText("Loading...")
        try:
            reply = self._store.list_species()
        except RuntimeError as exc:
            self._on_load_failed(str(exc))
            return
        reply.succeeded.connect(self._on_species_loaded)
        reply.failed.connect(self._on_load_failed)

    def _on_species_loaded(self, records: object) -> None:
        self._loading = False
        if self._refresh_pending:
            self.refresh_current_view()
            return
        self.refresh_button.setEnabled(True)
        species = [record for record in (records or []) if isinstance(record, SpeciesRecord)]
        self.status_label.setText(f"{len(species)} species")
        self._rebuild_cards(species)

    def _on_load_failed(self, message: str) -> None:
        self._loading = False
        if self._refresh_pending:
            self.refresh_current_view()
            return
        self.refresh_button.setEnabled(True)
        detail = error_text(message)
        self.status_label.setText("Could not load species.")
        _LOGGER.warning("Species list failed to load: %s", detail)
        self.notifier.notify("Error loading species", detail, SEVERITY_DESTRUCTIVE)

    def _rebuild_cards(self, species: list[SpeciesRecord]) -> None:
        for card in self._cards:
            self._grid.removeWidget(card)
            card.deleteLater()
        self._cards = []
        theme_mode = "dark" if self._dark_mode_enabled else "light"
        for index, record in enumerate(species):
            card = SpeciesCard(
                species=record,
                session_id=self._session_id,
                store=self._store,
                notifier=self.notifier,
                locale=self._locale,
                image_network=self._image_network,
                parent=self._grid_host,
                theme_mode=theme_mode,
            )
            card.refresh_requested.connect(self.refresh_current_view)
            row, column = divmod(index, _CARDS_PER_ROW)
            self._grid.addWidget(card, row, column)
            self._cards.append(card)

    def _build_menu(self) -> None:
        view_menu = self.menuBar().addMenu("View")
        refresh_action = QAction("Refresh", self)
        refresh_action.setShortcut("F5")
        refresh_action.triggered.connect(self.refresh_current_view)
        view_menu.addAction(refresh_action)

        dark_mode_action = QAction("Dark Mode", self)
        dark_mode_action.setCheckable(True)
        dark_mode_action.setChecked(self._dark_mode_enabled)
        dark_mode_action.toggled.connect(self._set_dark_mode)
        view_menu.addAction(dark_mode_action)

    def _set_dark_mode(self, enabled: bool) -> None:
        self._dark_mode_enabled = bool(enabled)
        app = QApplication.instance()
        if isinstance(app, QApplication):
            apply_app_theme(app, mode="dark" if enabled else "light")
        save_dark_mode(self._dark_mode_enabled)


def _configure_logging() -> None:
    level = logging.DEBUG if db_debug_enabled() else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run(argv: Sequence[str] | None = None) -> int:
    _configure_logging()
    app = QApplication.instance()
    if app is None:
        app = QApplication(list(argv or sys.argv))

    app.setApplicationName("speciescatalog")
    app.setApplicationVersion(APP_VERSION)

    dark_mode_enabled = load_dark_mode(default=False)
    apply_app_theme(app, mode="dark" if dark_mode_enabled else "light")

    supabase_settings = load_supabase_settings()
    store = SupabaseSpeciesStore(SupabaseSpeciesStoreConfig.from_mapping(supabase_settings.to_mapping()))
    session_id = load_session_user_id()
    if not session_id:
        _LOGGER.info("No sessionUserId configured in %s; species will be read-only.", settings_path())

    window = SpeciesCatalogWindow(
        store=store,
        session_id=session_id,
        dark_mode_enabled=dark_mode_enabled,
    )
    store.setParent(window)
    window.show()
    window.refresh_current_view()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(run())
