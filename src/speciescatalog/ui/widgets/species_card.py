from __future__ import annotations

import logging

from PySide6.QtCore import QLocale, Qt, Signal
from PySide6.QtNetwork import QNetworkAccessManager
from PySide6.QtWidgets import QFrame, QLabel, QPushButton, QVBoxLayout, QWidget

from speciescatalog.app.notifications import SEVERITY_DESTRUCTIVE, Notifier, error_text
from speciescatalog.app.species_models import SpeciesCardState, SpeciesRecord, description_preview
from speciescatalog.app.species_store import SpeciesStore
from speciescatalog.ui.dialogs.edit_species_dialog import EditSpeciesDialog
from speciescatalog.ui.dialogs.species_details_dialog import SpeciesDetailsDialog
from speciescatalog.ui.widgets.remote_image import RemoteImageLabel
from speciescatalog.ui.window.app_dialogs import AppConfirmDialog


_LOGGER = logging.getLogger("speciescatalog.ui")
_CARD_WIDTH = 288


class SpeciesCard(QFrame):
    """Summary card for one species with details, edit and delete flows.

    The card keeps its own copy of the record. Edits replace that copy, so the
    summary, the details dialog and the next edit session all show the edited
    values without the host reloading anything. Edit and delete controls only
    exist when the viewer is the record's author.
    """

    refresh_requested = Signal()
    species_changed = Signal(object)
    state_changed = Signal(str)

    def __init__(
        self,
        *,
        species: SpeciesRecord,
        session_id: str,
        store: SpeciesStore,
        notifier: Notifier,
        locale: QLocale | None = None,
        image_network: QNetworkAccessManager | None = None,
        parent: QWidget | None = None,
        theme_mode: str | None = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("SpeciesCard")
        self.setFixedWidth(_CARD_WIDTH)

        self._species = species
        self._current_species = species
        self._session_id = str(session_id or "").strip()
        self._store = store
        self._notifier = notifier
        self._locale = locale
        self._theme_mode = theme_mode
        self._state = SpeciesCardState.CLOSED
        self._details_dialog: SpeciesDetailsDialog | None = None
        self._edit_dialog: EditSpeciesDialog | None = None
        self._confirm_dialog: AppConfirmDialog | None = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(6)

        self.image_label = RemoteImageLabel(self, network=image_network)
        layout.addWidget(self.image_label)

        self.title_label = QLabel(self)
        self.title_label.setObjectName("SpeciesCardTitle")
        self.title_label.setTextFormat(Qt.TextFormat.PlainText)
        self.title_label.setWordWrap(True)
        layout.addWidget(self.title_label)

        self.subtitle_label = QLabel(self)
        self.subtitle_label.setObjectName("SpeciesCardSubtitle")
        self.subtitle_label.setTextFormat(Qt.TextFormat.PlainText)
        self.subtitle_label.setWordWrap(True)
        layout.addWidget(self.subtitle_label)

        self.preview_label = QLabel(self)
        self.preview_label.setObjectName("SpeciesCardPreview")
        self.preview_label.setTextFormat(Qt.TextFormat.PlainText)
        self.preview_label.setWordWrap(True)
        layout.addWidget(self.preview_label)
        layout.addStretch(1)

        self.learn_more_button = QPushButton("Learn More", self)
        self.learn_more_button.setObjectName("SpeciesCardButton")
        self.learn_more_button.clicked.connect(self.open_details)
        layout.addWidget(self.learn_more_button)

        self.edit_button: QPushButton | None = None
        self.delete_button: QPushButton | None = None
        if self.can_modify:
            self.edit_button = QPushButton("Edit", self)
            self.edit_button.setObjectName("SpeciesCardButton")
            self.edit_button.clicked.connect(self.open_editor)
            layout.addWidget(self.edit_button)

            self.delete_button = QPushButton("Delete", self)
            self.delete_button.setObjectName("SpeciesCardDangerButton")
            self.delete_button.clicked.connect(self.request_delete)
            layout.addWidget(self.delete_button)

        self._render()

    @property
    def can_modify(self) -> bool:
        return bool(self._session_id) and self._species.author == self._session_id

    @property
    def current_species(self) -> SpeciesRecord:
        return self._current_species

    @property
    def state(self) -> SpeciesCardState:
        return self._state

    @property
    def details_dialog(self) -> SpeciesDetailsDialog | None:
        return self._details_dialog

    @property
    def edit_dialog(self) -> EditSpeciesDialog | None:
        return self._edit_dialog

    @property
    def confirm_dialog(self) -> AppConfirmDialog | None:
        return self._confirm_dialog

    def preview_text(self) -> str:
        return self.preview_label.text()

    def open_details(self) -> None:
        if self._state is not SpeciesCardState.CLOSED:
            return
        dialog = SpeciesDetailsDialog(
            species=self._current_species,
            locale=self._locale,
            parent=self,
            theme_mode=self._theme_mode,
        )
        dialog.finished.connect(lambda _result: self._on_details_finished(dialog))
        self._details_dialog = dialog
        self._set_state(SpeciesCardState.VIEWING)
        dialog.open()

    def open_editor(self) -> None:
        if not self.can_modify or self._state is not SpeciesCardState.CLOSED:
            return
        dialog = self._edit_dialog
        if dialog is None:
            dialog = EditSpeciesDialog(
                species=self._current_species,
                store=self._store,
                notifier=self._notifier,
                on_species_updated=self._handle_species_updated,
                parent=self,
                theme_mode=self._theme_mode,
            )
            dialog.finished.connect(lambda _result: self._return_to_closed(SpeciesCardState.EDITING))
            self._edit_dialog = dialog
        elif not dialog.submitting:
            dialog.set_species(self._current_species)
        self._set_state(SpeciesCardState.EDITING)
        dialog.set_open(True)

    def request_delete(self) -> None:
        if not self.can_modify or self._state is not SpeciesCardState.CLOSED:
            return
        dialog = AppConfirmDialog(
            title="Are you sure?",
            message=f"'{self._current_species.scientific_name}' will be permanently deleted.",
            confirm_text="Delete",
            busy_text="Deleting...",
            cancel_text="Cancel",
            danger=True,
            parent=self,
            theme_mode=self._theme_mode,
        )
        dialog.confirmed.connect(self._delete_species)
        dialog.rejected.connect(self._on_delete_cancelled)
        self._confirm_dialog = dialog
        self._set_state(SpeciesCardState.CONFIRMING_DELETE)
        dialog.open()

    def _delete_species(self) -> None:
        if self._state is not SpeciesCardState.CONFIRMING_DELETE:
            return
        self._set_state(SpeciesCardState.DELETING)
        if self._confirm_dialog is not None:
            self._confirm_dialog.set_busy(True)
        try:
            reply = self._store.delete_species(self._current_species.id)
        except RuntimeError as exc:
            self._on_delete_failed(str(exc))
            return
        reply.succeeded.connect(lambda _result: self._on_delete_succeeded())
        reply.failed.connect(self._on_delete_failed)

    def _on_delete_succeeded(self) -> None:
        self._notifier.notify(
            "Species deleted",
            "The species has been deleted successfully.",
        )
        self._finish_delete()
        self.refresh_requested.emit()

    def _on_delete_failed(self, message: str) -> None:
        self._notifier.notify(
            "Error deleting species",
            error_text(message),
            SEVERITY_DESTRUCTIVE,
        )
        self._finish_delete()

    def _finish_delete(self) -> None:
        dialog = self._confirm_dialog
        self._confirm_dialog = None
        if dialog is not None:
            dialog.set_busy(False)
            dialog.accept()
            dialog.deleteLater()
        self._set_state(SpeciesCardState.CLOSED)

    def _on_delete_cancelled(self) -> None:
        dialog = self._confirm_dialog
        self._confirm_dialog = None
        if dialog is not None:
            dialog.deleteLater()
        self._return_to_closed(SpeciesCardState.CONFIRMING_DELETE)

    def _on_details_finished(self, dialog: SpeciesDetailsDialog) -> None:
        if self._details_dialog is dialog:
            self._details_dialog = None
        dialog.deleteLater()
        self._return_to_closed(SpeciesCardState.VIEWING)

    def _handle_species_updated(self, updated: SpeciesRecord) -> None:
        if updated.id != self._current_species.id:
            _LOGGER.warning(
                "Ignoring update for species %s on card for species %s.",
                updated.id,
                self._current_species.id,
            )
            return
        self._current_species = updated
        self._render()
        self.species_changed.emit(updated)

    def _return_to_closed(self, expected: SpeciesCardState) -> None:
        if self._state is expected:
            self._set_state(SpeciesCardState.CLOSED)

    def _set_state(self, state: SpeciesCardState) -> None:
        if state is self._state:
            return
        self._state = state
        self.state_changed.emit(state.value)

    def _render(self) -> None:
        species = self._current_species
        self.image_label.set_source(species.image)
        self.image_label.setVisible(bool(species.image))
        self.title_label.setText(species.scientific_name)
        self.subtitle_label.setText(species.common_name or "")
        self.preview_label.setText(description_preview(species.description))
