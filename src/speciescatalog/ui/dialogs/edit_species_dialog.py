from __future__ import annotations

from typing import Any, Callable

from PySide6.QtCore import QRegularExpression
from PySide6.QtGui import QRegularExpressionValidator
from PySide6.QtWidgets import (
    QComboBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from speciescatalog.app.notifications import SEVERITY_DESTRUCTIVE, Notifier, error_text
from speciescatalog.app.species_models import KINGDOMS, SpeciesEdits, SpeciesRecord, validate_species_form
from speciescatalog.app.species_store import SpeciesStore
from speciescatalog.ui.window.frameless_dialog import FramelessDialog


SUBMIT_TEXT = "Update Species"
SUBMITTING_TEXT = "Updating..."


class EditSpeciesDialog(FramelessDialog):
    """Form for the five editable species fields.

    The dialog is seeded from ``species`` and re-seeded by ``set_species``.
    A successful update hands the merged record to ``on_species_updated`` and
    closes the dialog; a failed one keeps it open with the user's input.
    """

    def __init__(
        self,
        *,
        species: SpeciesRecord,
        store: SpeciesStore,
        notifier: Notifier,
        on_species_updated: Callable[[SpeciesRecord], None],
        parent: QWidget | None = None,
        theme_mode: str | None = None,
    ) -> None:
        super().__init__(title="Edit Species", parent=parent, theme_mode=theme_mode)
        self.setMinimumSize(520, 460)
        self.resize(560, 520)

        self._species = species
        self._store = store
        self._notifier = notifier
        self._on_species_updated = on_species_updated
        self._submitting = False
        self._error_labels: dict[str, QLabel] = {}

        form = QFormLayout()
        form.setContentsMargins(0, 0, 0, 0)
        form.setHorizontalSpacing(12)
        form.setVerticalSpacing(10)

        self.scientific_name_input = QLineEdit(self.body)
        self.scientific_name_input.setObjectName("SpeciesFormInput")
        form.addRow("Scientific Name", self._with_error_label("scientific_name", self.scientific_name_input))

        self.common_name_input = QLineEdit(self.body)
        self.common_name_input.setObjectName("SpeciesFormInput")
        form.addRow("Common Name", self._with_error_label("common_name", self.common_name_input))

        self.kingdom_combo = QComboBox(self.body)
        self.kingdom_combo.setObjectName("SpeciesFormCombo")
        for kingdom in KINGDOMS:
            self.kingdom_combo.addItem(kingdom, kingdom)
        form.addRow("Kingdom", self._with_error_label("kingdom", self.kingdom_combo))

        self.population_input = QLineEdit(self.body)
        self.population_input.setObjectName("SpeciesFormInput")
        self.population_input.setPlaceholderText("Unknown")
        self.population_input.setValidator(
            QRegularExpressionValidator(QRegularExpression(r"^-?[0-9]*$"), self.population_input)
        )
        form.addRow("Total Population", self._with_error_label("total_population", self.population_input))

        self.description_input = QPlainTextEdit(self.body)
        self.description_input.setObjectName("SpeciesFormTextArea")
        self.description_input.setMinimumHeight(110)
        form.addRow("Description", self._with_error_label("description", self.description_input))

        self.body_layout.addLayout(form)

        footer = QHBoxLayout()
        footer.setContentsMargins(0, 0, 0, 0)
        footer.setSpacing(8)
        footer.addStretch(1)

        self.cancel_button = QPushButton("Cancel", self.body)
        self.cancel_button.setObjectName("DialogSecondaryButton")
        self.cancel_button.clicked.connect(self.reject)
        footer.addWidget(self.cancel_button)

        self.submit_button = QPushButton(SUBMIT_TEXT, self.body)
        self.submit_button.setObjectName("DialogPrimaryButton")
        self.submit_button.setDefault(True)
        self.submit_button.clicked.connect(self.submit)
        footer.addWidget(self.submit_button)

        self.body_layout.addLayout(footer)

        self._load_form(species)

    @property
    def species(self) -> SpeciesRecord:
        return self._species

    @property
    def submitting(self) -> bool:
        return self._submitting

    def set_species(self, species: SpeciesRecord) -> None:
        self._species = species
        self._load_form(species)

    def is_open(self) -> bool:
        return self.isVisible()

    def set_open(self, open_: bool) -> None:
        if open_:
            if not self.isVisible():
                self.open()
                self.scientific_name_input.setFocus()
            return
        if self.isVisible():
            self.reject()

    def form_values(self) -> dict[str, Any]:
        return {
            "scientific_name": self.scientific_name_input.text(),
            "common_name": self.common_name_input.text(),
            "kingdom": self.kingdom_combo.currentData(),
            "total_population": self.population_input.text(),
            "description": self.description_input.toPlainText(),
        }

    def field_error(self, field_name: str) -> str:
        label = self._error_labels.get(field_name)
        if label is None or label.isHidden():
            return ""
        return label.text()

    def submit(self) -> None:
        if self._submitting:
            return
        result = validate_species_form(self.form_values())
        self._show_field_errors(result.errors)
        if not result.ok or result.edits is None:
            return
        self._begin_update(result.edits)

    def _begin_update(self, edits: SpeciesEdits) -> None:
        species = self._species
        self._set_submitting(True)
        try:
            reply = self._store.update_species(species.id, edits.to_update_payload())
        except (RuntimeError, ValueError) as exc:
            self._on_update_failed(str(exc))
            return
        reply.succeeded.connect(lambda _result: self._on_update_succeeded(species, edits))
        reply.failed.connect(self._on_update_failed)

    def _on_update_succeeded(self, species: SpeciesRecord, edits: SpeciesEdits) -> None:
        updated = species.with_edits(edits)
        self._species = updated
        self._set_submitting(False)
        self._on_species_updated(updated)
        self._notifier.notify(
            "Species updated",
            "The species information has been updated successfully.",
        )
        self.set_open(False)

    def _on_update_failed(self, message: str) -> None:
        self._set_submitting(False)
        self._notifier.notify(
            "Error updating species",
            error_text(message),
            SEVERITY_DESTRUCTIVE,
        )

    def reject(self) -> None:
        # The pending reply reports back into this dialog, so it stays open.
        if self._submitting:
            return
        super().reject()

    def _set_submitting(self, submitting: bool) -> None:
        self._submitting = bool(submitting)
        self.submit_button.setEnabled(not self._submitting)
        self.cancel_button.setEnabled(not self._submitting)
        self.title_bar.close_button.setEnabled(not self._submitting)
        self.submit_button.setText(SUBMITTING_TEXT if self._submitting else SUBMIT_TEXT)

    def _load_form(self, species: SpeciesRecord) -> None:
        self.scientific_name_input.setText(species.scientific_name)
        self.common_name_input.setText(species.common_name or "")
        index = self.kingdom_combo.findData(species.kingdom)
        self.kingdom_combo.setCurrentIndex(max(0, index))
        self.population_input.setText("" if species.total_population is None else str(species.total_population))
        self.description_input.setPlainText(species.description or "")
        self._show_field_errors({})

    def _with_error_label(self, field_name: str, field_widget: QWidget) -> QWidget:
        container = QWidget(self.body)
        layout = QVBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(2)
        layout.addWidget(field_widget)
        error_label = QLabel("", container)
        error_label.setObjectName("SpeciesFieldError")
        error_label.setWordWrap(True)
        error_label.hide()
        layout.addWidget(error_label)
        self._error_labels[field_name] = error_label
        return container

    def _show_field_errors(self, errors: dict[str, str]) -> None:
        for field_name, label in self._error_labels.items():
            message = errors.get(field_name, "")
            label.setText(message)
            label.setVisible(bool(message))
