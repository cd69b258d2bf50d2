from __future__ import annotations

from PySide6.QtCore import QLocale, Qt
from PySide6.QtWidgets import QFormLayout, QHBoxLayout, QLabel, QPushButton, QWidget

from speciescatalog.app.species_models import (
    SpeciesRecord,
    display_common_name,
    display_description,
    format_population,
)
from speciescatalog.ui.window.frameless_dialog import FramelessDialog


_DETAIL_ROWS: tuple[tuple[str, str], ...] = (
    ("scientific_name", "Scientific Name:"),
    ("common_name", "Common Name:"),
    ("total_population", "Total Population:"),
    ("kingdom", "Kingdom:"),
    ("description", "Description:"),
)


class SpeciesDetailsDialog(FramelessDialog):
    def __init__(
        self,
        *,
        species: SpeciesRecord,
        locale: QLocale | None = None,
        parent: QWidget | None = None,
        theme_mode: str | None = None,
    ) -> None:
        super().__init__(title="Species Details", parent=parent, theme_mode=theme_mode)
        self.setMinimumSize(480, 320)
        self.resize(520, 380)
        self._locale = locale

        form = QFormLayout()
        form.setContentsMargins(0, 0, 0, 0)
        form.setHorizontalSpacing(12)
        form.setVerticalSpacing(8)
        form.setLabelAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)

        self._value_labels: dict[str, QLabel] = {}
        for field_name, caption in _DETAIL_ROWS:
            caption_label = QLabel(f"<b>{caption}</b>", self.body)
            value_label = QLabel("", self.body)
            value_label.setObjectName("SpeciesDetailValue")
            value_label.setTextFormat(Qt.TextFormat.PlainText)
            value_label.setWordWrap(True)
            value_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
            form.addRow(caption_label, value_label)
            self._value_labels[field_name] = value_label
        self.body_layout.addLayout(form)
        self.body_layout.addStretch(1)

        footer = QHBoxLayout()
        footer.setContentsMargins(0, 0, 0, 0)
        footer.addStretch(1)
        close_button = QPushButton("Close", self.body)
        close_button.setObjectName("DialogSecondaryButton")
        close_button.clicked.connect(self.accept)
        footer.addWidget(close_button)
        self.body_layout.addLayout(footer)

        self.set_species(species)

    def set_species(self, species: SpeciesRecord) -> None:
        values = {
            "scientific_name": species.scientific_name,
            "common_name": display_common_name(species.common_name),
            "total_population": format_population(species.total_population, locale=self._locale),
            "kingdom": species.kingdom,
            "description": display_description(species.description),
        }
        for field_name, label in self._value_labels.items():
            label.setText(values[field_name])

    def value_text(self, field_name: str) -> str:
        label = self._value_labels.get(field_name)
        return label.text() if label is not None else ""
