from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from PySide6.QtCore import QLocale


KINGDOMS: tuple[str, ...] = (
    "Animalia",
    "Plantae",
    "Fungi",
    "Protista",
    "Archaea",
    "Bacteria",
)
EDITABLE_FIELDS: tuple[str, ...] = (
    "scientific_name",
    "common_name",
    "kingdom",
    "total_population",
    "description",
)
DESCRIPTION_PREVIEW_LENGTH = 150
NOT_AVAILABLE_TEXT = "N/A"
NO_DESCRIPTION_TEXT = "No description provided."


class SpeciesCardState(str, Enum):
    CLOSED = "closed"
    VIEWING = "viewing"
    EDITING = "editing"
    CONFIRMING_DELETE = "confirming_delete"
    DELETING = "deleting"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def _as_optional_text(value: Any) -> str | None:
    text = _as_text(value)
    return text or None


def normalize_kingdom(value: Any) -> str | None:
    text = _as_text(value)
    if not text:
        return None
    for kingdom in KINGDOMS:
        if kingdom.casefold() == text.casefold():
            return kingdom
    return None


def parse_population(value: Any) -> int | None:
    """Parse a population entry; blank input means "unknown", not zero.

    Raises ``ValueError`` for anything that is not a whole number.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("Population must be a whole number")
    if isinstance(value, int):
        return value
    text = _as_text(value).replace(",", "").replace("_", "")
    if not text:
        return None
    try:
        return int(text, 10)
    except ValueError:
        raise ValueError("Population must be a whole number") from None


@dataclass(frozen=True, slots=True)
class SpeciesEdits:
    scientific_name: str
    common_name: str | None
    kingdom: str
    total_population: int | None
    description: str | None

    def to_update_payload(self) -> dict[str, Any]:
        return {
            "scientific_name": self.scientific_name,
            "common_name": self.common_name,
            "kingdom": self.kingdom,
            "total_population": self.total_population,
            "description": self.description,
        }


@dataclass(slots=True)
class SpeciesRecord:
    id: int
    author: str
    scientific_name: str
    kingdom: str
    common_name: str | None = None
    total_population: int | None = None
    description: str | None = None
    image: str | None = None

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any] | None) -> "SpeciesRecord":
        if not isinstance(value, Mapping):
            raise ValueError("Species row must be a JSON object.")
        try:
            species_id = int(value.get("id"))
        except (TypeError, ValueError):
            raise ValueError(f"Species row has no valid id: {value.get('id')!r}") from None
        scientific_name = _as_text(value.get("scientific_name"))
        if not scientific_name:
            raise ValueError(f"Species {species_id} has no scientific name.")
        kingdom = normalize_kingdom(value.get("kingdom"))
        if kingdom is None:
            raise ValueError(f"Species {species_id} has unknown kingdom {value.get('kingdom')!r}.")
        population = parse_population(value.get("total_population"))
        if population is not None and population < 0:
            population = None
        return cls(
            id=species_id,
            author=_as_text(value.get("author")),
            scientific_name=scientific_name,
            kingdom=kingdom,
            common_name=_as_optional_text(value.get("common_name")),
            total_population=population,
            description=_as_optional_text(value.get("description")),
            image=_as_optional_text(value.get("image")),
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "author": self.author,
            "scientific_name": self.scientific_name,
            "common_name": self.common_name,
            "kingdom": self.kingdom,
            "total_population": self.total_population,
            "description": self.description,
            "image": self.image,
        }

    def editable_values(self) -> SpeciesEdits:
        return SpeciesEdits(
            scientific_name=self.scientific_name,
            common_name=self.common_name,
            kingdom=self.kingdom,
            total_population=self.total_population,
            description=self.description,
        )

    def with_edits(self, edits: SpeciesEdits) -> "SpeciesRecord":
        return replace(self, **edits.to_update_payload())


@dataclass(frozen=True, slots=True)
class SpeciesFormResult:
    edits: SpeciesEdits | None = None
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.edits is not None and not self.errors


def validate_species_form(raw: Mapping[str, Any]) -> SpeciesFormResult:
    errors: dict[str, str] = {}

    scientific_name = _as_text(raw.get("scientific_name"))
    if not scientific_name:
        errors["scientific_name"] = "Scientific name is required"

    kingdom = normalize_kingdom(raw.get("kingdom"))
    if kingdom is None:
        errors["kingdom"] = f"Kingdom must be one of: {', '.join(KINGDOMS)}"

    population: int | None = None
    try:
        population = parse_population(raw.get("total_population"))
    except ValueError as exc:
        errors["total_population"] = str(exc)
    else:
        if population is not None and population < 0:
            errors["total_population"] = "Population cannot be negative"

    if errors:
        return SpeciesFormResult(errors=errors)
    return SpeciesFormResult(
        edits=SpeciesEdits(
            scientific_name=scientific_name,
            common_name=_as_optional_text(raw.get("common_name")),
            kingdom=kingdom or KINGDOMS[0],
            total_population=population,
            description=_as_optional_text(raw.get("description")),
        )
    )


def description_preview(description: str | None) -> str:
    if not description:
        return ""
    return description[:DESCRIPTION_PREVIEW_LENGTH].strip() + "..."


def format_population(value: int | None, *, locale: QLocale | None = None) -> str:
    if value is None:
        return NOT_AVAILABLE_TEXT
    # QLocale.toString omits grouping under the C locale and caps at 32 bits.
    selected = locale if locale is not None else QLocale()
    separator = selected.groupSeparator() or ","
    return f"{int(value):,}".replace(",", separator)


def display_common_name(value: str | None) -> str:
    return value if value else NOT_AVAILABLE_TEXT


def display_description(value: str | None) -> str:
    return value if value else NO_DESCRIPTION_TEXT
