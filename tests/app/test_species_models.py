import pytest
from PySide6.QtCore import QLocale

from speciescatalog.app.species_models import (
    EDITABLE_FIELDS,
    KINGDOMS,
    NO_DESCRIPTION_TEXT,
    NOT_AVAILABLE_TEXT,
    SpeciesEdits,
    SpeciesRecord,
    description_preview,
    display_common_name,
    display_description,
    format_population,
    normalize_kingdom,
    parse_population,
    validate_species_form,
)


def _form(**overrides):
    values = {
        "scientific_name": "Quercus robur",
        "common_name": "English oak",
        "kingdom": "Plantae",
        "total_population": "1200",
        "description": "Long-lived deciduous tree.",
    }
    values.update(overrides)
    return values


def test_kingdoms_are_the_six_fixed_values():
    """Should expose exactly the six taxonomy kingdoms."""
    assert KINGDOMS == ("Animalia", "Plantae", "Fungi", "Protista", "Archaea", "Bacteria")


@pytest.mark.parametrize(
    "raw,expected",
    [("Fungi", "Fungi"), ("fungi", "Fungi"), ("  BACTERIA ", "Bacteria"), ("Chromista", None), ("", None)],
)
def test_normalize_kingdom(raw, expected):
    """Should map case-insensitive names onto the enum and reject anything else."""
    assert normalize_kingdom(raw) == expected


@pytest.mark.parametrize(
    "raw,expected",
    [("", None), ("   ", None), (None, None), ("42", 42), ("1,234,567", 1234567), (0, 0), ("-3", -3)],
)
def test_parse_population(raw, expected):
    """Should treat blank input as absent and parse whole numbers."""
    assert parse_population(raw) == expected


@pytest.mark.parametrize("raw", ["12.5", "many", True])
def test_parse_population_rejects_non_integers(raw):
    """Should raise ValueError for values that are not whole numbers."""
    with pytest.raises(ValueError, match="whole number"):
        parse_population(raw)


def test_validate_species_form_accepts_valid_input():
    """Should produce edits for a fully valid form."""
    result = validate_species_form(_form())

    assert result.ok
    assert result.errors == {}
    assert result.edits == SpeciesEdits(
        scientific_name="Quercus robur",
        common_name="English oak",
        kingdom="Plantae",
        total_population=1200,
        description="Long-lived deciduous tree.",
    )


def test_validate_species_form_requires_scientific_name():
    """Should reject a blank scientific name with a field message."""
    result = validate_species_form(_form(scientific_name="   "))

    assert not result.ok
    assert result.edits is None
    assert result.errors == {"scientific_name": "Scientific name is required"}


def test_validate_species_form_normalizes_empty_optional_fields():
    """Should turn blank optional inputs into None, population included."""
    result = validate_species_form(_form(common_name="", total_population="", description="  "))

    assert result.ok
    assert result.edits.common_name is None
    assert result.edits.total_population is None
    assert result.edits.description is None


def test_validate_species_form_rejects_unknown_kingdom():
    """Should reject kingdoms outside the enum."""
    result = validate_species_form(_form(kingdom="Viruses"))

    assert "kingdom" in result.errors


@pytest.mark.parametrize(
    "population,message",
    [("-5", "Population cannot be negative"), ("lots", "Population must be a whole number")],
)
def test_validate_species_form_rejects_bad_population(population, message):
    """Should reject negative and non-integer populations."""
    result = validate_species_form(_form(total_population=population))

    assert result.errors == {"total_population": message}


def test_validate_species_form_reports_every_failing_field():
    """Should collect errors for all invalid fields at once."""
    result = validate_species_form(_form(scientific_name="", kingdom="", total_population="x"))

    assert set(result.errors) == {"scientific_name", "kingdom", "total_population"}


def test_with_edits_replaces_only_editable_fields(lion):
    """Should keep id, author and image while replacing the five editable fields."""
    edits = SpeciesEdits(
        scientific_name="Panthera leo melanochaita",
        common_name=None,
        kingdom="Animalia",
        total_population=None,
        description="Southern lion.",
    )

    updated = lion.with_edits(edits)

    assert updated.id == lion.id
    assert updated.author == lion.author
    assert updated.image == lion.image
    assert updated.editable_values() == edits
    assert lion.scientific_name == "Panthera leo"


def test_update_payload_has_exactly_the_editable_fields(lion):
    """Should send the five editable columns and nothing else."""
    payload = lion.editable_values().to_update_payload()

    assert tuple(payload) == EDITABLE_FIELDS
    assert payload["total_population"] == 23000


def test_from_mapping_parses_row():
    """Should build a record from a PostgREST row, blank optionals becoming None."""
    record = SpeciesRecord.from_mapping(
        {
            "id": "12",
            "author": "abc",
            "scientific_name": "Escherichia coli",
            "common_name": "",
            "kingdom": "bacteria",
            "total_population": None,
            "description": None,
            "image": "",
        }
    )

    assert record == SpeciesRecord(id=12, author="abc", scientific_name="Escherichia coli", kingdom="Bacteria")
    assert SpeciesRecord.from_mapping(record.to_mapping()) == record


@pytest.mark.parametrize(
    "row",
    [
        None,
        {"scientific_name": "No id", "kingdom": "Fungi"},
        {"id": 1, "scientific_name": "", "kingdom": "Fungi"},
        {"id": 1, "scientific_name": "Bad kingdom", "kingdom": "Minerals"},
    ],
)
def test_from_mapping_rejects_invalid_rows(row):
    """Should raise ValueError for rows that break the record invariants."""
    with pytest.raises(ValueError):
        SpeciesRecord.from_mapping(row)


def test_description_preview_truncates_long_text():
    """Should keep the first 150 characters and add an ellipsis."""
    assert description_preview("A" * 200) == "A" * 150 + "..."


def test_description_preview_trims_before_ellipsis():
    """Should trim whitespace left at the cut point."""
    text = "B" * 148 + "  tail"
    assert description_preview(text) == "B" * 148 + "..."


def test_description_preview_short_text_still_gets_ellipsis():
    """Should add an ellipsis whenever a description exists."""
    assert description_preview("Short.") == "Short...."


@pytest.mark.parametrize("description", [None, ""])
def test_description_preview_empty(description):
    """Should render nothing when there is no description."""
    assert description_preview(description) == ""


def test_format_population_groups_thousands(us_locale):
    """Should group thousands using the locale separator."""
    assert format_population(1234567, locale=us_locale) == "1,234,567"
    assert format_population(8_100_000_000, locale=us_locale) == "8,100,000,000"


def test_format_population_uses_locale_separator():
    """Should use the group separator of the given locale."""
    german = QLocale(QLocale.Language.German, QLocale.Country.Germany)
    assert format_population(1234567, locale=german) == "1.234.567"


def test_format_population_absent():
    """Should render N/A for an unknown population and 0 for zero."""
    assert format_population(None) == NOT_AVAILABLE_TEXT
    assert format_population(0) == "0"


def test_display_fallbacks():
    """Should fall back to placeholders for absent common name and description."""
    assert display_common_name(None) == "N/A"
    assert display_common_name("Lion") == "Lion"
    assert display_description(None) == NO_DESCRIPTION_TEXT
    assert display_description("Text") == "Text"
