import pytest

from speciescatalog.app.notifications import SEVERITY_DESTRUCTIVE
from speciescatalog.app.species_models import SpeciesCardState, SpeciesRecord
from speciescatalog.ui.widgets.species_card import SpeciesCard


@pytest.fixture
def make_card(store, notifier, us_locale):
    cards = []

    def _make(species, session_id="user-1"):
        card = SpeciesCard(
            species=species,
            session_id=session_id,
            store=store,
            notifier=notifier,
            locale=us_locale,
        )
        cards.append(card)
        return card

    yield _make
    for card in cards:
        card.deleteLater()


@pytest.fixture
def card(make_card, lion):
    return make_card(lion)


def _record(**overrides):
    values = {
        "id": 11,
        "author": "user-1",
        "scientific_name": "Ginkgo biloba",
        "kingdom": "Plantae",
    }
    values.update(overrides)
    return SpeciesRecord(**values)


def test_card_shows_summary(card):
    """Should render the scientific name, common name and preview."""
    assert card.title_label.text() == "Panthera leo"
    assert card.subtitle_label.text() == "Lion"
    assert card.preview_text() == "Large social cat of the African savanna...."
    assert card.state is SpeciesCardState.CLOSED


def test_long_description_preview(make_card):
    """Should cut the preview at 150 characters."""
    card = make_card(_record(description="A" * 200))

    assert card.preview_text() == "A" * 150 + "..."


def test_missing_description_preview(make_card):
    """Should render an empty preview without a description."""
    card = make_card(_record())

    assert card.preview_text() == ""
    assert card.subtitle_label.text() == ""
    assert card.image_label.isHidden()


def test_details_dialog_formats_population(make_card):
    """Should group the population and fill placeholders for absent values."""
    card = make_card(_record(total_population=1234567))

    card.open_details()

    details = card.details_dialog
    assert card.state is SpeciesCardState.VIEWING
    assert details.value_text("total_population") == "1,234,567"
    assert details.value_text("common_name") == "N/A"
    assert details.value_text("description") == "No description provided."

    details.reject()
    assert card.state is SpeciesCardState.CLOSED
    assert card.details_dialog is None


def test_details_dialog_unknown_population(make_card):
    """Should show N/A when the population is unknown and 0 when it is zero."""
    unknown = make_card(_record())
    unknown.open_details()
    assert unknown.details_dialog.value_text("total_population") == "N/A"

    zero = make_card(_record(id=12, total_population=0))
    zero.open_details()
    assert zero.details_dialog.value_text("total_population") == "0"


@pytest.mark.parametrize("session_id", ["someone-else", ""])
def test_non_owner_has_no_modify_controls(make_card, lion, session_id):
    """Should hide edit and delete for anyone but the author."""
    card = make_card(lion, session_id=session_id)

    assert not card.can_modify
    assert card.edit_button is None
    assert card.delete_button is None
    card.open_editor()
    card.request_delete()
    assert card.state is SpeciesCardState.CLOSED


def test_owner_has_modify_controls(card):
    """Should offer edit and delete to the author."""
    assert card.can_modify
    assert card.edit_button is not None
    assert card.delete_button is not None


def test_cancel_delete_sends_nothing(card, store):
    """Should close the prompt without touching the store."""
    card.request_delete()
    assert card.state is SpeciesCardState.CONFIRMING_DELETE

    card.confirm_dialog.cancel_button.click()

    assert store.calls == []
    assert card.state is SpeciesCardState.CLOSED
    assert card.confirm_dialog is None


def test_delete_success_requests_refresh(card, store, notifier):
    """Should delete by id, toast success and ask the host to reload."""
    refreshes = []
    card.refresh_requested.connect(lambda: refreshes.append(True))

    card.request_delete()
    dialog = card.confirm_dialog
    dialog.confirm_button.click()

    assert store.calls == [("delete", 7)]
    assert card.state is SpeciesCardState.DELETING
    assert dialog.busy
    assert dialog.confirm_button.text() == "Deleting..."
    assert not dialog.cancel_button.isEnabled()

    store.last_reply.resolve()

    assert refreshes == [True]
    assert notifier.titles == ["Species deleted"]
    assert notifier.notifications[0].description == "The species has been deleted successfully."
    assert card.state is SpeciesCardState.CLOSED


def test_delete_failure_keeps_card(card, store, notifier):
    """Should toast the error and not ask for a reload."""
    refreshes = []
    card.refresh_requested.connect(lambda: refreshes.append(True))

    card.request_delete()
    card.confirm_dialog.confirm_button.click()
    store.last_reply.reject("")

    assert refreshes == []
    assert notifier.titles == ["Error deleting species"]
    assert notifier.notifications[0].description == "Unknown error"
    assert notifier.notifications[0].severity == SEVERITY_DESTRUCTIVE
    assert card.state is SpeciesCardState.CLOSED
    assert card.title_label.text() == "Panthera leo"


def test_busy_prompt_cannot_be_dismissed(card, store):
    """Should ignore cancel while the delete is in flight."""
    card.request_delete()
    dialog = card.confirm_dialog
    dialog.confirm_button.click()

    dialog.reject()

    assert card.state is SpeciesCardState.DELETING
    assert dialog.isVisible()


def test_edit_updates_card_details_and_next_edit(card, store, notifier):
    """Should show edited values everywhere without a reload."""
    changes = []
    card.species_changed.connect(changes.append)

    card.open_editor()
    editor = card.edit_dialog
    assert card.state is SpeciesCardState.EDITING
    editor.common_name_input.setText("African lion")
    editor.description_input.setPlainText("")
    editor.submit()
    store.last_reply.resolve()

    assert card.state is SpeciesCardState.CLOSED
    assert card.subtitle_label.text() == "African lion"
    assert card.preview_text() == ""
    assert changes == [card.current_species]
    assert card.current_species.description is None

    card.open_details()
    assert card.details_dialog.value_text("common_name") == "African lion"
    assert card.details_dialog.value_text("description") == "No description provided."
    card.details_dialog.reject()

    card.open_editor()
    assert card.edit_dialog is editor
    assert editor.common_name_input.text() == "African lion"


def test_reopened_editor_discards_abandoned_input(card):
    """Should re-seed the form from the record after a cancelled edit."""
    card.open_editor()
    card.edit_dialog.scientific_name_input.setText("Scratch")
    card.edit_dialog.cancel_button.click()
    assert card.state is SpeciesCardState.CLOSED

    card.open_editor()

    assert card.edit_dialog.scientific_name_input.text() == "Panthera leo"


def test_only_one_dialog_at_a_time(card):
    """Should refuse to open a second dialog while one is open."""
    card.open_details()
    card.open_editor()
    card.request_delete()

    assert card.state is SpeciesCardState.VIEWING
    assert card.edit_dialog is None
    assert card.confirm_dialog is None
