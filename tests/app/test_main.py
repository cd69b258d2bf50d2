import pytest

from speciescatalog.app.main import SpeciesCatalogWindow
from speciescatalog.app.notifications import SEVERITY_DESTRUCTIVE


@pytest.fixture
def window(store, notifier, us_locale):
    widget = SpeciesCatalogWindow(store=store, session_id="user-1", notifier=notifier, locale=us_locale)
    yield widget
    widget.deleteLater()


def test_refresh_builds_cards(window, store, lion, bare_species):
    """Should list species and build one card per record."""
    window.refresh_current_view()
    assert window.status_label.text() == "Loading..."
    assert not window.refresh_button.isEnabled()

    store.last_reply.resolve([lion, bare_species])

    assert [card.current_species.id for card in window.cards] == [7, 8]
    assert window.status_label.text() == "2 species"
    assert window.cards[0].can_modify
    assert not window.cards[1].can_modify


def test_refresh_is_not_reentrant(window, store):
    """Should ignore refresh requests while a load is pending."""
    window.refresh_current_view()
    window.refresh_current_view()

    assert store.calls == [("list",)]


def test_load_failure_is_reported(window, store, notifier):
    """Should toast the error and allow a retry."""
    window.refresh_current_view()
    store.last_reply.reject("")

    assert window.status_label.text() == "Could not load species."
    assert notifier.titles == ["Error loading species"]
    assert notifier.notifications[0].description == "Unknown error"
    assert notifier.notifications[0].severity == SEVERITY_DESTRUCTIVE
    assert window.refresh_button.isEnabled()


def test_deleted_card_triggers_reload(window, store, lion):
    """Should reload the list when a card reports a deletion."""
    window.refresh_current_view()
    store.last_reply.resolve([lion])
    card = window.cards[0]

    card.request_delete()
    card.confirm_dialog.confirm_button.click()
    store.last_reply.resolve()

    assert store.calls == [("list",), ("delete", 7), ("list",)]
    store.last_reply.resolve([])
    assert window.cards == ()
    assert window.status_label.text() == "0 species"


def test_refresh_during_load_reloads_after_it(window, store, lion):
    """Should load again when a refresh arrives while an older load is pending."""
    window.refresh_current_view()
    store.last_reply.resolve([lion])
    card = window.cards[0]

    window.refresh_current_view()
    stale_list = store.last_reply
    card.request_delete()
    card.confirm_dialog.confirm_button.click()
    store.last_reply.resolve()
    stale_list.resolve([lion])

    assert store.calls == [("list",), ("list",), ("delete", 7), ("list",)]
    store.last_reply.resolve([])
    assert window.cards == ()
    assert window.status_label.text() == "0 species"
