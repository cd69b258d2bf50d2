import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from typing import Any, Mapping

import pytest
from PySide6.QtCore import QLocale
from PySide6.QtWidgets import QApplication

from speciescatalog.app.notifications import SEVERITY_NORMAL, Notification
from speciescatalog.app.species_models import SpeciesRecord
from speciescatalog.app.species_store import SpeciesStoreReply


class FakeSpeciesStore:
    """In-memory store; every call records itself and hands back a pending reply."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.replies: list[SpeciesStoreReply] = []
        self.unavailable_message = ""

    @property
    def last_reply(self) -> SpeciesStoreReply:
        return self.replies[-1]

    def list_species(self) -> SpeciesStoreReply:
        return self._reply("list")

    def update_species(self, species_id: int, fields: Mapping[str, Any]) -> SpeciesStoreReply:
        return self._reply("update", species_id, dict(fields))

    def delete_species(self, species_id: int) -> SpeciesStoreReply:
        return self._reply("delete", species_id)

    def _reply(self, operation: str, *args: Any) -> SpeciesStoreReply:
        if self.unavailable_message:
            raise RuntimeError(self.unavailable_message)
        self.calls.append((operation, *args))
        reply = SpeciesStoreReply(operation)
        self.replies.append(reply)
        return reply


class RecordingNotifier:
    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, title: str, description: str = "", severity: str = SEVERITY_NORMAL) -> None:
        self.notifications.append(Notification(title=title, description=description, severity=severity))

    @property
    def titles(self) -> list[str]:
        return [notification.title for notification in self.notifications]


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """Provide the single QApplication every widget test needs."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture
def store() -> FakeSpeciesStore:
    return FakeSpeciesStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def us_locale() -> QLocale:
    return QLocale(QLocale.Language.English, QLocale.Country.UnitedStates)


@pytest.fixture
def lion() -> SpeciesRecord:
    return SpeciesRecord(
        id=7,
        author="user-1",
        scientific_name="Panthera leo",
        kingdom="Animalia",
        common_name="Lion",
        total_population=23000,
        description="Large social cat of the African savanna.",
        image="images/panthera_leo.jpg",
    )


@pytest.fixture
def bare_species() -> SpeciesRecord:
    return SpeciesRecord(
        id=8,
        author="user-2",
        scientific_name="Amanita muscaria",
        kingdom="Fungi",
    )
