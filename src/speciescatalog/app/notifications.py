from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


SEVERITY_NORMAL = "normal"
SEVERITY_DESTRUCTIVE = "destructive"
SUPPORTED_SEVERITIES: tuple[str, ...] = (SEVERITY_NORMAL, SEVERITY_DESTRUCTIVE)
UNKNOWN_ERROR_TEXT = "Unknown error"


def normalize_severity(value: str | None) -> str:
    normalized = str(value or "").strip().casefold()
    if normalized in SUPPORTED_SEVERITIES:
        return normalized
    return SEVERITY_NORMAL


def error_text(message: object) -> str:
    text = str(message or "").strip()
    return text or UNKNOWN_ERROR_TEXT


@dataclass(frozen=True, slots=True)
class Notification:
    title: str
    description: str = ""
    severity: str = SEVERITY_NORMAL

    @property
    def destructive(self) -> bool:
        return self.severity == SEVERITY_DESTRUCTIVE


class Notifier(Protocol):
    def notify(self, title: str, description: str = "", severity: str = SEVERITY_NORMAL) -> None:
        raise NotImplementedError
