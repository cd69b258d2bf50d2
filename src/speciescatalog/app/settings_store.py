from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any


_APP_DIRNAME = "speciescatalog"
_SETTINGS_FILENAME = "settings.json"
_SETTINGS_PATH_ENV = "SPECIESCATALOG_SETTINGS_PATH"
_SESSION_USER_ID_ENV = "SPECIESCATALOG_SESSION_USER_ID"

_DARK_MODE_KEY = "darkMode"
_SESSION_USER_ID_KEY = "sessionUserId"

DEFAULT_SUPABASE_SCHEMA = "public"
DEFAULT_SUPABASE_SPECIES_TABLE = "species"
DEFAULT_SUPABASE_TIMEOUT_SECONDS = 8.0
MIN_SUPABASE_TIMEOUT_SECONDS = 1.0

# field -> (settings file key, environment override)
_SUPABASE_KEYS: dict[str, tuple[str, str]] = {
    "url": ("supabaseUrl", "SPECIESCATALOG_SUPABASE_URL"),
    "api_key": ("supabaseApiKey", "SPECIESCATALOG_SUPABASE_API_KEY"),
    "schema": ("supabaseSchema", ""),
    "species_table": ("supabaseSpeciesTable", ""),
    "timeout_seconds": ("supabaseTimeoutSeconds", ""),
}


@dataclass(frozen=True, slots=True)
class SupabaseSettings:
    url: str = ""
    api_key: str = ""
    schema: str = DEFAULT_SUPABASE_SCHEMA
    species_table: str = DEFAULT_SUPABASE_SPECIES_TABLE
    timeout_seconds: float = DEFAULT_SUPABASE_TIMEOUT_SECONDS

    @property
    def configured(self) -> bool:
        return bool(self.url and self.api_key)

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any] | None) -> SupabaseSettings:
        raw = value if isinstance(value, Mapping) else {}
        try:
            timeout_seconds = float(raw.get("timeout_seconds", DEFAULT_SUPABASE_TIMEOUT_SECONDS))
        except (TypeError, ValueError):
            timeout_seconds = DEFAULT_SUPABASE_TIMEOUT_SECONDS
        return cls(
            url=_clean(raw.get("url")).rstrip("/"),
            api_key=_clean(raw.get("api_key")),
            schema=_clean(raw.get("schema")) or DEFAULT_SUPABASE_SCHEMA,
            species_table=_clean(raw.get("species_table")) or DEFAULT_SUPABASE_SPECIES_TABLE,
            timeout_seconds=max(MIN_SUPABASE_TIMEOUT_SECONDS, timeout_seconds),
        )

    def to_mapping(self) -> dict[str, Any]:
        """Store configuration keys, as read by ``SupabaseSpeciesStoreConfig``."""
        return {
            "url": self.url,
            "api_key": self.api_key,
            "schema": self.schema,
            "table": self.species_table,
            "timeout_seconds": self.timeout_seconds,
        }


def _clean(value: Any) -> str:
    return str(value or "").strip()


def settings_path() -> Path:
    """Location of the JSON settings file.

    ``SPECIESCATALOG_SETTINGS_PATH`` wins; otherwise the per-user config
    directory of the platform is used.
    """
    override = _clean(os.environ.get(_SETTINGS_PATH_ENV))
    if override:
        return Path(override).expanduser()
    if os.name == "nt":
        for variable in ("APPDATA", "LOCALAPPDATA"):
            base = _clean(os.environ.get(variable))
            if base:
                return Path(base) / _APP_DIRNAME / "config" / _SETTINGS_FILENAME
    else:
        base = _clean(os.environ.get("XDG_CONFIG_HOME"))
        if base:
            return Path(base) / _APP_DIRNAME / _SETTINGS_FILENAME
    return Path.home() / ".config" / _APP_DIRNAME / _SETTINGS_FILENAME


def load_settings() -> dict[str, Any]:
    path = settings_path()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_settings(settings: Mapping[str, Any]) -> None:
    path = settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = path.with_name(path.name + ".tmp")
    staging.write_text(json.dumps(dict(settings), indent=2), encoding="utf-8")
    staging.replace(path)


def load_supabase_settings() -> SupabaseSettings:
    stored = load_settings()
    values: dict[str, Any] = {}
    for field_name, (file_key, env_name) in _SUPABASE_KEYS.items():
        from_env = _clean(os.environ.get(env_name)) if env_name else ""
        values[field_name] = from_env or stored.get(file_key)
    if values["timeout_seconds"] is None:
        values["timeout_seconds"] = DEFAULT_SUPABASE_TIMEOUT_SECONDS
    return SupabaseSettings.from_mapping(values)


def load_session_user_id(default: str = "") -> str:
    """Id of the signed-in user; records they authored become editable."""
    from_env = _clean(os.environ.get(_SESSION_USER_ID_ENV))
    if from_env:
        return from_env
    stored = load_settings().get(_SESSION_USER_ID_KEY)
    if isinstance(stored, str) and stored.strip():
        return stored.strip()
    return str(default)


def load_dark_mode(default: bool = False) -> bool:
    stored = load_settings().get(_DARK_MODE_KEY)
    return stored if isinstance(stored, bool) else bool(default)


def save_dark_mode(enabled: bool) -> None:
    stored = load_settings()
    stored[_DARK_MODE_KEY] = bool(enabled)
    save_settings(stored)
