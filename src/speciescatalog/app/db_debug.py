from __future__ import annotations

import itertools
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock


_DB_DEBUG_ENV = "SPECIESCATALOG_DB_DEBUG"
_DB_DEBUG_LOG_ENV = "SPECIESCATALOG_DB_DEBUG_LOG"
_TRUTHY_VALUES = frozenset({"1", "true", "yes", "on", "y"})
_SECRET_FIELDS = frozenset({"api_key", "apikey", "authorization", "access_token", "token", "password", "secret"})
_MASK = "<redacted>"
_LOGGER = logging.getLogger("speciescatalog.db")
_WRITE_LOCK = Lock()
_sequence = itertools.count(1)


def db_debug_enabled() -> bool:
    return str(os.getenv(_DB_DEBUG_ENV, "") or "").strip().casefold() in _TRUTHY_VALUES


def db_debug_log_path() -> Path | None:
    target = str(os.getenv(_DB_DEBUG_LOG_ENV, "") or "").strip()
    if not target:
        return None
    return Path(target).expanduser()


def db_debug(event: str, **payload: object) -> None:
    """Trace one species store event as a JSON line.

    Lines are appended to ``SPECIESCATALOG_DB_DEBUG_LOG`` when it is set and
    otherwise logged on ``speciescatalog.db`` at DEBUG. Tracing is off unless
    ``SPECIESCATALOG_DB_DEBUG`` is truthy.
    """
    if not db_debug_enabled():
        return
    line = json.dumps(
        {
            "seq": next(_sequence),
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "event": str(event or "").strip() or "unknown",
            "data": _mask_secrets(payload),
        },
        ensure_ascii=True,
        default=str,
    )
    destination = db_debug_log_path()
    if destination is None:
        _LOGGER.debug("%s", line)
        return
    try:
        with _WRITE_LOCK:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with destination.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
    except OSError as exc:
        _LOGGER.warning("Could not write db debug log %s: %s", destination, exc)
        _LOGGER.debug("%s", line)


def _mask_secrets(value: object) -> object:
    if isinstance(value, dict):
        return {
            str(key): _MASK if str(key).strip().casefold() in _SECRET_FIELDS else _mask_secrets(entry)
            for key, entry in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_mask_secrets(entry) for entry in value]
    return value
