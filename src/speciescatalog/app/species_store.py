from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from time import perf_counter
from typing import Any, Callable, Protocol
from urllib.parse import quote

from PySide6.QtCore import QObject, QUrl, Signal
from PySide6.QtNetwork import QNetworkAccessManager, QNetworkReply, QNetworkRequest

from speciescatalog.app.db_debug import db_debug
from speciescatalog.app.species_models import EDITABLE_FIELDS, SpeciesRecord


_DEFAULT_SUPABASE_SCHEMA = "public"
_DEFAULT_SUPABASE_TABLE = "species"
_DEFAULT_SUPABASE_TIMEOUT_SECONDS = 8.0
_LOGGER = logging.getLogger("speciescatalog.store")


@dataclass(frozen=True, slots=True)
class SupabaseSpeciesStoreConfig:
    url: str = ""
    api_key: str = ""
    schema: str = _DEFAULT_SUPABASE_SCHEMA
    table: str = _DEFAULT_SUPABASE_TABLE
    timeout_seconds: float = _DEFAULT_SUPABASE_TIMEOUT_SECONDS

    @property
    def configured(self) -> bool:
        return bool(self.url and self.api_key)

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any] | None) -> SupabaseSpeciesStoreConfig:
        raw = value or {}
        url = str(raw.get("url", "") or "").strip().rstrip("/")
        api_key = str(raw.get("api_key", "") or "").strip()
        schema = str(raw.get("schema", "") or "").strip() or _DEFAULT_SUPABASE_SCHEMA
        table = str(raw.get("table", "") or "").strip() or _DEFAULT_SUPABASE_TABLE
        timeout_raw = raw.get("timeout_seconds", _DEFAULT_SUPABASE_TIMEOUT_SECONDS)
        try:
            timeout_seconds = float(timeout_raw)
        except (TypeError, ValueError):
            timeout_seconds = _DEFAULT_SUPABASE_TIMEOUT_SECONDS
        timeout_seconds = max(1.0, timeout_seconds)
        return cls(
            url=url,
            api_key=api_key,
            schema=schema,
            table=table,
            timeout_seconds=timeout_seconds,
        )


class SpeciesStoreReply(QObject):
    """Handle for one pending store operation.

    Exactly one of ``succeeded`` or ``failed`` is emitted, once. ``failed``
    carries the error message, which may be empty when the backend gave none.
    """

    succeeded = Signal(object)
    failed = Signal(str)

    def __init__(self, operation: str, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.operation = operation
        self._done = False
        self._result: object = None
        self._error: str | None = None

    @property
    def done(self) -> bool:
        return self._done

    @property
    def result(self) -> object:
        return self._result

    @property
    def error(self) -> str | None:
        return self._error

    def resolve(self, result: object = None) -> None:
        if self._done:
            return
        self._done = True
        self._result = result
        self.succeeded.emit(result)

    def reject(self, message: str = "") -> None:
        if self._done:
            return
        self._done = True
        self._error = str(message or "").strip()
        self.failed.emit(self._error)


class SpeciesStore(Protocol):
    def list_species(self) -> SpeciesStoreReply:
        raise NotImplementedError

    def update_species(self, species_id: int, fields: Mapping[str, Any]) -> SpeciesStoreReply:
        raise NotImplementedError

    def delete_species(self, species_id: int) -> SpeciesStoreReply:
        raise NotImplementedError


def build_species_request(
    config: SupabaseSpeciesStoreConfig,
    *,
    query: str = "",
    has_body: bool = False,
    prefer: str = "",
) -> QNetworkRequest:
    table = quote(config.table, safe="_")
    request = QNetworkRequest(QUrl(f"{config.url.rstrip('/')}/rest/v1/{table}{query}"))
    request.setRawHeader(b"apikey", config.api_key.encode("utf-8"))
    request.setRawHeader(b"Authorization", f"Bearer {config.api_key}".encode("utf-8"))
    if config.schema:
        request.setRawHeader(b"Accept-Profile", config.schema.encode("utf-8"))
        request.setRawHeader(b"Content-Profile", config.schema.encode("utf-8"))
    if has_body:
        request.setHeader(QNetworkRequest.KnownHeaders.ContentTypeHeader, "application/json")
    if prefer:
        request.setRawHeader(b"Prefer", prefer.encode("utf-8"))
    request.setTransferTimeout(int(config.timeout_seconds * 1000))
    return request


def id_filter_query(species_id: int) -> str:
    return f"?id=eq.{int(species_id)}"


def build_update_payload(fields: Mapping[str, Any]) -> dict[str, Any]:
    unknown = sorted(set(fields) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValueError(f"Fields are not editable: {', '.join(unknown)}")
    return {name: fields[name] for name in EDITABLE_FIELDS if name in fields}


def postgrest_error_message(status: int | None, reason: str, body: bytes, *, fallback: str = "") -> str:
    detail = ""
    if body:
        try:
            parsed = json.loads(body.decode("utf-8"))
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            message = str(parsed.get("message", "") or "").strip()
            extras = [
                str(parsed.get(key, "") or "").strip()
                for key in ("details", "hint")
                if str(parsed.get(key, "") or "").strip()
            ]
            if message and extras:
                detail = f"{message} ({'; '.join(extras)})"
            else:
                detail = message or "; ".join(extras)
    if detail:
        return detail
    if status:
        return f"{status} {reason}".strip()
    return str(fallback or "").strip()


def parse_species_rows(body: bytes) -> list[SpeciesRecord]:
    if not body:
        return []
    try:
        rows = json.loads(body.decode("utf-8"))
    except ValueError as exc:
        raise ValueError(f"Supabase returned non-JSON payload ({len(body)} bytes).") from exc
    if not isinstance(rows, list):
        raise ValueError("Supabase returned a payload that is not a list of rows.")
    records: list[SpeciesRecord] = []
    for row in rows:
        try:
            records.append(SpeciesRecord.from_mapping(row))
        except ValueError as exc:
            _LOGGER.warning("Skipping species row: %s", exc)
    return records


class SupabaseSpeciesStore(QObject):
    """Species table access through the Supabase PostgREST API.

    Every call returns immediately with a ``SpeciesStoreReply``; the network
    round trip is driven by the Qt event loop.
    """

    def __init__(
        self,
        config: SupabaseSpeciesStoreConfig | None = None,
        *,
        parent: QObject | None = None,
        network: QNetworkAccessManager | None = None,
    ) -> None:
        super().__init__(parent)
        self._config = config or SupabaseSpeciesStoreConfig()
        self._network = network or QNetworkAccessManager(self)

    @property
    def config(self) -> SupabaseSpeciesStoreConfig:
        return self._config

    def list_species(self) -> SpeciesStoreReply:
        return self._send(
            "GET",
            operation="list",
            query="?select=*&order=id.asc",
            parse=parse_species_rows,
        )

    def update_species(self, species_id: int, fields: Mapping[str, Any]) -> SpeciesStoreReply:
        return self._send(
            "PATCH",
            operation="update",
            query=id_filter_query(species_id),
            payload=build_update_payload(fields),
            prefer="return=minimal",
        )

    def delete_species(self, species_id: int) -> SpeciesStoreReply:
        return self._send(
            "DELETE",
            operation="delete",
            query=id_filter_query(species_id),
        )

    def _require_config(self) -> SupabaseSpeciesStoreConfig:
        if self._config.configured:
            return self._config
        raise RuntimeError(
            "Supabase URL or API key is missing. "
            "Set supabaseUrl and supabaseApiKey in the settings file."
        )

    def _send(
        self,
        method: str,
        *,
        operation: str,
        query: str,
        payload: Mapping[str, Any] | None = None,
        prefer: str = "",
        parse: Callable[[bytes], object] | None = None,
    ) -> SpeciesStoreReply:
        config = self._require_config()
        request_data: bytes | None = None
        if payload is not None:
            request_data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        request = build_species_request(
            config,
            query=query,
            has_body=request_data is not None,
            prefer=prefer,
        )
        db_debug(
            "species.request",
            method=method,
            table=config.table,
            operation=operation,
            query=query,
            payload_bytes=len(request_data) if request_data is not None else 0,
        )

        if method == "GET":
            network_reply = self._network.get(request)
        elif method == "DELETE":
            network_reply = self._network.deleteResource(request)
        else:
            network_reply = self._network.sendCustomRequest(request, method.encode("ascii"), request_data or b"")

        store_reply = SpeciesStoreReply(operation, parent=self)
        started_at = perf_counter()
        network_reply.finished.connect(
            lambda: self._handle_finished(
                network_reply,
                store_reply,
                method=method,
                started_at=started_at,
                parse=parse,
            )
        )
        return store_reply

    def _handle_finished(
        self,
        network_reply: QNetworkReply,
        store_reply: SpeciesStoreReply,
        *,
        method: str,
        started_at: float,
        parse: Callable[[bytes], object] | None,
    ) -> None:
        try:
            status_raw = network_reply.attribute(QNetworkRequest.Attribute.HttpStatusCodeAttribute)
            reason = str(network_reply.attribute(QNetworkRequest.Attribute.HttpReasonPhraseAttribute) or "")
            status = int(status_raw) if status_raw is not None else None
            body = bytes(network_reply.readAll().data())
            error = network_reply.error()
            duration_ms = round((perf_counter() - started_at) * 1000.0, 2)

            if error != QNetworkReply.NetworkError.NoError or (status is not None and status >= 400):
                if error == QNetworkReply.NetworkError.OperationCanceledError and status is None:
                    message = f"Request timed out after {self._config.timeout_seconds:g}s."
                else:
                    message = postgrest_error_message(
                        status,
                        reason,
                        body,
                        fallback=network_reply.errorString(),
                    )
                db_debug(
                    "species.request.error",
                    method=method,
                    operation=store_reply.operation,
                    status=status,
                    error=message,
                    duration_ms=duration_ms,
                )
                _LOGGER.warning("Species %s failed: %s", store_reply.operation, message)
                store_reply.reject(message)
                return

            db_debug(
                "species.response",
                method=method,
                operation=store_reply.operation,
                status=status,
                body_bytes=len(body),
                duration_ms=duration_ms,
            )
            if parse is None:
                store_reply.resolve(None)
                return
            try:
                result = parse(body)
            except ValueError as exc:
                db_debug(
                    "species.response.parse_error",
                    operation=store_reply.operation,
                    body_bytes=len(body),
                    error=str(exc),
                )
                store_reply.reject(str(exc))
                return
            store_reply.resolve(result)
        finally:
            network_reply.deleteLater()
            store_reply.deleteLater()
