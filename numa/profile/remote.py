# -*- coding: utf-8 -*-
"""Profile — hosted document store (Cloud Firestore REST API)."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from ..config import Settings, settings

log = logging.getLogger(__name__)

USERS_COLLECTION = "users"
MEALS_COLLECTION = "meals"
PAGE_SIZE = 300


class DocumentStoreError(Exception):
    """Raised when the remote document store cannot complete a call."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


def user_path(user_id: str) -> str:
    return f"{USERS_COLLECTION}/{user_id}"


def meals_path(user_id: str) -> str:
    return f"{USERS_COLLECTION}/{user_id}/{MEALS_COLLECTION}"


# ---- Firestore typed values ----


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


_FRACTION_RE = re.compile(r"\.(\d+)")


def _parse_timestamp(raw: str) -> datetime:
    # Firestore returns up to nanosecond precision; datetime holds microseconds.
    text = raw.strip().replace("Z", "+00:00")
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return datetime.fromisoformat(text)


def encode_value(value: Any) -> Dict[str, Any]:
    if value is None:
        return {"nullValue": None}
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        return {"timestampValue": _format_timestamp(value)}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    raise TypeError(f"cannot store {type(value).__name__} in a document")


def encode_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    return {str(k): encode_value(v) for k, v in data.items()}


def decode_value(value: Dict[str, Any]) -> Any:
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return value["stringValue"]
    if "timestampValue" in value:
        return _parse_timestamp(value["timestampValue"])
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    # bytes / reference / geo point values are passed through untouched.
    return next(iter(value.values()), None)


def decode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: decode_value(v) for k, v in fields.items()}


class FirestoreDocumentStore:
    """Async document store over the Firestore REST endpoints.

    Paths are relative to the database's ``documents`` root, e.g.
    ``users/<id>`` or ``users/<id>/meals``.
    """

    def __init__(
        self,
        cfg: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cfg = cfg or settings
        headers = {"Content-Type": "application/json"}
        if self.cfg.firestore_token:
            headers["Authorization"] = f"Bearer {self.cfg.firestore_token}"
        params = {"key": self.cfg.firestore_api_key} if self.cfg.firestore_api_key else None
        self._client = httpx.AsyncClient(
            base_url=self.cfg.firestore_documents_url.rstrip("/") + "/",
            headers=headers,
            params=params,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise DocumentStoreError(f"{method} {path} failed: {exc}") from exc

    @staticmethod
    def _raise_for_status(resp: httpx.Response, what: str) -> None:
        if resp.status_code >= 400:
            snippet = (resp.text or "").replace("\n", " ").strip()[:200]
            raise DocumentStoreError(f"{what}: {snippet}", status_code=resp.status_code)

    @staticmethod
    def _json(resp: httpx.Response) -> Dict[str, Any]:
        try:
            body = resp.json()
        except ValueError as exc:
            raise DocumentStoreError("document store returned non-JSON body", status_code=resp.status_code) from exc
        return body if isinstance(body, dict) else {}

    async def get_document(self, path: str) -> Optional[Dict[str, Any]]:
        resp = await self._request("GET", path)
        if resp.status_code == 404:
            return None
        self._raise_for_status(resp, f"get {path}")
        return decode_fields(self._json(resp).get("fields", {}))

    async def set_document(self, path: str, data: Dict[str, Any]) -> None:
        # PATCH without an update mask replaces the whole document (last write wins).
        resp = await self._request("PATCH", path, json={"fields": encode_fields(data)})
        self._raise_for_status(resp, f"set {path}")

    async def list_documents(self, collection_path: str) -> List[Dict[str, Any]]:
        docs: List[Dict[str, Any]] = []
        page_token: Optional[str] = None
        while True:
            params: Dict[str, Any] = {"pageSize": PAGE_SIZE}
            if page_token:
                params["pageToken"] = page_token
            resp = await self._request("GET", collection_path, params=params)
            self._raise_for_status(resp, f"list {collection_path}")
            body = self._json(resp)
            for doc in body.get("documents", []):
                docs.append(decode_fields(doc.get("fields", {})))
            page_token = body.get("nextPageToken")
            if not page_token:
                return docs

    async def close(self) -> None:
        await self._client.aclose()
