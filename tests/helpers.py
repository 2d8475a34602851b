# -*- coding: utf-8 -*-
"""Shared fakes for the test modules."""

from __future__ import annotations

import copy
import io
import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx
from PIL import Image

from numa.config import Settings
from numa.profile.remote import DocumentStoreError

VISION_URL = "https://vision.test/v1/chat/completions"
PROBE_URL = "https://probe.test/"


def make_settings(tmp: Path) -> Settings:
    cfg = Settings()
    cfg.data_root = tmp / "data"
    cfg.config_file = tmp / "config.json"
    cfg.build_info_file = tmp / "build_info.json"
    cfg.vision_url = VISION_URL
    cfg.connectivity_url = PROBE_URL
    cfg.firestore_base_url = "https://firestore.test/v1"
    cfg.firestore_project = "numa-test"
    cfg.firestore_token = None
    cfg.firestore_api_key = None
    return cfg


def make_image(size: int = 64, mode: str = "RGB") -> Image.Image:
    return Image.new(mode, (size, size), (200, 120, 40, 255)[: len(mode)])


def image_bytes(fmt: str = "PNG") -> bytes:
    buf = io.BytesIO()
    make_image().save(buf, format=fmt)
    return buf.getvalue()


def model_reply(content: str) -> Dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def meal_json(confidence: float = 0.85, **overrides: Any) -> str:
    body: Dict[str, Any] = {
        "ingredients": ["rice", "chicken"],
        "estimated_calories": 520,
        "macros": {"protein": 32.0, "carbs": 55.5, "fat": 14.2},
        "confidence": confidence,
        "analysis_text": "Chicken with rice",
    }
    body.update(overrides)
    return json.dumps(body)


def vision_transport(
    *,
    probe_status: int = 200,
    status: int = 200,
    body: Any = None,
    calls: Optional[List[httpx.Request]] = None,
) -> httpx.MockTransport:
    """Mock transport answering the connectivity probe (GET) and the vision call (POST)."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if request.method == "GET":
            return httpx.Response(probe_status, text="ok")
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body or "")

    return httpx.MockTransport(handler)


def raising_transport(exc_factory: Callable[[httpx.Request], Exception]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200)
        raise exc_factory(request)

    return httpx.MockTransport(handler)


class FakeDocumentStore:
    """In-memory stand-in for FirestoreDocumentStore."""

    def __init__(self) -> None:
        self.docs: Dict[str, Dict[str, Any]] = {}
        self.fail = False
        self.closed = False
        self.writes: List[str] = []

    def _check(self) -> None:
        if self.fail:
            raise DocumentStoreError("document store unavailable", status_code=503)

    async def get_document(self, path: str) -> Optional[Dict[str, Any]]:
        self._check()
        doc = self.docs.get(path)
        return copy.deepcopy(doc) if doc is not None else None

    async def set_document(self, path: str, data: Dict[str, Any]) -> None:
        self._check()
        self.writes.append(path)
        self.docs[path] = copy.deepcopy(data)

    async def list_documents(self, collection_path: str) -> List[Dict[str, Any]]:
        self._check()
        prefix = collection_path.rstrip("/") + "/"
        return [
            copy.deepcopy(doc)
            for path, doc in self.docs.items()
            if path.startswith(prefix) and "/" not in path[len(prefix):]
        ]

    async def close(self) -> None:
        self.closed = True
