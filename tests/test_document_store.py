# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import shutil
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

import httpx

from numa.profile.models import Goal
from numa.profile.remote import (
    DocumentStoreError,
    FirestoreDocumentStore,
    decode_fields,
    encode_fields,
)
from tests.helpers import make_settings


class TestFirestoreValues(unittest.TestCase):
    def test_profile_like_document(self) -> None:
        created = datetime(2025, 7, 21, 9, 30, tzinfo=timezone.utc)
        fields = encode_fields(
            {
                "id": "u1",
                "goal": Goal.lose_weight,
                "height": 180,
                "current_weight": 82.5,
                "onboarding_complete": False,
                "gender": None,
                "created_at": created,
                "macros": {"protein": 10.0},
                "ingredients": ["egg", "toast"],
            }
        )
        self.assertEqual(fields["goal"], {"stringValue": "lose_weight"})
        self.assertEqual(fields["height"], {"integerValue": "180"})
        self.assertEqual(fields["onboarding_complete"], {"booleanValue": False})
        self.assertEqual(fields["gender"], {"nullValue": None})
        self.assertEqual(fields["created_at"], {"timestampValue": "2025-07-21T09:30:00Z"})
        self.assertEqual(fields["macros"], {"mapValue": {"fields": {"protein": {"doubleValue": 10.0}}}})

        decoded = decode_fields(fields)
        self.assertEqual(decoded["height"], 180)
        self.assertEqual(decoded["created_at"], created)
        self.assertEqual(decoded["ingredients"], ["egg", "toast"])

    def test_nanosecond_timestamps(self) -> None:
        decoded = decode_fields({"t": {"timestampValue": "2025-07-21T09:30:00.123456789Z"}})
        self.assertEqual(decoded["t"], datetime(2025, 7, 21, 9, 30, 0, 123456, tzinfo=timezone.utc))


class TestFirestoreDocumentStore(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="numa-test-"))
        self.cfg = make_settings(self._tmp)
        self.requests: list[httpx.Request] = []

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)

    def _store(self, handler) -> FirestoreDocumentStore:
        def recording(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        return FirestoreDocumentStore(self.cfg, transport=httpx.MockTransport(recording))

    async def test_get_missing_document_is_none(self) -> None:
        store = self._store(lambda req: httpx.Response(404, json={"error": {"code": 404}}))
        self.assertIsNone(await store.get_document("users/nobody"))
        url = self.requests[0].url
        self.assertEqual(url.host, "firestore.test")
        self.assertTrue(url.path.startswith("/v1/projects/numa-test/databases/"))
        self.assertTrue(url.path.endswith("/documents/users/nobody"))
        await store.close()

    async def test_set_document_patches_typed_fields(self) -> None:
        self.cfg.firestore_token = "tok"
        self.cfg.firestore_api_key = "web-key"
        store = self._store(lambda req: httpx.Response(200, json={}))
        await store.set_document("users/u1", {"age": 30, "goal": "gain_weight"})

        req = self.requests[0]
        self.assertEqual(req.method, "PATCH")
        self.assertEqual(req.headers["authorization"], "Bearer tok")
        self.assertEqual(req.url.params["key"], "web-key")
        self.assertEqual(
            json.loads(req.content),
            {"fields": {"age": {"integerValue": "30"}, "goal": {"stringValue": "gain_weight"}}},
        )
        await store.close()

    async def test_list_follows_page_tokens(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("pageToken") == "p2":
                return httpx.Response(200, json={"documents": [{"fields": {"n": {"integerValue": "2"}}}]})
            return httpx.Response(
                200,
                json={"documents": [{"fields": {"n": {"integerValue": "1"}}}], "nextPageToken": "p2"},
            )

        store = self._store(handler)
        docs = await store.list_documents("users/u1/meals")
        self.assertEqual(docs, [{"n": 1}, {"n": 2}])
        self.assertEqual(len(self.requests), 2)
        await store.close()

    async def test_empty_collection(self) -> None:
        store = self._store(lambda req: httpx.Response(200, json={}))
        self.assertEqual(await store.list_documents("users/u1/meals"), [])
        await store.close()

    async def test_server_error_raises(self) -> None:
        store = self._store(lambda req: httpx.Response(500, text="internal"))
        with self.assertRaises(DocumentStoreError) as ctx:
            await store.get_document("users/u1")
        self.assertEqual(ctx.exception.status_code, 500)
        await store.close()

    async def test_transport_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("offline", request=request)

        store = self._store(handler)
        with self.assertRaises(DocumentStoreError):
            await store.set_document("users/u1", {"age": 1})
        await store.close()


if __name__ == "__main__":
    unittest.main()
