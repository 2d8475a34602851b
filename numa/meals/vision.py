# -*- coding: utf-8 -*-
"""Meals — vision model call via the OpenAI chat completions API."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from ..config import Settings, settings
from .errors import (
    ApiKeyMissing,
    ApiRequestFailed,
    InvalidResponse,
    RateLimitExceeded,
    RequestTimeout,
    UnknownAnalysisError,
)
from .models import VisionResponse

log = logging.getLogger(__name__)

API_KEY_NAME = "OPENAI_API_KEY"
CONNECTIVITY_TIMEOUT = 10.0

ANALYSIS_PROMPT = (
    "Analyze this meal image and provide a detailed nutritional breakdown. "
    "Please respond in the following JSON format only:\n"
    "\n"
    "{\n"
    '    "ingredients": ["ingredient1", "ingredient2", "ingredient3"],\n'
    '    "estimated_calories": 450,\n'
    '    "macros": {\n'
    '        "protein": 25.5,\n'
    '        "carbs": 35.2,\n'
    '        "fat": 18.7\n'
    "    },\n"
    '    "confidence": 0.85,\n'
    '    "analysis_text": "Brief description of the meal"\n'
    "}\n"
    "\n"
    "Be as accurate as possible. If you cannot identify food clearly, set confidence to 0.3 or lower. "
    "Include all visible ingredients."
)


def _read_key_from_json(path: Path) -> Optional[str]:
    if not path or not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        log.warning("could not read %s: %s", path, exc)
        return None
    if not isinstance(data, dict):
        return None
    value = data.get(API_KEY_NAME)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def resolve_api_key(cfg: Settings | None = None) -> Optional[str]:
    """Look up the vision API key: environment, then config file, then build metadata."""
    cfg = cfg or settings
    env_key = (os.environ.get(API_KEY_NAME) or "").strip()
    if env_key:
        log.debug("vision API key found in environment")
        return env_key

    for source in (cfg.config_file, cfg.build_info_file):
        key = _read_key_from_json(source)
        if key:
            log.debug("vision API key found in %s", source)
            return key

    log.error("no vision API key: set %s or add it to %s", API_KEY_NAME, cfg.config_file)
    return None


class VisionClient:
    """Thin async client for the vision model endpoint.

    ``transport`` lets tests swap in an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        cfg: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cfg = cfg or settings
        self._transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, follow_redirects=True, transport=self._transport)

    async def check_connectivity(self) -> bool:
        try:
            async with self._client(CONNECTIVITY_TIMEOUT) as client:
                resp = await client.get(self.cfg.connectivity_url)
        except httpx.HTTPError as exc:
            log.info("connectivity probe failed: %s", exc)
            return False
        return resp.status_code == 200

    def build_payload(self, base64_image: str) -> Dict[str, Any]:
        return {
            "model": self.cfg.vision_model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": ANALYSIS_PROMPT},
                        {
                            "type": "image_url",
                            "image_url": {
                                "url": f"data:image/jpeg;base64,{base64_image}",
                                "detail": "high",
                            },
                        },
                    ],
                }
            ],
            "max_tokens": self.cfg.vision_max_tokens,
            "temperature": self.cfg.vision_temperature,
        }

    async def complete(self, base64_image: str, api_key: str) -> str:
        """POST the photo and return the model's reply text."""
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        payload = self.build_payload(base64_image)
        try:
            async with self._client(self.cfg.vision_timeout) as client:
                resp = await client.post(self.cfg.vision_url, headers=headers, json=payload)
        except httpx.TimeoutException as exc:
            raise RequestTimeout() from exc
        except httpx.HTTPError as exc:
            message = str(exc) or exc.__class__.__name__
            if "timeout" in message.lower():
                raise RequestTimeout() from exc
            raise UnknownAnalysisError(message) from exc

        status = resp.status_code
        if status == 401:
            raise ApiKeyMissing()
        if status == 429:
            raise RateLimitExceeded()
        if status == 408:
            raise RequestTimeout()
        if status != 200:
            raise ApiRequestFailed(resp.text or f"HTTP {status}")

        try:
            data = VisionResponse.model_validate_json(resp.content)
        except ValidationError as exc:
            log.warning("vision response decode failed: %s; body=%r", exc, resp.text[:800])
            raise InvalidResponse() from exc
        if not data.choices:
            raise InvalidResponse()
        return data.choices[0].message.content
