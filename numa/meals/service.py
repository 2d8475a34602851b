# -*- coding: utf-8 -*-
"""Meals — photo to nutrition estimate pipeline."""

from __future__ import annotations

import asyncio
import logging
from typing import Union

import httpx
from PIL import Image

from ..config import Settings, settings
from .errors import ApiKeyMissing, NoInternetConnection
from .imaging import encode_image
from .models import MealAnalysis
from .parser import parse_analysis
from .vision import VisionClient, resolve_api_key

log = logging.getLogger(__name__)


class MealAnalysisService:
    def __init__(
        self,
        cfg: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cfg = cfg or settings
        self.client = VisionClient(self.cfg, transport=transport)

    async def analyze_meal(self, image: Union[Image.Image, bytes]) -> MealAnalysis:
        """Run one analysis: credential, connectivity, compression, request, parse.

        Every failure is raised as a MealAnalysisError; nothing is retried.
        The credential and connectivity checks run on every call.
        """
        log.info("starting meal analysis")
        api_key = resolve_api_key(self.cfg)
        if not api_key:
            raise ApiKeyMissing()

        if not await self.client.check_connectivity():
            raise NoInternetConnection()

        base64_image = await asyncio.to_thread(encode_image, image, max_bytes=self.cfg.max_image_bytes)
        content = await self.client.complete(base64_image, api_key)
        analysis = parse_analysis(content)
        log.info(
            "meal analysis completed: %d kcal, confidence %.2f",
            analysis.estimated_calories,
            analysis.confidence,
        )
        return analysis
