# -*- coding: utf-8 -*-
"""Meals — turn the model's free-text reply into a MealAnalysis."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from .errors import InvalidResponse, NoFoodDetected
from .models import MealAnalysis, MealAnalysisPayload

log = logging.getLogger(__name__)

NO_FOOD_CONFIDENCE_THRESHOLD = 0.3


def extract_json(content: str) -> str:
    """Return the text between the first '{' and the last '}' (inclusive).

    Models often wrap the object in prose or code fences; everything outside
    the outermost braces is dropped. Without braces the stripped text is
    returned unchanged and decoding will fail downstream.
    """
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end == -1 or end < start:
        return content.strip()
    return content[start : end + 1]


def parse_analysis(content: str, *, threshold: float = NO_FOOD_CONFIDENCE_THRESHOLD) -> MealAnalysis:
    raw = extract_json(content or "")
    try:
        payload = MealAnalysisPayload.model_validate_json(raw)
    except ValidationError as exc:
        log.warning("meal analysis JSON decode failed: %s; content=%r", exc, raw[:800])
        raise InvalidResponse() from exc

    if payload.confidence < threshold:
        raise NoFoodDetected()
    confidence = _normalize_confidence(payload.confidence)

    return MealAnalysis(
        ingredients=payload.ingredients,
        estimated_calories=payload.estimated_calories,
        macros=payload.macros,
        confidence=confidence,
        analysis_text=payload.analysis_text,
    )


def _normalize_confidence(value: float) -> float:
    # Stored as a 0..1 fraction; some replies use a percentage.
    if value > 1:
        value = value / 100.0
    return min(1.0, value)
