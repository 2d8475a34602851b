# -*- coding: utf-8 -*-
"""Meals — Pydantic models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Macros(BaseModel):
    model_config = ConfigDict(frozen=True)

    protein: float = Field(..., description="grams")
    carbs: float = Field(..., description="grams")
    fat: float = Field(..., description="grams")


class MealAnalysis(BaseModel):
    """One nutrition estimate produced by a successful vision round trip."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=_utc_now)
    ingredients: List[str] = Field(default_factory=list)
    estimated_calories: int
    macros: Macros
    confidence: float = Field(0.8, ge=0, le=1)
    analysis_text: Optional[str] = None


class MealAnalysisPayload(BaseModel):
    """The JSON object the model is asked to embed in its reply."""

    ingredients: List[str]
    estimated_calories: int
    macros: Macros
    confidence: float
    analysis_text: Optional[str] = None


class VisionMessage(BaseModel):
    content: str


class VisionChoice(BaseModel):
    message: VisionMessage


class VisionResponse(BaseModel):
    choices: List[VisionChoice]


class MealHistorySummary(BaseModel):
    total_meals: int = 0
    total_calories: int = 0
    average_calories: int = 0


# ---- HTTP request/response bodies ----


class AnalyzeMealRequest(BaseModel):
    image_base64: str = Field(..., min_length=16, description="Raw base64 without data-url prefix")
    locale: Optional[str] = Field(None, description="e.g. en")


class AnalyzeMealResponse(BaseModel):
    analysis: MealAnalysis
    nutrition_score: int
    tip: str


class SaveMealResponse(BaseModel):
    saved: bool


class MealListResponse(BaseModel):
    count: int
    meals: List[MealAnalysis]
