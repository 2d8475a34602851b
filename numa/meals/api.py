# -*- coding: utf-8 -*-
"""Meals — API endpoints."""

from __future__ import annotations

import base64
import binascii

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from ..profile.remote import DocumentStoreError
from ..profile.store import ProfileNotInitialized, ProfileStore
from .errors import MealAnalysisError
from .insights import nutrition_score, personalized_tip, summarize_history
from .models import (
    AnalyzeMealRequest,
    AnalyzeMealResponse,
    MealAnalysis,
    MealHistorySummary,
    MealListResponse,
    SaveMealResponse,
)
from .service import MealAnalysisService

router = APIRouter(prefix="/api/meals", tags=["Meals"])


def get_analyzer(request: Request) -> MealAnalysisService:
    return request.app.state.analyzer


def get_profiles(request: Request) -> ProfileStore:
    return request.app.state.profiles


def _decode_image_or_400(image_base64: str) -> bytes:
    try:
        return base64.b64decode(image_base64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(status_code=400, detail=f"Invalid base64 image: {exc}") from exc


async def _load_meals_or_502(profiles: ProfileStore) -> list[MealAnalysis]:
    try:
        return await profiles.get_user_meals()
    except ProfileNotInitialized as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except DocumentStoreError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to load meals: {exc}") from exc


@router.post("/analyze", response_model=AnalyzeMealResponse, summary="Analyze a meal photo (no storage)")
async def analyze(
    request: AnalyzeMealRequest,
    analyzer: MealAnalysisService = Depends(get_analyzer),
    profiles: ProfileStore = Depends(get_profiles),
):
    image_bytes = _decode_image_or_400(request.image_base64)
    try:
        analysis = await analyzer.analyze_meal(image_bytes)
    except MealAnalysisError as exc:
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict(request.locale))

    goal = profiles.profile.goal if profiles.profile else None
    return AnalyzeMealResponse(
        analysis=analysis,
        nutrition_score=nutrition_score(analysis, goal),
        tip=personalized_tip(analysis, goal),
    )


@router.post("", response_model=SaveMealResponse, summary="Store a meal analysis")
async def save_meal(analysis: MealAnalysis, profiles: ProfileStore = Depends(get_profiles)):
    return SaveMealResponse(saved=await profiles.save_meal_analysis(analysis))


@router.get("", response_model=MealListResponse, summary="Meal history, newest first")
async def list_meals(profiles: ProfileStore = Depends(get_profiles)):
    meals = await _load_meals_or_502(profiles)
    return MealListResponse(count=len(meals), meals=meals)


@router.get("/summary", response_model=MealHistorySummary, summary="Meal history totals")
async def summary(profiles: ProfileStore = Depends(get_profiles)):
    return summarize_history(await _load_meals_or_502(profiles))
