# -*- coding: utf-8 -*-
"""Profile — onboarding endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from .models import OnboardingSaveResponse, OnboardingUpdate, OnboardingVerification, Profile
from .store import NOT_INITIALIZED, ProfileStore

router = APIRouter(prefix="/api/profile", tags=["Profile"])


def get_profiles(request: Request) -> ProfileStore:
    return request.app.state.profiles


def _profile_or_409(profiles: ProfileStore) -> Profile:
    if profiles.profile is None:
        raise HTTPException(status_code=409, detail=NOT_INITIALIZED)
    return profiles.profile


@router.get("", response_model=Profile, summary="Current profile")
def get_profile(profiles: ProfileStore = Depends(get_profiles)):
    return _profile_or_409(profiles)


@router.post("/onboarding", response_model=OnboardingSaveResponse, summary="Save onboarding answers")
async def save_onboarding(update: OnboardingUpdate, profiles: ProfileStore = Depends(get_profiles)):
    synced = await profiles.save_onboarding_data(update)
    return OnboardingSaveResponse(synced=synced, profile=_profile_or_409(profiles))


@router.post("/onboarding/complete", response_model=OnboardingSaveResponse, summary="Mark onboarding complete")
async def complete_onboarding(profiles: ProfileStore = Depends(get_profiles)):
    synced = await profiles.complete_onboarding()
    return OnboardingSaveResponse(synced=synced, profile=_profile_or_409(profiles))


@router.get("/onboarding/verify", response_model=OnboardingVerification, summary="Check required answers")
def verify_onboarding(profiles: ProfileStore = Depends(get_profiles)):
    return profiles.verify_onboarding_data()


@router.post("/onboarding/reset", summary="Forget local onboarding data (development)")
def reset_onboarding(profiles: ProfileStore = Depends(get_profiles)) -> dict:
    profiles.reset_onboarding()
    return {"ok": True}
