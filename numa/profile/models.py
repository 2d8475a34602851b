# -*- coding: utf-8 -*-
"""Profile — Pydantic models."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Goal(str, Enum):
    lose_weight = "lose_weight"
    gain_weight = "gain_weight"
    maintain_weight = "maintain_weight"


class Gender(str, Enum):
    male = "male"
    female = "female"


class ActivityLevel(str, Enum):
    sedentary = "sedentary"
    light = "light"
    moderate = "moderate"
    active = "active"
    very_active = "very_active"


class Profile(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    goal: Optional[Goal] = None
    current_weight: Optional[float] = Field(None, ge=0)
    target_weight: Optional[float] = Field(None, ge=0)
    height: Optional[int] = Field(None, ge=0, description="cm")
    age: Optional[int] = Field(None, ge=0)
    gender: Optional[Gender] = None
    activity_level: Optional[ActivityLevel] = None
    onboarding_complete: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class OnboardingUpdate(BaseModel):
    """A partial set of onboarding answers; unset fields leave the profile untouched."""

    goal: Optional[Goal] = None
    current_weight: Optional[float] = Field(None, ge=0)
    target_weight: Optional[float] = Field(None, ge=0)
    height: Optional[int] = Field(None, ge=0)
    age: Optional[int] = Field(None, ge=0)
    gender: Optional[Gender] = None
    activity_level: Optional[ActivityLevel] = None


class OnboardingVerification(BaseModel):
    is_complete: bool
    missing_fields: List[str] = []


class OnboardingSaveResponse(BaseModel):
    synced: bool
    profile: Profile
