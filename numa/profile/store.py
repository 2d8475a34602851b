# -*- coding: utf-8 -*-
"""Profile — the user's onboarding answers and meal history.

The store keeps one in-memory Profile, mirrors it to the on-device key/value
file on every mutation and then pushes it to the document store. Remote
failures are logged and reported as ``False``; the local write is kept, so a
profile may live locally only until the next successful sync overwrites the
remote copy. Local write failures are logged and never block onboarding.

All methods are coroutines on a single event loop; the profile is never
touched from another thread.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..meals.models import MealAnalysis
from . import local_store as keys
from .local_store import LocalStore
from .models import ActivityLevel, Gender, Goal, OnboardingUpdate, OnboardingVerification, Profile, utc_now
from .remote import DocumentStoreError, FirestoreDocumentStore, meals_path, user_path

log = logging.getLogger(__name__)

NOT_INITIALIZED = "User not initialized"

REQUIRED_FIELDS = (
    ("goal", "Goal"),
    ("current_weight", "Current Weight"),
    ("target_weight", "Target Weight"),
    ("height", "Height"),
    ("age", "Age"),
    ("gender", "Gender"),
    ("activity_level", "Activity Level"),
)


class ProfileNotInitialized(Exception):
    """Raised when an operation needs a profile before initialize() has run."""


def _enum_or_none(enum_cls, raw: Optional[str]):
    if raw is None:
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        log.warning("ignoring unknown %s value in local store: %r", enum_cls.__name__, raw)
        return None


class ProfileStore:
    def __init__(self, local: LocalStore, remote: FirestoreDocumentStore) -> None:
        self.local = local
        self.remote = remote
        self.profile: Optional[Profile] = None

    # ---- lifecycle ----

    async def initialize(self) -> Profile:
        user_id = self.local.get_str(keys.KEY_USER_ID)
        if not user_id:
            return await self._create_profile()

        try:
            self.profile = await self._load_remote(user_id)
            log.info("profile loaded from document store: %s", user_id)
        except (DocumentStoreError, ValidationError) as exc:
            log.warning("remote profile load failed for %s, using local data: %s", user_id, exc)
            self.profile = self._load_local(user_id)
        return self.profile

    async def close(self) -> None:
        await self.remote.close()

    async def _create_profile(self) -> Profile:
        profile = Profile()
        self.profile = profile
        self._write_local({keys.KEY_USER_ID: profile.id})
        if await self._push(profile):
            log.info("new profile created remotely: %s", profile.id)
        return profile

    async def _load_remote(self, user_id: str) -> Profile:
        doc = await self.remote.get_document(user_path(user_id))
        if doc is None:
            raise DocumentStoreError(f"user {user_id} not found", status_code=404)
        doc.setdefault("id", user_id)
        return Profile.model_validate(doc)

    def _load_local(self, user_id: str) -> Profile:
        return Profile(
            id=user_id,
            goal=_enum_or_none(Goal, self.local.get_str(keys.KEY_GOAL)),
            current_weight=self.local.get_float(keys.KEY_WEIGHT_CURRENT),
            target_weight=self.local.get_float(keys.KEY_WEIGHT_TARGET),
            height=self.local.get_int(keys.KEY_HEIGHT),
            age=self.local.get_int(keys.KEY_AGE),
            gender=_enum_or_none(Gender, self.local.get_str(keys.KEY_GENDER)),
            activity_level=_enum_or_none(ActivityLevel, self.local.get_str(keys.KEY_ACTIVITY_LEVEL)),
            onboarding_complete=self.local.get_bool(keys.KEY_ONBOARDING_COMPLETE),
        )

    # ---- persistence ----

    def _save_local(self, profile: Profile) -> None:
        values: Dict[str, Any] = {
            keys.KEY_USER_ID: profile.id,
            keys.KEY_ONBOARDING_COMPLETE: profile.onboarding_complete,
        }
        optional = {
            keys.KEY_GOAL: profile.goal.value if profile.goal else None,
            keys.KEY_WEIGHT_CURRENT: profile.current_weight,
            keys.KEY_WEIGHT_TARGET: profile.target_weight,
            keys.KEY_HEIGHT: profile.height,
            keys.KEY_AGE: profile.age,
            keys.KEY_GENDER: profile.gender.value if profile.gender else None,
            keys.KEY_ACTIVITY_LEVEL: profile.activity_level.value if profile.activity_level else None,
        }
        values.update({k: v for k, v in optional.items() if v is not None})
        self._write_local(values)

    def _write_local(self, values: Dict[str, Any]) -> None:
        # The in-memory copy is updated even when the file cannot be written.
        try:
            self.local.update(values)
        except OSError as exc:
            log.warning("failed to write local store %s: %s", self.local.path, exc, exc_info=True)

    async def _push(self, profile: Profile) -> bool:
        try:
            await self.remote.set_document(user_path(profile.id), profile.model_dump())
        except DocumentStoreError as exc:
            log.warning("failed to save profile %s remotely: %s", profile.id, exc, exc_info=True)
            return False
        return True

    # ---- onboarding ----

    async def save_onboarding_data(self, update: OnboardingUpdate) -> bool:
        """Merge the given answers, persist locally, then sync remotely.

        Returns whether the remote sync succeeded.
        """
        if self.profile is None:
            await self.initialize()
            return False

        changes = update.model_dump(exclude_none=True)
        self.profile = self.profile.model_copy(update={**changes, "updated_at": utc_now()})
        self._save_local(self.profile)
        ok = await self._push(self.profile)
        if ok:
            log.info("onboarding data saved: %s", ", ".join(sorted(changes)) or "(no fields)")
        return ok

    async def complete_onboarding(self) -> bool:
        if self.profile is None:
            return False

        self.profile = self.profile.model_copy(update={"onboarding_complete": True, "updated_at": utc_now()})
        self._save_local(self.profile)
        ok = await self._push(self.profile)
        if ok:
            log.info("onboarding marked as complete for %s", self.profile.id)
        return ok

    def verify_onboarding_data(self) -> OnboardingVerification:
        if self.profile is None:
            return OnboardingVerification(is_complete=False, missing_fields=[NOT_INITIALIZED])

        missing = [label for attr, label in REQUIRED_FIELDS if getattr(self.profile, attr) is None]
        return OnboardingVerification(
            is_complete=not missing and self.profile.onboarding_complete,
            missing_fields=missing,
        )

    def reset_onboarding(self) -> None:
        """Forget every locally stored answer and the user id.

        The in-memory profile and the remote document are left as they are;
        the next initialize() creates a fresh profile.
        """
        try:
            self.local.remove(*keys.ONBOARDING_KEYS)
        except OSError as exc:
            log.warning("failed to reset local store %s: %s", self.local.path, exc, exc_info=True)
            return
        log.info("local onboarding data reset")

    def describe(self) -> Dict[str, str]:
        if self.profile is None:
            return {}
        p = self.profile

        def show(value: Any) -> str:
            if value is None:
                return "Not set"
            return value.value if hasattr(value, "value") else str(value)

        return {
            "ID": p.id,
            "Goal": show(p.goal),
            "Current Weight": show(p.current_weight),
            "Target Weight": show(p.target_weight),
            "Height": show(p.height),
            "Age": show(p.age),
            "Gender": show(p.gender),
            "Activity Level": show(p.activity_level),
            "Onboarding Complete": str(p.onboarding_complete),
            "Created": p.created_at.isoformat(),
            "Updated": p.updated_at.isoformat(),
        }

    # ---- meals ----

    async def save_meal_analysis(self, analysis: MealAnalysis) -> bool:
        if self.profile is None:
            log.warning("cannot save meal %s: %s", analysis.id, NOT_INITIALIZED)
            return False

        path = f"{meals_path(self.profile.id)}/{analysis.id}"
        try:
            await self.remote.set_document(path, analysis.model_dump())
        except DocumentStoreError as exc:
            log.warning("failed to save meal %s: %s", analysis.id, exc, exc_info=True)
            return False
        log.info("meal %s saved for %s", analysis.id, self.profile.id)
        return True

    async def get_user_meals(self) -> List[MealAnalysis]:
        """All stored meals of the current profile, newest first.

        Raises DocumentStoreError when the remote store cannot be read.
        """
        if self.profile is None:
            raise ProfileNotInitialized(NOT_INITIALIZED)

        docs = await self.remote.list_documents(meals_path(self.profile.id))
        meals: List[MealAnalysis] = []
        for doc in docs:
            try:
                meals.append(MealAnalysis.model_validate(doc))
            except ValidationError as exc:
                log.warning("skipping malformed meal record: %s", exc)
        meals.sort(key=lambda m: m.timestamp, reverse=True)
        return meals
