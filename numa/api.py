# -*- coding: utf-8 -*-
"""
Numa meal analysis API

Photo-based meal analysis plus onboarding profile sync for the mobile app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, settings
from .meals.api import router as meals_router
from .meals.service import MealAnalysisService
from .profile.api import router as profile_router
from .profile.local_store import LocalStore
from .profile.remote import FirestoreDocumentStore
from .profile.store import ProfileStore


def build_services(cfg: Settings) -> tuple[ProfileStore, MealAnalysisService]:
    profiles = ProfileStore(LocalStore(cfg.local_store_path), FirestoreDocumentStore(cfg))
    return profiles, MealAnalysisService(cfg)


def create_app(cfg: Settings | None = None, *, services=None) -> FastAPI:
    """Build the application.

    ``services`` is a ``(ProfileStore, MealAnalysisService)`` pair; when
    omitted both are constructed from ``cfg`` at startup.
    """
    cfg = cfg or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        profiles, analyzer = services or build_services(cfg)
        try:
            await profiles.initialize()
            app.state.profiles = profiles
            app.state.analyzer = analyzer
            yield
        finally:
            await profiles.close()

    app = FastAPI(
        title="Numa",
        description="Meal photo analysis and onboarding profile sync",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meals_router)
    app.include_router(profile_router)

    @app.get("/api/health")
    def health() -> dict:
        return {"ok": True}

    return app


app = create_app()
