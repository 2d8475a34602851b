# -*- coding: utf-8 -*-
"""Meals — analysis error kinds with localized messages."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class MealErrorKind(str, Enum):
    no_internet_connection = "no_internet_connection"
    api_key_missing = "api_key_missing"
    image_processing_failed = "image_processing_failed"
    image_too_large = "image_too_large"
    api_request_failed = "api_request_failed"
    request_timeout = "request_timeout"
    rate_limit_exceeded = "rate_limit_exceeded"
    invalid_response = "invalid_response"
    no_food_detected = "no_food_detected"
    unknown = "unknown"


DEFAULT_LOCALE = "en"

MESSAGES: Dict[str, Dict[MealErrorKind, str]] = {
    "en": {
        MealErrorKind.no_internet_connection: "No internet connection. Please check your network and try again.",
        MealErrorKind.api_key_missing: "The analysis service is not configured. Please contact support.",
        MealErrorKind.image_processing_failed: "We couldn't process this photo. Please try another one.",
        MealErrorKind.image_too_large: "This photo is too large to analyze.",
        MealErrorKind.api_request_failed: "The analysis request failed",
        MealErrorKind.request_timeout: "The analysis took too long. Please try again.",
        MealErrorKind.rate_limit_exceeded: "Too many requests. Please wait a moment and try again.",
        MealErrorKind.invalid_response: "We couldn't understand the analysis result. Please try again.",
        MealErrorKind.no_food_detected: "No food was detected in this photo. Try a clearer shot of your meal.",
        MealErrorKind.unknown: "Something went wrong",
    },
    "es": {
        MealErrorKind.no_internet_connection: "Sin conexión a internet. Revisa tu red e inténtalo de nuevo.",
        MealErrorKind.api_key_missing: "El servicio de análisis no está configurado. Contacta con soporte.",
        MealErrorKind.image_processing_failed: "No pudimos procesar esta foto. Prueba con otra.",
        MealErrorKind.image_too_large: "Esta foto es demasiado grande para analizarla.",
        MealErrorKind.api_request_failed: "La solicitud de análisis falló",
        MealErrorKind.request_timeout: "El análisis tardó demasiado. Inténtalo de nuevo.",
        MealErrorKind.rate_limit_exceeded: "Demasiadas solicitudes. Espera un momento e inténtalo de nuevo.",
        MealErrorKind.invalid_response: "No pudimos interpretar el resultado del análisis. Inténtalo de nuevo.",
        MealErrorKind.no_food_detected: "No se detectó comida en esta foto. Prueba con una toma más clara.",
        MealErrorKind.unknown: "Algo salió mal",
    },
}


def _catalog(locale: Optional[str]) -> Dict[MealErrorKind, str]:
    if locale:
        if locale in MESSAGES:
            return MESSAGES[locale]
        lang = locale.replace("_", "-").split("-", 1)[0].lower()
        if lang in MESSAGES:
            return MESSAGES[lang]
    return MESSAGES[DEFAULT_LOCALE]


class MealAnalysisError(Exception):
    """Base class of every failure surfaced by the analysis pipeline."""

    kind: MealErrorKind = MealErrorKind.unknown
    http_status: int = 500

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail
        super().__init__(self.message())

    def message(self, locale: Optional[str] = None) -> str:
        text = _catalog(locale).get(self.kind) or MESSAGES[DEFAULT_LOCALE][self.kind]
        if self.detail:
            return f"{text}: {self.detail}"
        return text

    def to_dict(self, locale: Optional[str] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"code": self.kind.value, "message": self.message(locale)}
        if self.detail:
            payload["detail"] = self.detail
        return payload


class NoInternetConnection(MealAnalysisError):
    kind = MealErrorKind.no_internet_connection
    http_status = 503


class ApiKeyMissing(MealAnalysisError):
    kind = MealErrorKind.api_key_missing
    http_status = 500


class ImageProcessingFailed(MealAnalysisError):
    kind = MealErrorKind.image_processing_failed
    http_status = 400


class ImageTooLarge(MealAnalysisError):
    kind = MealErrorKind.image_too_large
    http_status = 413


class ApiRequestFailed(MealAnalysisError):
    kind = MealErrorKind.api_request_failed
    http_status = 502


class RequestTimeout(MealAnalysisError):
    kind = MealErrorKind.request_timeout
    http_status = 504


class RateLimitExceeded(MealAnalysisError):
    kind = MealErrorKind.rate_limit_exceeded
    http_status = 429


class InvalidResponse(MealAnalysisError):
    kind = MealErrorKind.invalid_response
    http_status = 502


class NoFoodDetected(MealAnalysisError):
    kind = MealErrorKind.no_food_detected
    http_status = 422


class UnknownAnalysisError(MealAnalysisError):
    kind = MealErrorKind.unknown
    http_status = 500
