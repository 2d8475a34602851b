# -*- coding: utf-8 -*-
"""Profile — on-device key/value storage (single JSON file)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

log = logging.getLogger(__name__)

KEY_USER_ID = "numa_user_id"
KEY_ONBOARDING_COMPLETE = "onboarding_complete"
KEY_GOAL = "user_goal"
KEY_WEIGHT_CURRENT = "user_weight_current"
KEY_WEIGHT_TARGET = "user_weight_target"
KEY_HEIGHT = "user_height"
KEY_AGE = "user_age"
KEY_GENDER = "user_gender"
KEY_ACTIVITY_LEVEL = "user_activity_level"

ONBOARDING_KEYS = (
    KEY_ONBOARDING_COMPLETE,
    KEY_GOAL,
    KEY_WEIGHT_CURRENT,
    KEY_WEIGHT_TARGET,
    KEY_HEIGHT,
    KEY_AGE,
    KEY_GENDER,
    KEY_ACTIVITY_LEVEL,
    KEY_USER_ID,
)


class LocalStore:
    """Flat persistent map. Every write rewrites the whole file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._data: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("local store %s unreadable, starting empty: %s", self.path, exc)
            return {}
        return raw if isinstance(raw, dict) else {}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, ensure_ascii=False, indent=2), encoding="utf-8")

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._flush()

    def update(self, values: Dict[str, Any]) -> None:
        self._data.update(values)
        self._flush()

    def remove(self, *keys: str) -> None:
        for key in keys:
            self._data.pop(key, None)
        self._flush()

    def clear(self) -> None:
        self._data = {}
        self._flush()

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def get_str(self, key: str) -> Optional[str]:
        value = self._data.get(key)
        return value if isinstance(value, str) else None

    def get_float(self, key: str) -> Optional[float]:
        value = self._data.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return float(value)

    def get_int(self, key: str) -> Optional[int]:
        value = self._data.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return value

    def get_bool(self, key: str) -> bool:
        return self._data.get(key) is True
