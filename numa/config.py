from __future__ import annotations

import os
from pathlib import Path
from typing import List


class Settings:
    """Centralized configuration for the meal analysis backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        self.data_root: Path = Path(
            os.environ.get("NUMA_DATA_ROOT") or repo_root / "data"
        ).expanduser()

        # ---- Vision API (OpenAI chat completions) ----
        self.config_file: Path = Path(
            os.environ.get("NUMA_CONFIG_FILE") or repo_root / "config.json"
        ).expanduser()
        self.build_info_file: Path = Path(
            os.environ.get("NUMA_BUILD_INFO") or base_dir / "build_info.json"
        ).expanduser()
        self.vision_url: str = os.environ.get(
            "NUMA_VISION_URL", "https://api.openai.com/v1/chat/completions"
        )
        self.vision_model: str = os.environ.get("NUMA_VISION_MODEL", "gpt-4o")
        self.vision_timeout: float = float(os.environ.get("NUMA_VISION_TIMEOUT") or "30")
        self.vision_max_tokens: int = int(os.environ.get("NUMA_VISION_MAX_TOKENS") or "500")
        self.vision_temperature: float = float(os.environ.get("NUMA_VISION_TEMPERATURE") or "0.1")
        self.connectivity_url: str = os.environ.get(
            "NUMA_CONNECTIVITY_URL", "https://www.google.com"
        )
        self.max_image_bytes: int = int(
            os.environ.get("NUMA_MAX_IMAGE_BYTES") or str(20 * 1024 * 1024)
        )

        # ---- Firestore (remote document store) ----
        self.firestore_project: str = os.environ.get("NUMA_FIRESTORE_PROJECT", "numa-app")
        self.firestore_database: str = os.environ.get("NUMA_FIRESTORE_DATABASE", "(default)")
        self.firestore_base_url: str = os.environ.get(
            "NUMA_FIRESTORE_BASE_URL", "https://firestore.googleapis.com/v1"
        )
        # Either an OAuth bearer token or a web API key; both are optional for emulators.
        self.firestore_token: str | None = os.environ.get("NUMA_FIRESTORE_TOKEN") or None
        self.firestore_api_key: str | None = os.environ.get("NUMA_FIRESTORE_API_KEY") or None

        cors = os.environ.get("NUMA_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]

    @property
    def local_store_path(self) -> Path:
        return self.data_root / "local_store.json"

    @property
    def firestore_documents_url(self) -> str:
        base = self.firestore_base_url.rstrip("/")
        return f"{base}/projects/{self.firestore_project}/databases/{self.firestore_database}/documents"


settings = Settings()
