from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

# Resolve repo root from this file's location:
# app/settings.py → parent = app/ → parent = repo root
REPO_ROOT = Path(__file__).resolve().parents[1]


@dataclass
class Settings:
    """
    Centralized application configuration.

    Does NOT depend on pydantic. Values are loaded from environment
    variables via Settings.from_env().
    """

    # --- SQLite file being inspected ---
    db_path: str = ""

    # --- Optional frontend build directory (SPA) ---
    static_dir: str = ""

    # --- Row listing ---
    default_page_size: int = 100

    # --- Storage handle ---
    busy_timeout_ms: int = 5000

    # --- App metadata ---
    app_version: str = "dev"
    app_env: str = "dev"

    @property
    def busy_timeout_sec(self) -> float:
        return self.busy_timeout_ms / 1000.0

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build Settings from environment variables with sane fallbacks.

        - SQLITE_VIEWER_DB and SQLITE_VIEWER_STATIC can be absolute or relative.
        - Relative paths are resolved against REPO_ROOT.
        """

        def getenv_int(name: str, default: int) -> int:
            raw = os.getenv(name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return int(raw)
            except ValueError:
                return default

        def getenv_path(name: str) -> str:
            raw = os.getenv(name, "").strip()
            if not raw:
                return ""
            candidate = Path(raw)
            if not candidate.is_absolute():
                candidate = REPO_ROOT / raw
            return str(candidate)

        page_size = getenv_int("SQLITE_VIEWER_PAGE_SIZE", cls.default_page_size)
        if page_size <= 0:
            page_size = cls.default_page_size

        return cls(
            db_path=getenv_path("SQLITE_VIEWER_DB"),
            static_dir=getenv_path("SQLITE_VIEWER_STATIC"),
            default_page_size=page_size,
            busy_timeout_ms=getenv_int(
                "SQLITE_VIEWER_BUSY_TIMEOUT_MS", cls.busy_timeout_ms
            ),
            app_version=os.getenv("APP_VERSION", cls.app_version),
            app_env=os.getenv("APP_ENV", cls.app_env),
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings.from_env()
