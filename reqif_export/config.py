"""
Application configuration using Pydantic Settings.
All environment-specific values are centralized here.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "ReqIF Export"

    # ── ReqIF header ─────────────────────────────────────
    reqif_tool_id: str = "reqif-export"
    reqif_source_tool_id: str = "ECSS-E-TM-10-25"
    reqif_version: str = "1.0"

    # ── Export ───────────────────────────────────────────
    default_export_settings: str = "export-settings.json"

    # ── COMET data source ────────────────────────────────
    http_timeout_seconds: float = 60.0

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
