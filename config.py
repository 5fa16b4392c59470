"""
Centralised settings loader (pydantic-settings, `.env` aware).
"""

from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime / DB ────────────────────────────────────────────────
    env_name: str = Field("local", validation_alias="ENV_NAME")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    database_url: str | None = Field(None, validation_alias="DATABASE_URL")
    cors_origins: list[str] = Field(["*"], validation_alias="CORS_ORIGINS")  # JSON list

    # ─── auth service tokens (HS256, shared secret) ──────────────────
    jwt_secret: str = Field("changeme", validation_alias="JWT_SECRET")
    jwt_audience: str = Field("authenticated", validation_alias="JWT_AUDIENCE")

    # ─── Gemini (meal photo / text analysis) ─────────────────────────
    gemini_api_key: str | None = Field(None, validation_alias="GEMINI_API_KEY")
    gemini_model: str = Field("models/gemini-2.0-flash", validation_alias="GEMINI_MODEL")

    # allow other teammates’ env-vars without crashing
    model_config = SettingsConfigDict(extra="ignore", env_file=".env", env_file_encoding="utf-8")


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()
