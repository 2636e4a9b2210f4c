from __future__ import annotations

import functools
import json
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_ORIGINS = (
    "http://localhost:5173",
    "https://localhost:5173",
    "http://localhost:3000",
    "https://localhost:3000",
    "http://127.0.0.1:5173",
    "https://127.0.0.1:5173",
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # App / env
    app_env: str = Field("dev", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    request_id_header: str = Field("x-request-id", alias="REQUEST_ID_HEADER")

    # Identity provider + security event sink
    supabase_url: Optional[str] = Field(None, alias="SUPABASE_URL")
    supabase_service_role_key: Optional[str] = Field(None, alias="SUPABASE_SERVICE_ROLE_KEY")
    auth_jwt_precheck: bool = Field(True, alias="AUTH_JWT_PRECHECK")
    auth_timeout_seconds: float = Field(5.0, alias="AUTH_TIMEOUT_SECONDS")
    security_log_enabled: bool = Field(True, alias="SECURITY_LOG_ENABLED")

    # CORS
    allowed_origin: Optional[str] = Field(None, alias="ALLOWED_ORIGIN")
    dev_origins_enabled: bool = Field(True, alias="DEV_ORIGINS_ENABLED")

    # Model provider
    llm_provider: str = Field("gemini", alias="LLM_PROVIDER")
    llm_api_key: Optional[str] = Field(None, validation_alias=AliasChoices("LLM_API_KEY", "GEMINI_API_KEY"))
    llm_base_url: Optional[str] = Field(None, alias="LLM_BASE_URL")
    ambiguity_model: str = Field("gemini-2.5-flash", alias="AMBIGUITY_MODEL")
    generation_model: str = Field("gemini-2.5-flash", alias="GENERATION_MODEL")
    llm_timeout_seconds: float = Field(30.0, alias="LLM_TIMEOUT_SECONDS")
    llm_connect_timeout_seconds: float = Field(10.0, alias="LLM_CONNECT_TIMEOUT_SECONDS")

    # Context lookups
    context_lookups_enabled: bool = Field(True, alias="CONTEXT_LOOKUPS_ENABLED")
    context_timeout_seconds: float = Field(4.0, alias="CONTEXT_TIMEOUT_SECONDS")

    # Rate limiting
    rate_limit_backend: str = Field("memory", alias="RATE_LIMIT_BACKEND")
    redis_url: str = Field("redis://localhost:6379/0", alias="REDIS_URL")
    rate_limit_cleanup_seconds: int = Field(300, alias="RATE_LIMIT_CLEANUP_SECONDS")
    ambiguity_max_requests: int = Field(30, alias="AMBIGUITY_MAX_REQUESTS")
    ambiguity_window_seconds: int = Field(3600, alias="AMBIGUITY_WINDOW_SECONDS")
    generation_max_requests: int = Field(20, alias="GENERATION_MAX_REQUESTS")
    generation_window_seconds: int = Field(3600, alias="GENERATION_WINDOW_SECONDS")

    @field_validator("app_env", "llm_provider", "rate_limit_backend")
    @classmethod
    def normalize_lower(cls, v: str) -> str:
        return (v or "").strip().lower()

    @field_validator("allowed_origin", mode="before")
    @classmethod
    def reject_wildcard_origin(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        text = str(v).strip().rstrip("/")
        # credentials are allowed, so a wildcard origin is never honoured
        if not text or text == "*":
            return None
        return text

    @field_validator(
        "ambiguity_max_requests",
        "ambiguity_window_seconds",
        "generation_max_requests",
        "generation_window_seconds",
        "rate_limit_cleanup_seconds",
    )
    @classmethod
    def clamp_positive(cls, v: int) -> int:
        return max(1, v)

    def cors_origins_list(self) -> List[str]:
        origins: List[str] = list(DEV_ORIGINS) if self.dev_origins_enabled else []
        if self.allowed_origin and self.allowed_origin not in origins:
            origins.append(self.allowed_origin)
        return origins

    def missing_required(self) -> List[str]:
        missing: List[str] = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if not self.supabase_service_role_key:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        if not self.llm_api_key:
            missing.append("LLM_API_KEY")
        if not self.allowed_origin:
            missing.append("ALLOWED_ORIGIN")
        return missing


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def settings_public_summary(settings: Optional[Settings] = None) -> Dict[str, Any]:
    s = settings or get_settings()
    return {
        "env": s.app_env,
        "llm_provider": s.llm_provider,
        "ambiguity_model": s.ambiguity_model,
        "generation_model": s.generation_model,
        "rate_limit_backend": s.rate_limit_backend,
        "context_lookups_enabled": s.context_lookups_enabled,
        "cors_origins": json.dumps(s.cors_origins_list()),
        "missing": s.missing_required(),
    }


__all__ = ["DEV_ORIGINS", "Settings", "get_settings", "settings_public_summary"]
