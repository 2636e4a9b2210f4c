"""
Service container.

Everything a handler needs (settings, identity verifier, rate limiter,
security event logger, the two services) is built once and stored on
``app.state.container``. Tests build their own container with fakes.
Services that need missing configuration are left as None; handlers answer
those requests with a configuration error instead of the process failing
at boot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from fastapi import Request

from tracker_backend.app.auth.identity import IdentityVerifier
from tracker_backend.app.config.redaction import safe_error_detail
from tracker_backend.app.config.settings import Settings, get_settings
from tracker_backend.app.context.gatherer import ContextGatherer
from tracker_backend.app.disambiguation.service import DisambiguationService
from tracker_backend.app.generation.service import ConfigGenerationService
from tracker_backend.app.providers.base import LLMProvider
from tracker_backend.app.providers.errors import ProviderMisconfiguredError
from tracker_backend.app.providers.factory import create_provider
from tracker_backend.app.ratelimit.base import RateLimitConfig, RateLimiter
from tracker_backend.app.ratelimit.factory import create_rate_limiter
from tracker_backend.app.security.events import LoggingEventSink, SecurityEventLogger, SupabaseEventSink

logger = logging.getLogger(__name__)

CHECK_AMBIGUITY_ENDPOINT = "check-ambiguity"
GENERATE_CONFIG_ENDPOINT = "generate-tracker-config"


@dataclass
class ServiceContainer:
    settings: Settings
    rate_limiter: RateLimiter
    security: SecurityEventLogger
    verifier: Optional[IdentityVerifier] = None
    disambiguation: Optional[DisambiguationService] = None
    generation: Optional[ConfigGenerationService] = None

    def missing_config(self) -> List[str]:
        missing = self.settings.missing_required()
        if self.verifier is None and "SUPABASE_URL" not in missing:
            missing.append("SUPABASE_URL")
        if (self.disambiguation is None or self.generation is None) and "LLM_API_KEY" not in missing:
            missing.append("LLM_API_KEY")
        return missing

    def rate_limit_for(self, endpoint: str) -> RateLimitConfig:
        s = self.settings
        if endpoint == GENERATE_CONFIG_ENDPOINT:
            return RateLimitConfig(max_requests=s.generation_max_requests, window_seconds=s.generation_window_seconds)
        return RateLimitConfig(max_requests=s.ambiguity_max_requests, window_seconds=s.ambiguity_window_seconds)


def build_container(settings: Optional[Settings] = None, provider: Optional[LLMProvider] = None) -> ServiceContainer:
    settings = settings or get_settings()

    verifier: Optional[IdentityVerifier] = None
    sink = LoggingEventSink()
    if settings.supabase_url and settings.supabase_service_role_key:
        verifier = IdentityVerifier(
            settings.supabase_url,
            settings.supabase_service_role_key,
            timeout_seconds=settings.auth_timeout_seconds,
            jwt_precheck=settings.auth_jwt_precheck,
        )
        if settings.security_log_enabled:
            sink = SupabaseEventSink(
                settings.supabase_url,
                settings.supabase_service_role_key,
                timeout_seconds=settings.auth_timeout_seconds,
            )

    if provider is None:
        try:
            provider = create_provider(settings)
        except ProviderMisconfiguredError as exc:
            logger.error("[CFG] model provider unavailable", extra={"error": safe_error_detail(exc)})

    disambiguation: Optional[DisambiguationService] = None
    generation: Optional[ConfigGenerationService] = None
    if provider is not None:
        gatherer = ContextGatherer(
            enabled=settings.context_lookups_enabled,
            timeout_seconds=settings.context_timeout_seconds,
        )
        disambiguation = DisambiguationService(provider, model=settings.ambiguity_model, gatherer=gatherer)
        generation = ConfigGenerationService(provider, model=settings.generation_model, gatherer=gatherer)

    return ServiceContainer(
        settings=settings,
        rate_limiter=create_rate_limiter(settings),
        security=SecurityEventLogger(sink),
        verifier=verifier,
        disambiguation=disambiguation,
        generation=generation,
    )


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


__all__ = [
    "CHECK_AMBIGUITY_ENDPOINT",
    "GENERATE_CONFIG_ENDPOINT",
    "ServiceContainer",
    "build_container",
    "get_container",
]
