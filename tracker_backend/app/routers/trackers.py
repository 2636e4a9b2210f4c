"""
Tracker name endpoints.

Both handlers run the same gates in the same order: configuration, bearer
token, rate limit, body validation, input sanitization. An unreadable
ambiguity-check body still answers 200 as "not ambiguous"; tracker creation
never blocks on that endpoint. Security events collected along the way are
written after the response has been sent.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ValidationError
from starlette.background import BackgroundTask

from tracker_backend.app.auth.identity import parse_authorization
from tracker_backend.app.config.redaction import safe_error_detail
from tracker_backend.app.context.gatherer import GatheredContext
from tracker_backend.app.deps import (
    CHECK_AMBIGUITY_ENDPOINT,
    GENERATE_CONFIG_ENDPOINT,
    ServiceContainer,
    get_container,
)
from tracker_backend.app.disambiguation.resolver import not_ambiguous
from tracker_backend.app.errors import (
    AuthError,
    ConfigurationError,
    InvalidRequest,
    RateLimitExceeded,
    ServiceError,
)
from tracker_backend.app.generation.prompts import GenerationInput
from tracker_backend.app.observability.logging import hash_subject, structured_log
from tracker_backend.app.ratelimit.base import rate_limit_headers
from tracker_backend.app.schemas import (
    MAX_CONVERSATION_TURNS,
    CheckAmbiguityRequest,
    ConversationHistoryEntry,
    GeneratedTrackerConfig,
    GenerateTrackerConfigRequest,
)
from tracker_backend.app.security.events import RequestSecurityLog
from tracker_backend.app.security.headers import apply_security_headers
from tracker_backend.app.security.sanitizer import sanitize_for_prompt
from tracker_backend.app.utils.request_helpers import get_client_ip, get_user_agent, is_https_request

router = APIRouter(tags=["trackers"])
logger = logging.getLogger(__name__)

RATE_LIMIT_WARNING_RATIO = 0.2

NAME_CHARS = 100
DEFINITION_CHARS = 300
SUMMARY_CHARS = 500
DESCRIPTION_CHARS = 500
INTERPRETATION_CHARS = 100
HISTORY_CHARS = 300
# field -> (max chars per item, max items)
_LIST_LIMITS = {
    "allDefinitions": (DEFINITION_CHARS, 5),
    "wikiCategories": (60, 6),
    "relatedTerms": (40, 10),
}

ModelT = TypeVar("ModelT", bound=BaseModel)


def _security_log(request: Request, container: ServiceContainer, endpoint: str) -> RequestSecurityLog:
    return RequestSecurityLog(
        container.security,
        endpoint=endpoint,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )


def _respond(
    request: Request,
    log: RequestSecurityLog,
    content: Dict[str, Any],
    *,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    response = JSONResponse(
        content,
        status_code=status_code,
        headers=headers or None,
        background=BackgroundTask(log.flush),
    )
    apply_security_headers(response, is_https=is_https_request(request))
    return response


def _error(request: Request, log: RequestSecurityLog, exc: ServiceError, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    merged = {**(headers or {}), **exc.to_headers()}
    return _respond(request, log, exc.to_body(), status_code=exc.status_code, headers=merged)


def _note_origin(request: Request, container: ServiceContainer, log: RequestSecurityLog) -> None:
    origin = request.headers.get("origin")
    if origin and origin.rstrip("/") not in container.settings.cors_origins_list():
        log.cors_violation(origin)


async def _admit(
    request: Request,
    container: ServiceContainer,
    log: RequestSecurityLog,
    endpoint: str,
) -> Tuple[str, Dict[str, str]]:
    """
    Configuration, identity and rate-limit gates.

    Returns:
        (user_id, rate-limit headers)

    Raises:
        ConfigurationError, AuthError, RateLimitExceeded
    """
    _note_origin(request, container, log)

    missing = container.missing_config()
    if missing:
        log.config_error(missing)
        raise ConfigurationError(f"missing: {','.join(missing)}")

    token = parse_authorization(request.headers.get("authorization"))
    if token is None:
        log.auth_failure("Missing or invalid Authorization header")
        raise AuthError("missing_bearer", missing_header=True)
    try:
        user = await container.verifier.verify(token)
    except AuthError as exc:
        log.invalid_token(exc.detail)
        raise

    config = container.rate_limit_for(endpoint)
    result = await container.rate_limiter.check(user.user_id, endpoint, config)
    headers = rate_limit_headers(result, config)
    if not result.allowed:
        log.rate_limit_exceeded(user.user_id, config.max_requests)
        raise RateLimitExceeded(result.reset_at, headers)
    if result.remaining <= config.max_requests * RATE_LIMIT_WARNING_RATIO:
        log.rate_limit_warning(user.user_id, config.max_requests, result.remaining)
    return user.user_id, headers


async def _read_body(request: Request, model: Type[ModelT]) -> ModelT:
    try:
        payload = await request.json()
    except ValueError as exc:
        raise InvalidRequest("Invalid JSON body") from exc
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        fields = {str(err["loc"][0]) for err in exc.errors() if err.get("loc")}
        if "trackerName" in fields or "tracker_name" in fields:
            raise InvalidRequest("trackerName is required") from exc
        raise InvalidRequest("Invalid request body") from exc


def _clean(
    log: RequestSecurityLog,
    user_id: str,
    field_name: str,
    value: Optional[str],
    max_length: int,
) -> str:
    if not value:
        return ""
    result = sanitize_for_prompt(value, max_length=max_length)
    if result.injection_detected:
        log.injection_detected(user_id, field_name, value, list(result.injection_kinds))
    return result.value


def _clean_list(log: RequestSecurityLog, user_id: str, field_name: str, values: List[str]) -> List[str]:
    max_chars, max_items = _LIST_LIMITS[field_name]
    cleaned = [_clean(log, user_id, field_name, v, max_chars) for v in values[:max_items]]
    return [v for v in cleaned if v]


def _supplied_context(log: RequestSecurityLog, user_id: str, body: CheckAmbiguityRequest) -> GatheredContext:
    definition = getattr(body, "definition", None)
    return GatheredContext(
        definition=_clean(log, user_id, "definition", definition, DEFINITION_CHARS) or None,
        all_definitions=_clean_list(log, user_id, "allDefinitions", body.all_definitions),
        wiki_summary=_clean(log, user_id, "wikiSummary", body.wiki_summary, SUMMARY_CHARS) or None,
        wiki_categories=_clean_list(log, user_id, "wikiCategories", body.wiki_categories),
        related_terms=_clean_list(log, user_id, "relatedTerms", body.related_terms),
    )


def _clean_history(
    log: RequestSecurityLog,
    user_id: str,
    history: List[ConversationHistoryEntry],
) -> List[ConversationHistoryEntry]:
    cleaned: List[ConversationHistoryEntry] = []
    for entry in history[-MAX_CONVERSATION_TURNS:]:
        question = _clean(log, user_id, "conversationHistory.question", entry.question, HISTORY_CHARS)
        answer = _clean(log, user_id, "conversationHistory.answer", entry.answer, HISTORY_CHARS)
        if question and answer:
            cleaned.append(ConversationHistoryEntry(question=question, answer=answer))
    return cleaned


@router.options("/check-ambiguity")
@router.options("/generate-tracker-config")
async def options_ok(request: Request) -> PlainTextResponse:
    # real preflights are answered by CORSMiddleware before reaching here
    response = PlainTextResponse("ok")
    apply_security_headers(response, is_https=is_https_request(request))
    return response


@router.post("/check-ambiguity")
async def check_ambiguity(request: Request, container: ServiceContainer = Depends(get_container)) -> JSONResponse:
    log = _security_log(request, container, CHECK_AMBIGUITY_ENDPOINT)
    try:
        user_id, headers = await _admit(request, container, log, CHECK_AMBIGUITY_ENDPOINT)
    except ServiceError as exc:
        return _error(request, log, exc)

    try:
        body = await _read_body(request, CheckAmbiguityRequest)
    except InvalidRequest as exc:
        structured_log({"event": "ambiguity_request_invalid", "error": exc.detail}, level=logging.WARNING)
        return _respond(request, log, not_ambiguous("invalid_request").to_wire(), headers=headers)

    name = _clean(log, user_id, "trackerName", body.tracker_name, NAME_CHARS)
    supplied = _supplied_context(log, user_id, body)
    try:
        result = await container.disambiguation.check(name, supplied)
    except Exception as exc:  # noqa: BLE001
        # fail open: classification must never block tracker creation
        logger.exception("[API] ambiguity check failed")
        log.internal_failure(user_id, safe_error_detail(exc))
        result = not_ambiguous("internal_error")

    structured_log(
        {
            "event": "ambiguity_checked",
            "subject": hash_subject(user_id),
            "ambiguous": result.is_ambiguous,
            "interpretations": len(result.interpretations),
            "local_correction": result.suggested_correction is not None,
        }
    )
    return _respond(request, log, result.to_wire(), headers=headers)


@router.post("/generate-tracker-config")
async def generate_tracker_config(
    request: Request,
    container: ServiceContainer = Depends(get_container),
) -> JSONResponse:
    log = _security_log(request, container, GENERATE_CONFIG_ENDPOINT)
    try:
        user_id, headers = await _admit(request, container, log, GENERATE_CONFIG_ENDPOINT)
    except ServiceError as exc:
        return _error(request, log, exc)

    try:
        body = await _read_body(request, GenerateTrackerConfigRequest)
        name = _clean(log, user_id, "trackerName", body.tracker_name, NAME_CHARS)
        if not name:
            raise InvalidRequest("trackerName is required")
    except InvalidRequest as exc:
        return _error(request, log, exc, headers)

    inp = GenerationInput(
        name=name,
        selected_interpretation=_clean(
            log, user_id, "selectedInterpretation", body.selected_interpretation, INTERPRETATION_CHARS
        )
        or None,
        user_description=_clean(log, user_id, "userDescription", body.user_description, DESCRIPTION_CHARS) or None,
        context=_supplied_context(log, user_id, body),
        history=_clean_history(log, user_id, body.conversation_history),
    )

    try:
        outcome = await container.generation.generate(inp)
    except ServiceError as exc:
        log.internal_failure(user_id, exc.detail)
        return _error(request, log, exc, headers)
    except Exception as exc:  # noqa: BLE001
        logger.exception("[API] tracker config generation failed")
        log.internal_failure(user_id, safe_error_detail(exc))
        return _error(request, log, ServiceError("unhandled"), headers)

    if isinstance(outcome, GeneratedTrackerConfig):
        structured_log({"event": "tracker_config_generated", "subject": hash_subject(user_id)})
        return _respond(request, log, {"config": outcome.to_wire()}, headers=headers)

    structured_log(
        {
            "event": "tracker_config_clarification",
            "subject": hash_subject(user_id),
            "answered": len(inp.history),
            "questions": len(outcome.questions),
        }
    )
    return _respond(request, log, outcome.model_dump(), headers=headers)


__all__ = ["router"]
