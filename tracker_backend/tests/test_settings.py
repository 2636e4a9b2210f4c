import json
import logging

from tracker_backend.app.config.redaction import redact_secrets, safe_error_detail
from tracker_backend.app.config.settings import DEV_ORIGINS, settings_public_summary
from tracker_backend.app.deps import CHECK_AMBIGUITY_ENDPOINT, GENERATE_CONFIG_ENDPOINT, build_container
from tracker_backend.app.observability.logging import hash_subject, safe_redact, structured_log
from tracker_backend.tests._fakes import FakeProvider, make_settings


def test_defaults():
    s = make_settings()
    assert s.llm_provider == "gemini"
    assert s.ambiguity_max_requests == 30
    assert s.generation_max_requests == 20
    assert s.ambiguity_window_seconds == 3600
    assert s.missing_required() == []


def test_missing_required_lists_env_names():
    s = make_settings(supabase_url=None, llm_api_key=None, allowed_origin=None)
    assert s.missing_required() == ["SUPABASE_URL", "LLM_API_KEY", "ALLOWED_ORIGIN"]


def test_cors_origins():
    s = make_settings(allowed_origin="https://tracker.example.com/")
    assert s.cors_origins_list()[-1] == "https://tracker.example.com"
    assert set(DEV_ORIGINS) <= set(s.cors_origins_list())
    prod = make_settings(dev_origins_enabled=False)
    assert prod.cors_origins_list() == ["https://tracker.example.com"]


def test_limits_are_clamped_positive():
    assert make_settings(generation_max_requests=0).generation_max_requests == 1


def test_gemini_key_alias(monkeypatch):
    monkeypatch.delenv("LLM_API_KEY", raising=False)
    monkeypatch.setenv("GEMINI_API_KEY", "from-gemini-env")
    from tracker_backend.app.config.settings import Settings

    assert Settings(_env_file=None).llm_api_key == "from-gemini-env"


def test_public_summary_has_no_secrets():
    summary = settings_public_summary(make_settings())
    flat = json.dumps(summary)
    assert "service-role-key" not in flat
    assert "test-llm-key" not in flat
    assert summary["llm_provider"] == "gemini"


def test_container_wiring():
    container = build_container(make_settings(), provider=FakeProvider())
    assert container.missing_config() == []
    assert container.verifier is not None
    assert container.rate_limit_for(CHECK_AMBIGUITY_ENDPOINT).max_requests == 30
    assert container.rate_limit_for(GENERATE_CONFIG_ENDPOINT).max_requests == 20


def test_container_without_model_key_reports_it():
    container = build_container(make_settings(llm_api_key=None))
    assert container.disambiguation is None
    assert "LLM_API_KEY" in container.missing_config()


def test_redaction():
    assert "AIza" not in redact_secrets("key AIzaSyA1234567890abcdefghijklmnop")
    assert redact_secrets("GET /x?key=abc123&y=1") == "GET /x?key=[redacted]&y=1"
    assert safe_error_detail(ValueError("Authorization: Bearer tok")) == "ValueError: Authorization: Bearer [redacted]"


def test_structured_log_drops_user_text(caplog):
    with caplog.at_level(logging.INFO, logger="tracker_backend.app.observability.logging"):
        structured_log({"event": "x", "trackerName": "secret name", "count": 2})
    assert "secret name" not in caplog.text
    assert '"count":2' in caplog.text
    assert safe_redact({"answer": "a", "ok": 1}) == {"ok": 1}
    assert hash_subject("u1") == hash_subject("u1") != hash_subject("u2")
