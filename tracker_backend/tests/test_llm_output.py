import math

import pytest

from tracker_backend.app.llm_output import (
    LLMOutputError,
    as_bool,
    as_confidence,
    as_text_list,
    bounded_text,
    parse_llm_json,
    parse_llm_object,
    strip_code_fences,
)


def test_strip_code_fences_handles_wrapped_payload():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'


def test_strip_code_fences_finds_embedded_block():
    text = 'Here you go:\n```json\n{"a": 2}\n```\nThanks'
    assert strip_code_fences(text) == '{"a": 2}'


def test_plain_json_passes_through():
    assert parse_llm_object('  {"isAmbiguous": false} ') == {"isAmbiguous": False}


@pytest.mark.parametrize("text,cause", [("", "empty_output"), ("```json\n```", "empty_output"), ("{nope", "invalid_json")])
def test_parse_errors_carry_cause(text, cause):
    with pytest.raises(LLMOutputError) as exc_info:
        parse_llm_json(text)
    assert exc_info.value.cause == cause


def test_non_object_is_rejected():
    with pytest.raises(LLMOutputError) as exc_info:
        parse_llm_object("[1, 2]")
    assert exc_info.value.cause == "not_an_object"


def test_as_bool():
    assert as_bool(True) is True
    assert as_bool("FALSE") is False
    assert as_bool("yes") is None
    assert as_bool(1) is None


def test_as_confidence_clamps_and_rejects():
    assert as_confidence(0.85) == 0.85
    assert as_confidence("0.5") == 0.5
    assert as_confidence(3) == 1.0
    assert as_confidence(-1) == 0.0
    assert as_confidence(True) is None
    assert as_confidence(math.nan) is None
    assert as_confidence("high") is None
    assert as_confidence(None) is None


def test_text_helpers():
    assert bounded_text("  a   b  ", 10) == "a b"
    assert bounded_text("abcdef", 3) == "abc"
    assert bounded_text({"x": 1}, 10) == ""
    assert as_text_list(["a", " ", 3, None, "b "]) == ["a", "3", "b"]
    assert as_text_list("nope") == []
