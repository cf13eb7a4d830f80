"""
Test Structured Output

JSON extraction fallbacks and field coercion.
"""

import pytest

from market_research.exceptions import MalformedOutputError
from market_research.llm import safe_json_parse, coerce_string_list, coerce_text


def test_plain_json():
    assert safe_json_parse('{"relevant": true}') == {"relevant": True}


def test_fenced_json():
    text = '```json\n{"topic": "pricing", "intensity": "high"}\n```'
    assert safe_json_parse(text) == {"topic": "pricing", "intensity": "high"}


def test_json_wrapped_in_prose():
    text = 'Sure! Here is the analysis: {"competitors": ["Acme", "Beta"]} Hope that helps.'
    assert safe_json_parse(text) == {"competitors": ["Acme", "Beta"]}


def test_nested_object_survives_brace_extraction():
    text = 'Result -> {"outer": {"inner": 1}} done'
    assert safe_json_parse(text) == {"outer": {"inner": 1}}


@pytest.mark.parametrize("text", ["", "   ", "no json here", "[1, 2, 3]", "{not: valid}"])
def test_unrecoverable_output_raises(text):
    with pytest.raises(MalformedOutputError):
        safe_json_parse(text)


def test_coerce_string_list():
    assert coerce_string_list(["  Acme ", "", 3, None, "Beta"]) == ["Acme", "Beta"]
    assert coerce_string_list("Acme") == []
    assert coerce_string_list(None) == []


def test_coerce_text():
    assert coerce_text("  pricing ", "other") == "pricing"
    assert coerce_text("   ", "other") == "other"
    assert coerce_text(42, "other") == "other"
