from __future__ import annotations

import pytest

from content.parsing import clean_model_json, extract_object, must_parse_json, strip_code_fences, try_parse_json


def test_strips_fences_and_prose():
    raw = 'Here is your deck:\n```json\n{"events": [], "goal": null}\n```\nEnjoy!'
    assert strip_code_fences(raw) == '{"events": [], "goal": null}'
    assert try_parse_json(raw).data == {"events": [], "goal": None}


def test_extract_object_cuts_to_outer_braces():
    assert extract_object('sure! {"a": {"b": 1}} thanks') == '{"a": {"b": 1}}'
    assert extract_object("no braces") == "no braces"


def test_trailing_commas_and_smart_quotes():
    raw = "{“events”: [1, 2,], “goal”: {“description”: “Save”,},}"
    assert try_parse_json(raw).data == {"events": [1, 2], "goal": {"description": "Save"}}


def test_raw_newlines_inside_strings():
    raw = '{"title": "Line one\nline two"}'
    assert "\\n" in clean_model_json(raw)
    assert must_parse_json(raw) == {"title": "Line one\nline two"}


def test_python_literal_fallback():
    res = try_parse_json("{'events': [], 'ok': True, 'goal': None}")
    assert res.data == {"events": [], "ok": True, "goal": None}
    assert res.error == ""


def test_non_object_root_is_rejected():
    res = try_parse_json("[1, 2, 3]")
    assert res.data is None
    assert res.error


def test_must_parse_raises_on_garbage():
    with pytest.raises(ValueError):
        must_parse_json("the model refused")
