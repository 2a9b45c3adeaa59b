from __future__ import annotations

import json

import pytest

from content.prompts import build_event_deck_prompt
from content.providers.gemini import GeminiProvider
from core.scenarios import CustomProfile
from engine.sim_runner import FAKE_DECK


def _offline_provider(monkeypatch, replies):
    provider = GeminiProvider([])
    provider.backend = "genai"
    prompts = []

    def fake_generate(prompt, temperature, max_output_tokens):
        prompts.append(prompt)
        return replies.pop(0)

    monkeypatch.setattr(provider, "_generate_text", fake_generate)
    return provider, prompts


def test_no_keys_is_not_ok():
    provider = GeminiProvider.from_api_key_string("")
    status = provider.status()
    assert not status.ok
    assert status.backend == "none"
    assert "No API key" in status.error
    with pytest.raises(RuntimeError):
        provider.generate_event_deck(prompt="x")


def test_key_string_is_split(monkeypatch):
    monkeypatch.setattr(GeminiProvider, "_init_backend", lambda self: None)
    provider = GeminiProvider.from_api_key_string(" a , ,b")
    assert provider.api_keys == ["a", "b"]


def test_parses_fenced_output(monkeypatch):
    provider, prompts = _offline_provider(monkeypatch, ["```json\n" + json.dumps(FAKE_DECK) + "\n```"])
    deck, raw = provider.generate_event_deck(prompt="make a deck")
    assert [e.id for e in deck.events] == ["meal-prep", "friend-wedding", "certification"]
    assert deck.goal.description.startswith("Build")
    assert prompts == ["make a deck"]
    assert raw.startswith("```json")


def test_repairs_broken_json_once(monkeypatch):
    provider, prompts = _offline_provider(monkeypatch, ["events: oops", json.dumps(FAKE_DECK)])
    deck, raw = provider.generate_event_deck(prompt="make a deck")
    assert len(deck.events) == 3
    assert len(prompts) == 2
    assert "events: oops" in prompts[1]
    assert provider.last_error


def test_no_repair_when_disabled(monkeypatch):
    provider, prompts = _offline_provider(monkeypatch, ["not json at all"])
    with pytest.raises(ValueError):
        provider.generate_event_deck(prompt="make a deck", repair_on_fail=False)
    assert len(prompts) == 1


def test_deck_prompt_mentions_profile_and_schema():
    prompt = build_event_deck_prompt(CustomProfile(income=4100, region="DE").to_dict(), event_count=6)
    assert '"income": 4100' in prompt
    assert '"region": "DE"' in prompt
    assert "Write 6 events" in prompt
    assert "fixedExpenses" in prompt
    assert "career|lifestyle|social|finance|risk" in prompt
