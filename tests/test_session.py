from __future__ import annotations

import json
from dataclasses import replace

import pytest

from content.schemas import deck_from_llm
from core.events import DEBT_EVENT_ID, EXPENSE_EVENT_ID
from core.scenarios import CustomProfile
from engine.config import EngineConfig
from engine.session import GameSession
from engine.sim_runner import FAKE_DECK


def _session(scenario_id: str = "classic", seed: int = 11, **kw) -> GameSession:
    return GameSession(config=EngineConfig(base_seed=seed, scenario_id=scenario_id, **kw))


def test_new_session_starts_with_event_and_welcome_log():
    s = _session("student")
    assert s.state.scenario_id == "student"
    assert s.state.stats.month == 1
    assert s.state.log[0] == "Welcome to Centible Life!"
    assert "student" in s.state.log[1]
    assert s.current_event is not None
    assert s.choice_made is None


def test_choose_then_advance():
    s = _session()
    ev = s.current_event
    choice = s.choose(ev.choices[0].id)
    assert s.choice_made == choice
    assert s.state.last_event_id == ev.id
    assert s.state.last_seen[ev.id] == 1
    assert s.state.log[-1] == choice.log

    nxt = s.next_month()
    assert s.state.stats.month == 2
    assert s.current_event is nxt
    assert nxt.id != ev.id
    assert s.choice_made is None
    assert [log.get("choice") for log in s.turn_logs][0] == choice.id
    assert "tick" in s.turn_logs[1]


def test_turn_guards():
    s = _session()
    with pytest.raises(ValueError):
        s.next_month()
    s.choose(s.current_event.choices[0].id)
    with pytest.raises(ValueError):
        s.choose(s.current_event.choices[0].id)


def test_unknown_choice_is_rejected_without_state_change():
    s = _session()
    before = s.state
    with pytest.raises(ValueError):
        s.choose("definitely-not-a-choice")
    assert s.state is before
    assert s.choice_made is None


def test_same_seed_same_game():
    def play(seed):
        s = _session(seed=seed)
        seen = []
        for _ in range(10):
            seen.append(s.current_event.id)
            s.choose(s.current_event.choices[-1].id)
            s.next_month()
        return seen, s.state

    assert play(5) == play(5)


def test_losing_ends_the_game():
    s = _session()
    ev = s.current_event
    s.state = replace(s.state, stats=replace(s.state.stats, stress=200))
    s.choose(ev.choices[0].id)
    assert s.state.game_over
    assert s.outcome()["lost"]
    assert "stress" in s.state.log[-1]
    with pytest.raises(ValueError):
        s.next_month()
    with pytest.raises(ValueError):
        s.choose(ev.choices[0].id)


def test_win_is_reported_without_ending_game():
    s = _session("startup")
    out = s.outcome()
    assert out["won"]
    assert not out["game_over"]
    s.choose(s.current_event.choices[0].id)
    s.next_month()


def test_start_custom_loads_deck_and_goal():
    s = _session("custom")
    assert "survey" in s.state.log[-1]
    deck = deck_from_llm(FAKE_DECK)
    s.start_custom(CustomProfile(income=3000, savings=500, debt=0, fixed_expenses=2000, risk="low"), deck)

    assert s.state.scenario_id == "custom"
    assert s.state.stats.income == 3000
    assert s.state.stats.impulse == 25
    assert s.state.goal_description == "Build a $3,000 emergency fund."
    assert s.state.win_condition == {"stat": "savings", "operator": ">=", "value": 3000.0}
    assert s.state.log == ("Loaded 3 AI events",)
    ids = [e.id for e in s.catalog.events_for("custom")]
    assert ids[-2:] == [DEBT_EVENT_ID, EXPENSE_EVENT_ID]
    assert s.current_event.id in ids


def test_custom_session_round_trip():
    s = _session("custom")
    s.start_custom(CustomProfile(), deck_from_llm(FAKE_DECK))
    s.choose(s.current_event.choices[0].id)
    doc = json.loads(json.dumps(s.to_dict()))

    assert doc["custom_loaded"] is True
    assert [e["id"] for e in doc["custom_events"]] == ["meal-prep", "friend-wedding", "certification"]

    restored = GameSession.from_dict(doc)
    assert restored.state == s.state
    assert restored.current_event.id == s.current_event.id
    assert restored.choice_made.id == s.choice_made.id
    assert [e.id for e in restored.catalog.custom_events] == [e.id for e in s.catalog.custom_events]


def test_restore_without_custom_deck_keeps_custom_empty():
    s = _session("classic")
    restored = GameSession.from_dict(json.loads(json.dumps(s.to_dict())))
    assert restored.catalog.custom_events == []
    assert restored.current_event.id == s.current_event.id
    assert restored.choice_made is None


def test_log_is_capped():
    s = _session(max_log_entries=5)
    for _ in range(6):
        s.choose(s.current_event.choices[0].id)
        if s.state.game_over:
            break
        s.next_month()
    assert len(s.state.log) <= 5


@pytest.mark.parametrize("doc", [{"state": [1, 2]}, {"state": {"stats": "broke"}}, {}])
def test_restore_from_corrupted_document_starts_clean(doc):
    restored = GameSession.from_dict(doc)
    assert restored.state.scenario_id == "classic"
    assert restored.state.stats.month == 1
    assert restored.current_event is not None
