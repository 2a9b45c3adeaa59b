from __future__ import annotations

import pytest

from content.parsing import try_parse_json
from content.schemas import deck_from_llm, event_from_llm, goal_from_llm, normalize_effects, normalize_tag


def _raw_event(**kw):
    ev = {
        "id": "gym",
        "title": "Gym Membership",
        "description": "A gym opens nearby.",
        "tag": "lifestyle",
        "choices": [
            {"id": "join", "label": "Join", "effects": {"fixedExpenses": 40, "happiness": 4}, "log": "You joined."},
            {"id": "skip", "label": "Skip", "effects": {}, "log": "You skipped."},
        ],
    }
    ev.update(kw)
    return ev


def test_valid_event_round_trip():
    ev = event_from_llm(_raw_event(weight=2, cooldown=3))
    assert ev is not None
    assert ev.tag == "lifestyle"
    assert ev.weight == 2.0
    assert ev.cooldown == 3
    assert ev.get_choice("join").effects.fixed_expenses == 40
    assert ev.condition is None


def test_unusable_events_are_skipped():
    assert event_from_llm(_raw_event(id="")) is None
    assert event_from_llm(_raw_event(title=None)) is None
    assert event_from_llm(_raw_event(choices=[])) is None
    assert event_from_llm(_raw_event(choices="pick one")) is None
    assert event_from_llm("not an event") is None


def test_choice_defaults():
    ev = event_from_llm(_raw_event(choices=[{"label": "Just do it"}, {"label": "Just do it"}, {"nolabel": True}]))
    assert [c.id for c in ev.choices] == ["choice-1", "choice-2"]
    assert ev.choices[0].log == "Just do it"
    assert ev.choices[0].effects.is_empty()


def test_bad_weight_and_cooldown():
    ev = event_from_llm(_raw_event(weight=-1, cooldown=-4))
    assert ev.weight is None
    assert ev.cooldown == 0
    ev = event_from_llm(_raw_event(weight="heavy", cooldown="soon"))
    assert ev.weight is None
    assert ev.cooldown is None


def test_normalize_tag_and_effects():
    assert normalize_tag("CAREER") == "career"
    assert normalize_tag("gossip") == "finance"
    assert normalize_tag(None) == "finance"

    d = normalize_effects({"savings": "-250", "karma": 5, "stress": "lots", "fixedExpenses": 12.5, "debt": True})
    assert d.to_dict() == {"savings": -250, "fixed_expenses": 12.5}
    assert isinstance(d.savings, int)
    assert normalize_effects(["savings", 5]).is_empty()


def test_goal_parsing():
    goal = goal_from_llm({"description": "Build a buffer", "winCondition": {"stat": "savings", "operator": ">=", "value": 5000}})
    assert goal.description == "Build a buffer"
    assert goal.win_condition.stat == "savings"
    assert goal.win_condition.value == 5000

    loose = goal_from_llm({"description": "Be happy", "winCondition": {"stat": "karma", "operator": "==", "value": 1}})
    assert loose.description == "Be happy"
    assert loose.win_condition is None

    assert goal_from_llm({"winCondition": {}}) is None
    assert goal_from_llm("save") is None


def test_deck_tolerates_malformed_top_level():
    assert deck_from_llm(None).events == []
    deck = deck_from_llm({"events": {"id": "x"}, "goal": "not a goal"})
    assert deck.events == []
    assert deck.goal is None

    deck = deck_from_llm({"events": [_raw_event(), {"id": "broken"}, _raw_event(id="other")]})
    assert [e.id for e in deck.events] == ["gym", "other"]
    assert deck.to_dict()["goal"] is None


@pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan"), "nan", "inf", 1e999])
def test_non_finite_weight_and_cooldown_are_absent(value):
    ev = event_from_llm(_raw_event(weight=value, cooldown=value))
    assert ev is not None
    assert ev.weight is None
    assert ev.cooldown is None


def test_overflowing_cooldown_in_raw_json():
    raw = '{"events":[{"id":"a","title":"A","cooldown":1e999,"weight":"nan","choices":[{"label":"x"}]}]}'
    deck = deck_from_llm(try_parse_json(raw).data)
    assert [e.id for e in deck.events] == ["a"]
    assert deck.events[0].cooldown is None
    assert deck.events[0].weight is None


def test_non_finite_effects_are_dropped():
    assert normalize_effects({"savings": float("inf"), "stress": "nan", "debt": 5}).to_dict() == {"debt": 5}
