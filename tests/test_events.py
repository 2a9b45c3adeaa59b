from __future__ import annotations

from dataclasses import replace

import pytest

from core.events import (
    CLASSIC_EVENTS,
    DEBT_EVENT_ID,
    EVENT_TAGS,
    EXPENSE_EVENT_ID,
    STATIC_CATALOGS,
    STUDENT_EVENTS,
    STARTUP_EVENTS,
    EventCatalog,
    EventChoice,
    GameEvent,
    dedupe_by_id,
)
from core.scenarios import initial_stats_for_scenario
from core.state import EffectDelta


def _event(eid: str, title: str = "Generated") -> GameEvent:
    return GameEvent(
        id=eid,
        title=title,
        description="",
        tag="social",
        choices=(EventChoice(id="ok", label="OK", effects=EffectDelta(happiness=1), log="ok"),),
    )


def test_static_catalog_sizes():
    assert len(CLASSIC_EVENTS) == 7
    assert len(STUDENT_EVENTS) == 5
    assert len(STARTUP_EVENTS) == 5


@pytest.mark.parametrize("scenario_id", sorted(STATIC_CATALOGS))
def test_static_catalog_hygiene(scenario_id):
    events = STATIC_CATALOGS[scenario_id]
    ids = [e.id for e in events]
    assert len(ids) == len(set(ids))
    for ev in events:
        assert ev.tag in EVENT_TAGS
        assert ev.choices
        choice_ids = [c.id for c in ev.choices]
        assert len(choice_ids) == len(set(choice_ids))
        assert ev.cooldown and ev.cooldown > 0


def test_lookup_falls_back_to_classic():
    catalog = EventCatalog()
    assert catalog.events_for("student") is STUDENT_EVENTS
    assert catalog.events_for("nope") is CLASSIC_EVENTS
    assert catalog.events_for("") is CLASSIC_EVENTS
    assert catalog.events_for(None) is CLASSIC_EVENTS
    assert list(catalog.events_for("custom")) == []


def test_set_custom_events_appends_structural_events():
    catalog = EventCatalog()
    catalog.set_custom_events([_event("a"), _event("b")])
    ids = [e.id for e in catalog.events_for("custom")]
    assert ids == ["a", "b", DEBT_EVENT_ID, EXPENSE_EVENT_ID]
    assert [e.id for e in catalog.generated_events] == ["a", "b"]


def test_set_custom_events_replaces_previous_deck():
    catalog = EventCatalog([_event("a")])
    catalog.set_custom_events([_event("z")])
    ids = [e.id for e in catalog.custom_events]
    assert ids == ["z", DEBT_EVENT_ID, EXPENSE_EVENT_ID]


def test_empty_or_missing_deck_still_has_structural_events():
    for deck in ([], None):
        catalog = EventCatalog()
        catalog.set_custom_events(deck)
        assert [e.id for e in catalog.custom_events] == [DEBT_EVENT_ID, EXPENSE_EVENT_ID]


def test_structural_ids_are_never_duplicated():
    catalog = EventCatalog()
    catalog.set_custom_events([_event(DEBT_EVENT_ID, "Impostor"), _event("a"), _event(EXPENSE_EVENT_ID, "Impostor")])
    events = catalog.custom_events
    ids = [e.id for e in events]
    assert ids.count(DEBT_EVENT_ID) == 1
    assert ids.count(EXPENSE_EVENT_ID) == 1
    # last write wins: the structural versions replace the supplied ones
    assert all(e.title != "Impostor" for e in events)


def test_dedupe_last_write_wins():
    out = dedupe_by_id([_event("a", "first"), _event("b"), _event("a", "second")])
    assert [e.id for e in out] == ["b", "a"]
    assert out[-1].title == "second"


def test_catalogs_are_per_instance():
    one = EventCatalog([_event("only-in-one")])
    two = EventCatalog()
    assert "only-in-one" not in {e.id for e in two.events_for("custom")}
    assert "only-in-one" in {e.id for e in one.events_for("custom")}


def test_structural_debt_event_condition():
    catalog = EventCatalog([])
    debt_event = next(e for e in catalog.custom_events if e.id == DEBT_EVENT_ID)
    base = initial_stats_for_scenario("classic")
    assert not debt_event.is_eligible(replace(base, savings=1000, debt=0))
    assert not debt_event.is_eligible(replace(base, savings=999, debt=500))
    assert debt_event.is_eligible(replace(base, savings=1000, debt=1))
    assert debt_event.cooldown == 2

    expense_event = next(e for e in catalog.custom_events if e.id == EXPENSE_EVENT_ID)
    assert expense_event.condition is None
    assert expense_event.cooldown == 4
    assert expense_event.get_choice("cut-200").effects.fixed_expenses == -200
    assert expense_event.get_choice("missing") is None


def test_event_to_dict_has_no_condition():
    d = CLASSIC_EVENTS[0].to_dict()
    assert "condition" not in d
    assert d["choices"][0]["effects"] == {"savings": -500, "debt": -500, "stress": -2, "happiness": 2}
