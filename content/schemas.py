"""content.schemas

Contract for the event-deck generation service:

    { "events": [GameEvent...], "goal": { "description": str, "winCondition"?: {...} } }

Design choice:
The generator is untrusted. Malformed pieces are treated as absent, never as
fatal: a non-list `events` becomes [], a broken event is skipped, unknown
stat keys in effects are dropped, unknown tags fall back to "finance".
The custom catalog still gets its structural events (core.events).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from core.events import EVENT_TAGS, EventChoice, GameEvent
from core.goals import ScenarioGoal, WinCondition
from core.state import STAT_KEYS, EffectDelta, canonical_stat


def _as_float(x: Any, default: Optional[float] = None) -> Optional[float]:
    if isinstance(x, bool):
        return default
    try:
        v = float(x)
    except (TypeError, ValueError):
        return default
    return v if math.isfinite(v) else default


def _as_number(x: Any) -> Optional[float]:
    """Keep ints as ints so log lines and stats stay whole-dollar."""
    v = _as_float(x)
    if v is None:
        return None
    return int(v) if v.is_integer() else v


def _text(x: Any) -> str:
    return str(x or "").strip()


def normalize_tag(tag: Any, default: str = "finance") -> str:
    t = _text(tag).lower()
    return t if t in EVENT_TAGS else default


def normalize_effects(d: Any) -> EffectDelta:
    if not isinstance(d, Mapping):
        return EffectDelta()
    out: Dict[str, float] = {}
    for k, v in d.items():
        key = canonical_stat(str(k))
        if key not in STAT_KEYS:
            continue
        num = _as_number(v)
        if num is None:
            continue
        out[key] = num
    return EffectDelta(**out)


def choice_from_llm(data: Any, *, default_id: str) -> Optional[EventChoice]:
    if not isinstance(data, Mapping):
        return None
    label = _text(data.get("label") or data.get("title"))
    if not label:
        return None
    explain = _text(data.get("explain"))
    return EventChoice(
        id=_text(data.get("id")) or default_id,
        label=label,
        effects=normalize_effects(data.get("effects")),
        log=_text(data.get("log")) or label,
        explain=explain or None,
    )


def event_from_llm(data: Any) -> Optional[GameEvent]:
    """Parse one generated event, or None if it is unusable."""
    if not isinstance(data, Mapping):
        return None
    event_id = _text(data.get("id"))
    title = _text(data.get("title"))
    if not event_id or not title:
        return None

    raw_choices = data.get("choices")
    choices: List[EventChoice] = []
    seen: set = set()
    if isinstance(raw_choices, list):
        for i, obj in enumerate(raw_choices):
            c = choice_from_llm(obj, default_id=f"choice-{i + 1}")
            if c is None or c.id in seen:
                continue
            seen.add(c.id)
            choices.append(c)
    if not choices:
        return None

    weight = _as_float(data.get("weight"))
    if weight is not None and weight < 0:
        weight = None
    cooldown = _as_float(data.get("cooldown"))

    return GameEvent(
        id=event_id,
        title=title,
        description=_text(data.get("description")),
        tag=normalize_tag(data.get("tag")),
        choices=tuple(choices),
        weight=weight,
        cooldown=max(0, int(cooldown)) if cooldown is not None else None,
    )


def events_from_llm(data: Any) -> List[GameEvent]:
    if not isinstance(data, list):
        return []
    out: List[GameEvent] = []
    for obj in data:
        ev = event_from_llm(obj)
        if ev is not None:
            out.append(ev)
    return out


def goal_from_llm(data: Any) -> Optional[ScenarioGoal]:
    if not isinstance(data, Mapping):
        return None
    desc = _text(data.get("description"))
    if not desc:
        return None
    cond = None
    raw = data.get("winCondition", data.get("win_condition"))
    if isinstance(raw, Mapping):
        try:
            cond = WinCondition.from_mapping(raw)
        except (TypeError, ValueError):
            cond = None
    return ScenarioGoal(description=desc, win_condition=cond)


@dataclass(frozen=True)
class EventDeck:
    """Generation-service output, validated."""

    events: List[GameEvent] = field(default_factory=list)
    goal: Optional[ScenarioGoal] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "events": [e.to_dict() for e in self.events],
            "goal": self.goal.to_dict() if self.goal else None,
        }


def deck_from_llm(data: Any) -> EventDeck:
    if not isinstance(data, Mapping):
        return EventDeck()
    return EventDeck(events=events_from_llm(data.get("events")), goal=goal_from_llm(data.get("goal")))
