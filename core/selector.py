"""
core.selector
Next-event selection: eligibility, cooldowns, tag damping, weighted draw.

pick_event() never raises; the classic pack is the backstop.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple, TypeVar

from .events import CLASSIC_EVENTS, EventCatalog, GameEvent
from .rng import RandomSource, default_source
from .state import GameState, StatVector

T = TypeVar("T")

SAME_TAG_DAMPING = 0.35


def weighted_random(items: Sequence[Tuple[T, float]], rng: Optional[RandomSource] = None) -> T:
    """Draw r in [0, total) and walk the items; earlier items win ties.

    Floating point overshoot falls through to the last item.
    """
    src = default_source(rng)
    total = sum(w for _, w in items)
    r = src.random() * total
    for item, w in items:
        if r < w:
            return item
        r -= w
    return items[-1][0]


def _uniform(items: Sequence[T], rng: RandomSource) -> T:
    return items[int(rng.random() * len(items))]


def _off_cooldown(ev: GameEvent, state: GameState) -> bool:
    last = state.last_seen.get(ev.id)
    if last is None:
        return True
    return state.stats.month - last >= int(ev.cooldown or 0)


def candidates_for(pack: Sequence[GameEvent], state: GameState) -> List[GameEvent]:
    stats = state.stats
    return [
        ev
        for ev in pack
        if ev.id != state.last_event_id and ev.is_eligible(stats) and _off_cooldown(ev, state)
    ]


def event_weight(ev: GameEvent, last_tag: Optional[str]) -> float:
    w = 1.0 if ev.weight is None else float(ev.weight)
    if last_tag and ev.tag == last_tag:
        w *= SAME_TAG_DAMPING
    return w


def _eligible(pack: Sequence[GameEvent], stats: StatVector) -> List[GameEvent]:
    return [ev for ev in pack if ev.is_eligible(stats)]


def pick_event(state: GameState, catalog: Optional[EventCatalog] = None, rng: Optional[RandomSource] = None) -> GameEvent:
    """Select the next event for `state` (pure; `state` is not modified)."""
    src = default_source(rng)
    catalog = catalog if catalog is not None else EventCatalog()

    pack = catalog.events_for(state.scenario_id)
    if not pack:
        pack = CLASSIC_EVENTS

    candidates = candidates_for(pack, state)
    if candidates:
        weighted = [(ev, event_weight(ev, state.last_tag)) for ev in candidates]
        return weighted_random(weighted, src)

    fallback = _eligible(pack, state.stats)
    if fallback:
        return _uniform(fallback, src)

    classic_fallback = _eligible(CLASSIC_EVENTS, state.stats)
    if classic_fallback:
        return _uniform(classic_fallback, src)
    return CLASSIC_EVENTS[0]
