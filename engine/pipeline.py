"""engine.pipeline

Core turn flow (headless).

Responsibilities:
- Commit a chosen EventChoice: effects, narrative log, cooldown bookkeeping
- Advance the month: tick, tick logs, pick the next event
- Evaluate lose conditions after every state change

This layer is UI-agnostic.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Iterable, Optional, Tuple

from core.effects import apply_effects
from core.events import EventCatalog, GameEvent
from core.finance import end_of_period_tick
from core.goals import check_lose, check_win
from core.rng import RandomSource
from core.selector import pick_event
from core.state import GameState, stats_to_dict


def _append_log(log: Tuple[str, ...], entries: Iterable[str], max_entries: Optional[int]) -> Tuple[str, ...]:
    out = (*log, *entries)
    if max_entries is not None and max_entries > 0 and len(out) > max_entries:
        out = out[-max_entries:]
    return out


def apply_choice(
    *,
    state: GameState,
    event: GameEvent,
    choice_id: str,
    max_log_entries: Optional[int] = None,
) -> Tuple[GameState, Dict[str, Any]]:
    """Apply a choice of `event` to `state` (same month).

    Returns (new_state, turn_log).
    """
    choice = event.get_choice(choice_id)
    if choice is None:
        raise ValueError(f"Unknown choice_id {choice_id!r} for event {event.id!r}")

    month = int(state.stats.month)
    before = stats_to_dict(state.stats)
    stats = apply_effects(state.stats, choice.effects)

    entries = [choice.log]
    lose = check_lose(stats)
    if lose.done and lose.message:
        entries.append(lose.message)

    new_state = replace(
        state,
        stats=stats,
        log=_append_log(state.log, entries, max_log_entries),
        last_event_id=event.id,
        last_tag=event.tag,
        last_seen={**state.last_seen, event.id: month},
        game_over=state.game_over or lose.done,
    )
    win = check_win(new_state)

    log: Dict[str, Any] = {
        "month": month,
        "event": event.id,
        "tag": event.tag,
        "choice": choice.id,
        "choice_label": choice.label,
        "effects": choice.effects.to_dict(),
        "before": before,
        "after": stats_to_dict(stats),
        "won": win.done,
        "lost": lose.done,
    }
    return new_state, log


def advance_month(
    *,
    state: GameState,
    catalog: EventCatalog,
    rng: Optional[RandomSource] = None,
    max_log_entries: Optional[int] = None,
) -> Tuple[GameState, GameEvent, Dict[str, Any]]:
    """Run the monthly tick and pick the next event.

    Returns (new_state, next_event, tick_log).
    """
    before = stats_to_dict(state.stats)
    tick = end_of_period_tick(state.stats, rng)

    entries = list(tick.logs)
    lose = check_lose(tick.stats)
    if lose.done and lose.message:
        entries.append(lose.message)

    new_state = replace(
        state,
        stats=tick.stats,
        log=_append_log(state.log, entries, max_log_entries),
        game_over=state.game_over or lose.done,
    )
    next_event = pick_event(new_state, catalog, rng)
    win = check_win(new_state)

    log: Dict[str, Any] = {
        "month": int(state.stats.month),
        "tick": list(tick.logs),
        "before": before,
        "after": stats_to_dict(tick.stats),
        "next_event": next_event.id,
        "won": win.done,
        "lost": lose.done,
    }
    return new_state, next_event, log
