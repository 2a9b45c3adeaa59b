"""
core.selfcheck
Minimal "it runs" proof for the core.

Run:
  python -m core.selfcheck
"""

from __future__ import annotations

from dataclasses import asdict, replace

from .effects import apply_effects
from .events import EventCatalog
from .finance import end_of_period_tick
from .rng import rng_from
from .scenarios import SCENARIO_IDS, initial_stats_for_scenario
from .selector import pick_event
from .state import GameState


def run_24_months_smoke(scenario_id: str = "classic", base_seed: int = 42) -> GameState:
    rng = rng_from("selfcheck", scenario_id, base_seed=base_seed)
    catalog = EventCatalog([])
    state = GameState(stats=initial_stats_for_scenario(scenario_id), scenario_id=scenario_id)

    for _ in range(24):
        month = state.stats.month
        ev = pick_event(state, catalog, rng)
        choice = ev.choices[0]
        stats = apply_effects(state.stats, choice.effects)
        assert stats.budget == stats.income - stats.fixed_expenses

        tick = end_of_period_tick(stats, rng)
        state = replace(
            state,
            stats=tick.stats,
            log=(*state.log, choice.log, *tick.logs),
            last_event_id=ev.id,
            last_tag=ev.tag,
            last_seen={**state.last_seen, ev.id: month},
        )

        # invariants
        assert state.stats.month == month + 1
        if stats.savings >= 0:
            assert state.stats.savings >= 0
        assert 0 <= state.stats.happiness <= 100
        assert 0 <= state.stats.stress <= 100
        assert 0 <= state.stats.impulse <= 100

    return state


if __name__ == "__main__":
    for sid in SCENARIO_IDS:
        final = run_24_months_smoke(sid)
        print(f"OK: 24-month smoke test passed ({sid}).")
        print("  Final stats:", asdict(final.stats))
        print("  Log entries:", len(final.log))
