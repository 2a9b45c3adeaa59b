"""engine.sim_runner

Headless runner for quick sanity checks.

This keeps tests deterministic and CI-friendly by avoiding network calls.
It uses a tiny built-in fake deck provider.

Run:
  python -m engine.sim_runner
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Tuple

from content.providers.base import ProviderStatus
from content.schemas import EventDeck, deck_from_llm
from core.scenarios import CustomProfile

from .config import EngineConfig
from .logging import dumps_run_export, session_run_export
from .session import GameSession

FAKE_DECK: Dict[str, Any] = {
    "events": [
        {
            "id": "meal-prep",
            "title": "Meal Prep Sunday",
            "description": "Groceries are expensive this month. Cook ahead or keep ordering in?",
            "tag": "lifestyle",
            "cooldown": 3,
            "choices": [
                {
                    "id": "cook",
                    "label": "Cook for the week (-$60, -3 impulse)",
                    "effects": {"savings": -60, "impulse": -3, "stress": 1},
                    "log": "You meal-prepped and skipped takeout.",
                    "explain": "Planning meals costs a bit up front but trains you out of impulse orders.",
                },
                {
                    "id": "order",
                    "label": "Keep ordering in (-$180, +3 happiness)",
                    "effects": {"savings": -180, "happiness": 3, "impulse": 2},
                    "log": "You ordered in all week.",
                },
            ],
        },
        {
            "id": "friend-wedding",
            "title": "Destination Wedding",
            "description": "A close friend invites you to a wedding abroad.",
            "tag": "social",
            "cooldown": 6,
            "choices": [
                {
                    "id": "go",
                    "label": "Go (-$400, +8 happiness)",
                    "effects": {"savings": -400, "happiness": 8},
                    "log": "You went to the wedding and had a great time.",
                },
                {
                    "id": "gift",
                    "label": "Send a gift (-$80, -2 happiness)",
                    "effects": {"savings": -80, "happiness": -2},
                    "log": "You sent a gift and a video message.",
                },
            ],
        },
        {
            "id": "certification",
            "title": "Certification Course",
            "description": "An online course could lead to a raise.",
            "tag": "career",
            "weight": 2,
            "cooldown": 6,
            "choices": [
                {
                    "id": "enroll",
                    "label": "Enroll (+$100 fixed expenses, +$250 income, +4 stress)",
                    "effects": {"fixedExpenses": 100, "income": 250, "stress": 4},
                    "log": "You enrolled and your new skills paid off.",
                },
                {"id": "skip", "label": "Not now", "effects": {}, "log": "You skipped the course."},
            ],
        },
    ],
    "goal": {
        "description": "Build a $3,000 emergency fund.",
        "winCondition": {"stat": "savings", "operator": ">=", "value": 3000},
    },
}


@dataclass
class FakeDeckProvider:
    """Deterministic provider for tests (no LLM)."""

    def status(self) -> ProviderStatus:
        return ProviderStatus(True, "fake", "fake-deck")

    def generate_event_deck(self, *, prompt: str, **_: Any) -> Tuple[EventDeck, str]:
        return deck_from_llm(FAKE_DECK), "<fake>"


def run_headless_sim(months: int = 12, scenario_id: str = "classic", seed: int = 123, choice_index: int = 0) -> Dict[str, Any]:
    """Run a deterministic simulation and return summary.

    Each month picks choice `choice_index` (clamped to the event's choices).
    Stops early when the game is over.
    """
    cfg = EngineConfig(base_seed=seed, scenario_id=scenario_id)
    session = GameSession(config=cfg)

    if session.state is not None and session.state.scenario_id == "custom":
        deck, _ = FakeDeckProvider().generate_event_deck(prompt="")
        session.start_custom(CustomProfile(), deck)

    initial = session.state
    for _ in range(months):
        ev = session.current_event
        if ev is None or session.state is None or session.state.game_over:
            break
        choice = ev.choices[min(choice_index, len(ev.choices) - 1)]
        session.choose(choice.id)
        if session.state.game_over:
            break
        session.next_month()

    return {
        "months": months,
        "final": session.state,
        "outcome": session.outcome(),
        "logs": session.turn_logs,
        "export": session_run_export(session, initial),
    }


def main() -> None:
    res = run_headless_sim()
    print(dumps_run_export(res["export"]))
    print("Final stats:", asdict(res["final"].stats))
    print("Outcome:", res["outcome"])


if __name__ == "__main__":
    main()
