"""engine.session

One player's game: state, custom catalog, random source, current event.

The custom catalog lives here (not in a module global) so that several
sessions, or tests, never see each other's generated decks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from content.schemas import EventDeck, events_from_llm
from core.events import EventCatalog, EventChoice, GameEvent
from core.goals import CheckResult, check_lose, check_win, default_goal
from core.rng import RandomSource, rng_from
from core.scenarios import CustomProfile, get_scenario_spec, initial_stats_for_scenario, normalize_scenario_id, stats_from_profile
from core.selector import pick_event
from core.state import GameState, state_from_dict, state_to_dict

from .config import EngineConfig
from .pipeline import advance_month, apply_choice

SAVE_VERSION = 1


@dataclass
class GameSession:
    config: EngineConfig = field(default_factory=EngineConfig)
    catalog: EventCatalog = field(default_factory=EventCatalog)
    rng: Optional[RandomSource] = None

    state: Optional[GameState] = None
    current_event: Optional[GameEvent] = None
    choice_made: Optional[EventChoice] = None
    turn_logs: List[Dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.rng is None and self.config.base_seed is not None:
            self.rng = rng_from("session", base_seed=int(self.config.base_seed))
        if self.state is None:
            self.new_game(self.config.scenario_id)
        elif self.current_event is None:
            self.current_event = pick_event(self.state, self.catalog, self.rng)

    # -------------------------
    # Lifecycle
    # -------------------------

    def new_game(self, scenario_id: Optional[str] = None) -> GameState:
        """Fresh stats from the scenario preset. The custom deck (if any) is kept."""
        sid = normalize_scenario_id(scenario_id)
        spec = get_scenario_spec(sid)
        if sid == "custom":
            first = "Custom (AI) scenario selected. Fill the survey to generate events."
        else:
            first = f"Scenario set to {sid}. Goal: {default_goal(sid).description}"
        self.state = GameState(
            stats=initial_stats_for_scenario(sid),
            scenario_id=spec.key,
            log=("Welcome to Centible Life!", first),
        )
        self._reset_turn()
        return self.state

    def start_custom(self, profile: CustomProfile, deck: EventDeck) -> GameState:
        """Load a generated deck and start a custom game from the player's profile."""
        self.catalog.set_custom_events(deck.events)
        goal = deck.goal
        self.state = GameState(
            stats=stats_from_profile(profile),
            scenario_id="custom",
            log=(f"Loaded {len(deck.events)} AI events",),
            goal_description=goal.description if goal else None,
            win_condition=goal.win_condition.to_dict() if goal and goal.win_condition else None,
        )
        self._reset_turn()
        return self.state

    def _reset_turn(self) -> None:
        self.turn_logs = []
        self.choice_made = None
        self.current_event = pick_event(self._require_state(), self.catalog, self.rng)

    def _require_state(self) -> GameState:
        if self.state is None:
            raise ValueError("No game in progress")
        return self.state

    # -------------------------
    # Turns
    # -------------------------

    def choose(self, choice_id: str) -> EventChoice:
        state = self._require_state()
        if state.game_over:
            raise ValueError("Game is over; start a new game")
        if self.choice_made is not None:
            raise ValueError("A choice was already made this month")
        if self.current_event is None:
            raise ValueError("No event to choose from")

        new_state, log = apply_choice(
            state=state,
            event=self.current_event,
            choice_id=choice_id,
            max_log_entries=self.config.max_log_entries,
        )
        choice = self.current_event.get_choice(choice_id)
        self.state = new_state
        self.choice_made = choice
        self.turn_logs.append(log)
        return choice  # type: ignore[return-value]

    def next_month(self) -> GameEvent:
        state = self._require_state()
        if state.game_over:
            raise ValueError("Game is over; start a new game")
        if self.choice_made is None:
            raise ValueError("Make a choice before advancing the month")

        new_state, event, log = advance_month(
            state=state,
            catalog=self.catalog,
            rng=self.rng,
            max_log_entries=self.config.max_log_entries,
        )
        self.state = new_state
        self.current_event = event
        self.choice_made = None
        self.turn_logs.append(log)
        return event

    def outcome(self) -> Dict[str, Any]:
        state = self._require_state()
        win: CheckResult = check_win(state)
        lose: CheckResult = check_lose(state.stats)
        return {
            "won": win.done,
            "lost": lose.done,
            "game_over": state.game_over,
            "message": lose.message if lose.done else win.message,
            "goal": state.goal_description or default_goal(state.scenario_id).description,
        }

    # -------------------------
    # Save / restore
    # -------------------------

    def to_dict(self) -> Dict[str, Any]:
        state = self._require_state()
        return {
            "version": SAVE_VERSION,
            "state": state_to_dict(state),
            "custom_loaded": bool(self.catalog.custom_events),
            "custom_events": [e.to_dict() for e in self.catalog.generated_events],
            "current_event_id": self.current_event.id if self.current_event else None,
            "choice_made_id": self.choice_made.id if self.choice_made else None,
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any], config: Optional[EngineConfig] = None, rng: Optional[RandomSource] = None) -> "GameSession":
        """Rebuild a session from to_dict() output (structural events are re-injected)."""
        catalog = EventCatalog()
        if data.get("custom_loaded"):
            catalog.set_custom_events(events_from_llm(data.get("custom_events")))
        state = state_from_dict(data.get("state") or {})

        current = None
        event_id = data.get("current_event_id")
        if event_id:
            current = next((e for e in catalog.events_for(state.scenario_id) if e.id == event_id), None)

        session = GameSession(
            config=config or EngineConfig(scenario_id=state.scenario_id),
            catalog=catalog,
            rng=rng,
            state=state,
            current_event=current,
        )
        choice_id = data.get("choice_made_id")
        if current is not None and choice_id:
            session.choice_made = current.get_choice(str(choice_id))
        return session
