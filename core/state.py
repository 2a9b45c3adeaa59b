"""
core.state
Core domain data models (UI/LLM independent).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


# Wire names (camelCase) used by saved games and the generation service.
STAT_ALIASES: Dict[str, str] = {
    "fixedExpenses": "fixed_expenses",
}


def canonical_stat(name: str) -> str:
    return STAT_ALIASES.get(name, name)


@dataclass(frozen=True)
class StatVector:
    """Player's financial and emotional snapshot for one month.

    `budget` is derived (income - fixed_expenses) and is recomputed by every
    operation that produces a new vector. happiness/stress/impulse are
    conventionally 0..100; only the monthly tick clamps them.
    """

    month: int
    budget: float
    impulse: float           # 0..100
    savings: float
    debt: float
    income: float
    fixed_expenses: float
    happiness: float         # 0..100
    stress: float            # 0..100

    def with_budget(self) -> "StatVector":
        return replace(self, budget=self.income - self.fixed_expenses)


STAT_KEYS: Tuple[str, ...] = tuple(f.name for f in fields(StatVector) if f.name != "month")


@dataclass(frozen=True)
class EffectDelta:
    """Sparse signed delta over the stat vector. None means "no effect"."""

    budget: Optional[float] = None
    impulse: Optional[float] = None
    savings: Optional[float] = None
    debt: Optional[float] = None
    income: Optional[float] = None
    fixed_expenses: Optional[float] = None
    happiness: Optional[float] = None
    stress: Optional[float] = None

    @staticmethod
    def from_mapping(d: Mapping[str, Any]) -> "EffectDelta":
        values: Dict[str, float] = {}
        for k, v in dict(d or {}).items():
            key = canonical_stat(str(k))
            if key not in STAT_KEYS:
                raise ValueError(f"Unknown stat in effects: {k!r}")
            if v is None:
                continue
            values[key] = v
        return EffectDelta(**values)

    def items(self) -> Iterator[Tuple[str, float]]:
        for f in fields(self):
            v = getattr(self, f.name)
            if v is not None:
                yield f.name, v

    def to_dict(self) -> Dict[str, float]:
        return dict(self.items())

    def is_empty(self) -> bool:
        return not any(True for _ in self.items())


@dataclass(frozen=True)
class GameState:
    """Everything the selector and the UI need between turns.

    - stats: current StatVector
    - log: narrative history
    - last_event_id / last_tag: the most recently committed event
    - last_seen: event id -> month it was committed (cooldown bookkeeping)
    """

    stats: StatVector
    scenario_id: str = "classic"
    log: Tuple[str, ...] = ()
    last_event_id: Optional[str] = None
    last_tag: Optional[str] = None
    last_seen: Dict[str, int] = field(default_factory=dict)
    game_over: bool = False
    goal_description: Optional[str] = None
    win_condition: Optional[Dict[str, Any]] = None


def stats_to_dict(s: StatVector) -> Dict[str, float]:
    return asdict(s)


def stats_from_mapping(d: Any) -> StatVector:
    """Bridge helper for dict-based stats (saved games, camelCase or snake_case).

    A non-mapping input is treated as empty.
    """
    src = {canonical_stat(str(k)): v for k, v in d.items()} if isinstance(d, Mapping) else {}
    s = StatVector(
        month=int(src.get("month", 1)),
        budget=0,
        impulse=src.get("impulse", 30),
        savings=src.get("savings", 0),
        debt=src.get("debt", 0),
        income=src.get("income", 0),
        fixed_expenses=src.get("fixed_expenses", 0),
        happiness=src.get("happiness", 60),
        stress=src.get("stress", 40),
    )
    return s.with_budget()


def state_to_dict(state: GameState) -> Dict[str, Any]:
    return {
        "stats": stats_to_dict(state.stats),
        "scenario_id": state.scenario_id,
        "log": list(state.log),
        "last_event_id": state.last_event_id,
        "last_tag": state.last_tag,
        "last_seen": dict(state.last_seen),
        "game_over": bool(state.game_over),
        "goal_description": state.goal_description,
        "win_condition": dict(state.win_condition) if state.win_condition else None,
    }


def state_from_dict(d: Any) -> GameState:
    if not isinstance(d, Mapping):
        d = {}
    raw_seen = d.get("last_seen")
    last_seen: Dict[str, int] = {}
    for k, v in (raw_seen.items() if isinstance(raw_seen, Mapping) else ()):
        try:
            last_seen[str(k)] = int(v)
        except (TypeError, ValueError, OverflowError):
            continue
    raw_log = d.get("log")
    wc = d.get("win_condition")
    return GameState(
        stats=stats_from_mapping(d.get("stats")),
        scenario_id=str(d.get("scenario_id") or "classic"),
        log=tuple(str(x) for x in raw_log) if isinstance(raw_log, (list, tuple)) else (),
        last_event_id=d.get("last_event_id"),
        last_tag=d.get("last_tag"),
        last_seen=last_seen,
        game_over=bool(d.get("game_over", False)),
        goal_description=d.get("goal_description"),
        win_condition=dict(wc) if isinstance(wc, Mapping) else None,
    )
