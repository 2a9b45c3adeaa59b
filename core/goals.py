"""
core.goals
Scenario goals and win/lose predicates over the stat vector.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .state import GameState, StatVector, canonical_stat

WIN_STATS = ("savings", "debt", "income", "impulse", "stress", "happiness", "fixedExpenses")
WIN_OPERATORS = ("<", "<=", ">", ">=")


@dataclass(frozen=True)
class WinCondition:
    stat: str
    operator: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"stat": self.stat, "operator": self.operator, "value": self.value}

    @staticmethod
    def from_mapping(d: Mapping[str, Any]) -> "WinCondition":
        stat = str(d.get("stat") or "")
        if stat == "fixed_expenses":
            stat = "fixedExpenses"
        if stat not in WIN_STATS:
            raise ValueError(f"winCondition.stat invalid: {stat!r}")
        op = str(d.get("operator") or "")
        if op not in WIN_OPERATORS:
            raise ValueError(f"winCondition.operator invalid: {op!r}")
        return WinCondition(stat=stat, operator=op, value=float(d.get("value")))


@dataclass(frozen=True)
class ScenarioGoal:
    description: str
    win_condition: Optional[WinCondition] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "winCondition": self.win_condition.to_dict() if self.win_condition else None,
        }


DEFAULT_GOALS: Dict[str, ScenarioGoal] = {
    "classic": ScenarioGoal("Become wiser with spending."),
    "student": ScenarioGoal("Pay off your student debt without burning out."),
    "startup": ScenarioGoal("Make your startup financially stable."),
    "custom": ScenarioGoal("Follow your custom financial journey."),
}


def default_goal(scenario_id: str) -> ScenarioGoal:
    return DEFAULT_GOALS.get(scenario_id, DEFAULT_GOALS["classic"])


def evaluate_win_condition(stats: StatVector, cond: WinCondition) -> bool:
    current = getattr(stats, canonical_stat(cond.stat))
    if cond.operator == "<":
        return current < cond.value
    if cond.operator == "<=":
        return current <= cond.value
    if cond.operator == ">":
        return current > cond.value
    if cond.operator == ">=":
        return current >= cond.value
    return False


@dataclass(frozen=True)
class CheckResult:
    done: bool
    message: Optional[str] = None


def check_win(state: GameState) -> CheckResult:
    s = state.stats
    desc = state.goal_description
    sid = state.scenario_id

    if sid == "classic":
        if s.impulse < 10:
            return CheckResult(True, desc or "You kept your impulse under 10 and became wiser with spending.")
    elif sid == "student":
        if s.debt <= 0 and s.stress < 80:
            return CheckResult(True, desc or "You paid off your student debt without burning out.")
    elif sid == "startup":
        if s.income > s.debt:
            return CheckResult(True, desc or "Your startup income surpassed your debt and became more stable.")
    elif sid == "custom" and state.win_condition:
        try:
            cond = WinCondition.from_mapping(state.win_condition)
        except (TypeError, ValueError):
            return CheckResult(False)
        if evaluate_win_condition(s, cond):
            return CheckResult(True, desc or "You achieved your custom goal.")

    return CheckResult(False)


def check_lose(stats: StatVector) -> CheckResult:
    if stats.debt > 4 * stats.income:
        return CheckResult(True, "Your debt has grown beyond four times your income and is no longer sustainable.")
    if stats.stress > 95:
        return CheckResult(True, "Your stress has reached a critical level and your wellbeing is at risk.")
    return CheckResult(False)
