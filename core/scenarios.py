"""
core.scenarios
Scenario specifications (starting presets + goal blurbs).

Kept in core so balancing lives in one place, but UI can still display labels.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Optional

from .state import StatVector

SCENARIO_IDS = ("classic", "student", "startup", "custom")


@dataclass(frozen=True)
class ScenarioSpec:
    key: str
    title: str
    desc: str
    start: StatVector


def _preset(*, impulse: float, savings: float, debt: float, income: float, fixed_expenses: float, happiness: float, stress: float) -> StatVector:
    return StatVector(
        month=1,
        budget=0,
        impulse=impulse,
        savings=savings,
        debt=debt,
        income=income,
        fixed_expenses=fixed_expenses,
        happiness=happiness,
        stress=stress,
    ).with_budget()


DEFAULT_SCENARIOS: Dict[str, ScenarioSpec] = {
    "classic": ScenarioSpec(
        key="classic",
        title="Classic",
        desc="Steady job, modest savings. Learn to tame impulse spending.",
        start=_preset(impulse=30, savings=1000, debt=0, income=2500, fixed_expenses=1800, happiness=60, stress=40),
    ),
    "student": ScenarioSpec(
        key="student",
        title="Student",
        desc="Part-time income and a student loan.",
        start=_preset(impulse=35, savings=300, debt=12000, income=900, fixed_expenses=800, happiness=65, stress=50),
    ),
    "startup": ScenarioSpec(
        key="startup",
        title="Startup",
        desc="Low founder salary, high burn, some cash in the bank.",
        start=_preset(impulse=45, savings=2000, debt=0, income=1200, fixed_expenses=1500, happiness=70, stress=55),
    ),
    "custom": ScenarioSpec(
        key="custom",
        title="Custom (AI)",
        desc="Events and goal generated from your financial profile.",
        # Overridden from the profile in stats_from_profile().
        start=_preset(impulse=30, savings=1000, debt=0, income=2500, fixed_expenses=1800, happiness=60, stress=40),
    ),
}


def normalize_scenario_id(scenario_id: Optional[str]) -> str:
    sid = str(scenario_id or "").strip().lower()
    return sid if sid in DEFAULT_SCENARIOS else "classic"


def get_scenario_spec(scenario_id: Optional[str]) -> ScenarioSpec:
    return DEFAULT_SCENARIOS[normalize_scenario_id(scenario_id)]


def initial_stats_for_scenario(scenario_id: Optional[str]) -> StatVector:
    return get_scenario_spec(scenario_id).start


RISK_IMPULSE: Dict[str, float] = {"low": 25, "medium": 40, "high": 60}


@dataclass(frozen=True)
class CustomProfile:
    """Player-submitted profile for the custom scenario."""

    knowledge: str = "beginner"
    risk: str = "medium"
    region: str = "US"
    income: Optional[float] = 2500
    savings: Optional[float] = 1000
    debt: Optional[float] = 0
    fixed_expenses: Optional[float] = None
    goals: str = "save more"

    def to_dict(self) -> Dict[str, object]:
        return {
            "knowledge": self.knowledge,
            "risk": self.risk,
            "region": self.region,
            "income": self.income,
            "savings": self.savings,
            "debt": self.debt,
            "fixedExpenses": self.fixed_expenses,
            "goals": self.goals,
        }


def stats_from_profile(profile: CustomProfile) -> StatVector:
    """Classic preset with income/savings/debt/fixed_expenses/impulse taken from the profile.

    A field left as None keeps the classic value; an explicit 0 is honoured.
    """
    base = DEFAULT_SCENARIOS["classic"].start
    s = replace(
        base,
        income=base.income if profile.income is None else profile.income,
        savings=base.savings if profile.savings is None else profile.savings,
        debt=base.debt if profile.debt is None else profile.debt,
        fixed_expenses=base.fixed_expenses if profile.fixed_expenses is None else profile.fixed_expenses,
        impulse=RISK_IMPULSE.get(str(profile.risk).strip().lower(), RISK_IMPULSE["medium"]),
    )
    return s.with_budget()
