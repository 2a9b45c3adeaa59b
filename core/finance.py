"""
core.finance
End-of-month tick: impulse spending, cash-flow settlement, interest, mood drift.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import List, Optional

from .rng import RandomSource, default_source
from .state import StatVector, clamp

IMPULSE_MAX_PROB = 0.4
IMPULSE_BASE_SPEND = 10
DEBT_INTEREST_RATE = 0.01      # monthly
SAVINGS_INTEREST_RATE = 0.002  # monthly


@dataclass(frozen=True)
class TickResult:
    stats: StatVector
    logs: List[str]


def round_half_up(x: float) -> int:
    """Nearest integer, halves toward +infinity (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(x + 0.5))


def money(x: float) -> str:
    if float(x).is_integer():
        return str(int(x))
    return f"{x:g}"


def impulse_probability(impulse: float) -> float:
    return min(IMPULSE_MAX_PROB, impulse / 100 * IMPULSE_MAX_PROB)


def end_of_period_tick(prev: StatVector, rng: Optional[RandomSource] = None) -> TickResult:
    """Advance exactly one month (pure except for `rng`)."""
    src = default_source(rng)
    logs: List[str] = []

    variable_spend = 0
    if src.random() < impulse_probability(prev.impulse):
        swing = prev.impulse * 2
        variable_spend = round_half_up(IMPULSE_BASE_SPEND + src.random() * swing)
        logs.append(f"Impulse spending this period: -${money(variable_spend)}")

    net = prev.income - prev.fixed_expenses - variable_spend
    savings = prev.savings
    debt = prev.debt

    if net >= 0:
        savings += net
        logs.append(f"Positive cash flow: +${money(net)} to savings")
    else:
        deficit = -net
        if savings >= deficit:
            savings -= deficit
            logs.append(f"Covered deficit from savings: -${money(deficit)}")
        else:
            new_debt = deficit - savings
            savings = 0
            debt += new_debt
            logs.append(f"Deficit led to new debt: +${money(new_debt)}")

    if debt > 0:
        interest = round_half_up(debt * DEBT_INTEREST_RATE)
        debt += interest
        if interest > 0:
            logs.append(f"Debt interest: +${money(interest)}")
    if savings > 0:
        interest = round_half_up(savings * SAVINGS_INTEREST_RATE)
        savings += interest
        if interest > 0:
            logs.append(f"Savings interest: +${money(interest)}")

    ok = net >= 0
    nxt = replace(
        prev,
        month=prev.month + 1,
        budget=prev.income - prev.fixed_expenses,
        savings=savings,
        debt=debt,
        happiness=clamp(prev.happiness + (1 if ok else -2), 0, 100),
        stress=clamp(prev.stress + (-1 if ok else 3), 0, 100),
        impulse=clamp(prev.impulse - 1, 0, 100),
    )
    return TickResult(stats=nxt, logs=logs)
