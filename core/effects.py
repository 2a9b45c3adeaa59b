"""
core.effects
Choice effects: add a sparse delta to the stat vector.

No clamping here. Effects may push impulse/happiness/stress outside 0..100
or savings below zero; the monthly tick is what normalizes mood stats.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Union

from .state import EffectDelta, StatVector

Effects = Union[EffectDelta, Mapping[str, Any]]


def as_delta(effects: Effects) -> EffectDelta:
    if isinstance(effects, EffectDelta):
        return effects
    return EffectDelta.from_mapping(effects or {})


def apply_effects(stats: StatVector, effects: Effects) -> StatVector:
    """Apply delta (pure function), then recompute budget from post-delta income/fixed_expenses."""
    delta = as_delta(effects)
    changes = {k: getattr(stats, k) + v for k, v in delta.items() if v}
    return replace(stats, **changes).with_budget()
