from __future__ import annotations

import itertools
from typing import Iterable

import pytest

from core.scenarios import initial_stats_for_scenario
from core.state import GameState


class SequenceRandom:
    """random() source that replays fixed values (cycling)."""

    def __init__(self, values: Iterable[float]) -> None:
        self._values = list(values)
        self._it = itertools.cycle(self._values)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return next(self._it)


@pytest.fixture
def seq_rng():
    return SequenceRandom


@pytest.fixture
def classic_state() -> GameState:
    return GameState(stats=initial_stats_for_scenario("classic"), scenario_id="classic")
