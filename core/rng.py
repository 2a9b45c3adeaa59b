"""
core.rng
Random sources for the selector and the monthly tick.

Goal:
- Core functions accept any object with random() -> float in [0, 1).
- Same (base_seed + inputs) => same Random stream across platforms & runs.
"""

from __future__ import annotations

import hashlib
import json
import random
from typing import Any, Optional, Protocol


class RandomSource(Protocol):
    def random(self) -> float: ...


def default_source(rng: Optional[RandomSource] = None) -> RandomSource:
    """Return `rng`, or the process-wide `random` module when none is injected."""
    return rng if rng is not None else random  # type: ignore[return-value]


def stable_int_seed(*parts: Any, salt: str = "centible-life") -> int:
    """Return a stable 32-bit integer seed derived from arbitrary inputs.

    Uses SHA-256 over a canonical JSON representation of `parts`, so it does
    not depend on Python's randomized hash().
    """
    payload = json.dumps(parts, sort_keys=True, ensure_ascii=False, separators=(",", ":"), default=str)
    h = hashlib.sha256((salt + "|" + payload).encode("utf-8")).digest()
    return int.from_bytes(h[:4], "big", signed=False)


def rng_from(*parts: Any, base_seed: int) -> random.Random:
    """Create a Random instance from (base_seed + parts)."""
    seed = stable_int_seed(base_seed, *parts)
    return random.Random(seed)
