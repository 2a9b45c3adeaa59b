"""engine.config

Engine configuration passed from UI (or read from the environment).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from core.scenarios import normalize_scenario_id


@dataclass(frozen=True)
class EngineConfig:
    base_seed: Optional[int] = None      # None = process-wide random
    scenario_id: str = "classic"
    storage_dir: str = ".centible"
    max_log_entries: Optional[int] = None

    @staticmethod
    def from_env(env: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Read CENTIBLE_SEED / CENTIBLE_SCENARIO / CENTIBLE_STORAGE_DIR / CENTIBLE_MAX_LOG."""
        env = os.environ if env is None else env

        seed_raw = (env.get("CENTIBLE_SEED") or "").strip()
        max_log_raw = (env.get("CENTIBLE_MAX_LOG") or "").strip()
        try:
            seed = int(seed_raw) if seed_raw else None
        except ValueError:
            raise ValueError(f"CENTIBLE_SEED must be an integer, got {seed_raw!r}") from None
        try:
            max_log = int(max_log_raw) if max_log_raw else None
        except ValueError:
            raise ValueError(f"CENTIBLE_MAX_LOG must be an integer, got {max_log_raw!r}") from None

        return EngineConfig(
            base_seed=seed,
            scenario_id=normalize_scenario_id(env.get("CENTIBLE_SCENARIO")),
            storage_dir=(env.get("CENTIBLE_STORAGE_DIR") or ".centible").strip(),
            max_log_entries=max_log,
        )
