"""engine.logging

Small helpers for storing run logs.

A run log is JSON-serializable so it can be exported/imported later.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from core.state import GameState, state_to_dict

from .session import GameSession

RUN_EXPORT_VERSION = 1


def make_run_export(
    *,
    seed: Optional[int],
    config: Dict[str, Any],
    initial_state: GameState,
    final_state: GameState,
    turn_logs: List[Dict[str, Any]],
) -> Dict[str, Any]:
    return {
        "version": RUN_EXPORT_VERSION,
        "seed": None if seed is None else int(seed),
        "config": dict(config),
        "initial_state": state_to_dict(initial_state),
        "final_state": state_to_dict(final_state),
        "turn_logs": list(turn_logs),
    }


def session_run_export(session: GameSession, initial_state: GameState) -> Dict[str, Any]:
    """Export a session run (config, first and last state, per-turn logs)."""
    return make_run_export(
        seed=session.config.base_seed,
        config=asdict(session.config),
        initial_state=initial_state,
        final_state=session.state,
        turn_logs=session.turn_logs,
    )


def dumps_run_export(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2, sort_keys=True)
