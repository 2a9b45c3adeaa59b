"""engine.persistence

Best-effort local save slot.

The whole session is one JSON document stored under a fixed key
(<storage_dir>/centible_game_v1.json). load() returns None when the slot is
empty or unreadable and never raises.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

STORAGE_KEY = "centible_game_v1"


class GameStore:
    def __init__(self, directory: Union[str, Path] = ".centible", key: str = STORAGE_KEY) -> None:
        self.directory = Path(directory)
        self.key = key

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def save(self, document: Dict[str, Any]) -> bool:
        """Write atomically (tmp file + replace). Returns False on OS errors."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(".json.tmp")
            tmp.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError):
            return False
        return True

    def load(self) -> Optional[Dict[str, Any]]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None
        if not raw.strip():
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            return None
        return data if isinstance(data, dict) else None

    def clear(self) -> None:
        try:
            self.path.unlink()
        except OSError:
            pass
