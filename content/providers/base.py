"""content.providers.base

Provider interfaces.

A provider's job is to produce an EventDeck (custom events + goal) from a prompt.
The engine loads the deck into the session's custom catalog.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Tuple

from ..schemas import EventDeck


@dataclass(frozen=True)
class ProviderStatus:
    ok: bool
    backend: str
    model: str
    note: str = ""
    error: str = ""


class DeckProvider(Protocol):
    def status(self) -> ProviderStatus: ...

    def generate_event_deck(
        self,
        *,
        prompt: str,
        temperature: float = 0.8,
        max_output_tokens: int = 4000,
        repair_on_fail: bool = True,
    ) -> Tuple[EventDeck, str]:
        """Return (deck, raw_text_used)."""
        ...
