"""content.providers.gemini

Gemini provider for custom event decks.

- Supports google-genai (preferred) and google-generativeai (legacy).
- Returns a validated EventDeck or raises a helpful error.

This provider is UI-agnostic (no Streamlit dependency).
Secrets/env loading is done in the Streamlit app.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..parsing import try_parse_json
from ..prompts import build_json_repair_prompt
from ..schemas import EventDeck, deck_from_llm
from .base import ProviderStatus

MODEL_CANDIDATES = [
    "gemini-2.5-flash",
    "gemini-2.0-flash",
    "gemini-2.5-pro",
    "gemini-1.5-flash",
]


@dataclass
class GeminiProvider:
    api_keys: List[str]

    # runtime
    backend: str = "none"  # genai | legacy | none
    model_in_use: str = ""
    last_error: str = ""

    _client: Any = None
    _legacy: Any = None

    def __post_init__(self) -> None:
        self.api_keys = [k.strip() for k in (self.api_keys or []) if str(k).strip()]
        self._init_backend()

    @staticmethod
    def from_api_key_string(raw: str) -> "GeminiProvider":
        """Accept a single key or a comma-separated list (rotated on failure)."""
        if not raw:
            return GeminiProvider([])
        return GeminiProvider([x.strip() for x in str(raw).split(",") if x.strip()])

    def _init_backend(self) -> None:
        self._client = None
        self._legacy = None
        self.backend = "none"
        self.model_in_use = ""

        if not self.api_keys:
            self.last_error = "No API key configured."
            return

        try:
            from google import genai  # type: ignore

            self._client = genai.Client(api_key=self.api_keys[0])
            self.backend = "genai"
            self.model_in_use = MODEL_CANDIDATES[0]
            self.last_error = ""
            return
        except Exception as e:
            self.last_error = f"google-genai unavailable: {e}"

        try:
            import google.generativeai as genai_legacy  # type: ignore

            genai_legacy.configure(api_key=self.api_keys[0])
            self._legacy = genai_legacy
            self.backend = "legacy"
            self.model_in_use = MODEL_CANDIDATES[0]
            self.last_error = ""
        except Exception as e:
            self.backend = "none"
            self.last_error = f"google-generativeai unavailable: {e}"

    def status(self) -> ProviderStatus:
        if self.backend == "none":
            return ProviderStatus(False, "none", "", error=str(self.last_error or ""))
        return ProviderStatus(True, self.backend, self.model_in_use)

    def _rotate_key(self) -> None:
        if len(self.api_keys) <= 1:
            return
        self.api_keys = self.api_keys[1:] + self.api_keys[:1]
        self._init_backend()

    def _call_genai(self, model: str, prompt: str, cfg: Dict[str, Any]) -> str:
        try:
            resp = self._client.models.generate_content(
                model=model, contents=prompt, config={**cfg, "response_mime_type": "application/json"}
            )
        except TypeError:
            resp = self._client.models.generate_content(model=model, contents=prompt, config=cfg)
        return (getattr(resp, "text", "") or "").strip()

    def _call_legacy(self, model: str, prompt: str, cfg: Dict[str, Any]) -> str:
        m = self._legacy.GenerativeModel(model)
        try:
            resp = m.generate_content(prompt, generation_config={**cfg, "response_mime_type": "application/json"})
        except Exception:
            resp = m.generate_content(prompt, generation_config=cfg)
        return (getattr(resp, "text", "") or "").strip()

    def _generate_text(self, prompt: str, temperature: float, max_output_tokens: int) -> str:
        cfg: Dict[str, Any] = {"temperature": float(temperature), "max_output_tokens": int(max_output_tokens)}
        last_err: Optional[Exception] = None

        for _ in range(max(1, len(self.api_keys))):
            call = None
            if self.backend == "genai" and self._client is not None:
                call = self._call_genai
            elif self.backend == "legacy" and self._legacy is not None:
                call = self._call_legacy

            if call is not None:
                for m in MODEL_CANDIDATES:
                    try:
                        txt = call(m, prompt, cfg)
                    except Exception as e:
                        last_err = e
                        continue
                    if txt:
                        self.model_in_use = m
                        return txt

            self._rotate_key()

        raise RuntimeError(f"Gemini error: {last_err}" if last_err else "Gemini returned no response.")

    def _parse_deck(self, raw: str) -> EventDeck:
        res = try_parse_json(raw)
        if res.data is None:
            raise ValueError(res.error or "Could not parse JSON")
        return deck_from_llm(res.data)

    def generate_event_deck(
        self,
        *,
        prompt: str,
        temperature: float = 0.8,
        max_output_tokens: int = 4000,
        repair_on_fail: bool = True,
    ) -> Tuple[EventDeck, str]:
        """Generate and validate an EventDeck.

        Strategy:
        1) Try main prompt.
        2) If the output is not parseable JSON and repair_on_fail is True, run one repair pass.
        Malformed events inside valid JSON are dropped by deck_from_llm, not retried.
        """
        if self.backend == "none":
            raise RuntimeError(self.last_error or "Gemini is not configured.")

        raw = self._generate_text(prompt, temperature=temperature, max_output_tokens=max_output_tokens)
        try:
            return self._parse_deck(raw), raw
        except ValueError as e:
            self.last_error = f"{type(e).__name__}: {e}"
            if not repair_on_fail:
                raise

        raw2 = self._generate_text(build_json_repair_prompt(raw), temperature=0.1, max_output_tokens=max_output_tokens + 300)
        return self._parse_deck(raw2), raw2
