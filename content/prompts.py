"""content.prompts

Prompt builders for the event-deck generation layer.

The model only writes content (events, choices, effect deltas, a goal).
Selection, cooldowns and the monthly economy stay in core.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from core.events import EVENT_TAGS
from core.goals import WIN_OPERATORS, WIN_STATS

EFFECT_STATS = ["budget", "impulse", "savings", "debt", "income", "fixedExpenses", "happiness", "stress"]


def build_event_deck_prompt(profile: Mapping[str, Any], *, event_count: int = 8) -> str:
    """Build the deck-generation prompt. The model MUST output ONLY JSON."""

    tags = "|".join(EVENT_TAGS)
    stats = "|".join(WIN_STATS)
    ops = "|".join(WIN_OPERATORS)
    effect_keys = ", ".join(f"{k}?: number" for k in EFFECT_STATS)
    profile_json = json.dumps(dict(profile), ensure_ascii=False, sort_keys=True)

    return f"""
You are a game content designer for a month-by-month personal finance simulator.

Player profile (JSON): {profile_json}

Task:
1) Write {int(event_count)} events tailored to the profile (knowledge, risk tolerance, region, income, savings, debt, goals).
2) Each event has 2-3 choices. Each choice has a small, realistic effect delta:
   savings +/- 50..500, impulse +/- 1..10, income/fixedExpenses +/- 50..300, happiness/stress +/- 1..10.
3) Use a variety of tags and give every event a cooldown (months) to avoid repeats.
4) For each choice add "explain": 1-2 short plain sentences, cause -> effect. No Markdown.
5) Write one goal: a one-sentence description plus a realistic, achievable winCondition.

OUTPUT: ONLY JSON (no prose, no markdown, no backticks).

JSON SCHEMA:
{{
  "events": [
    {{
      "id": "kebab-case-unique-id",
      "title": "string",
      "description": "string",
      "tag": "{tags}",
      "weight": 1,
      "cooldown": 3,
      "choices": [
        {{
          "id": "string",
          "label": "string",
          "effects": {{ {effect_keys} }},
          "log": "string (what happened)",
          "explain": "string"
        }}
      ]
    }}
  ],
  "goal": {{
    "description": "string",
    "winCondition": {{ "stat": "{stats}", "operator": "{ops}", "value": 0 }}
  }}
}}
""".strip()


def build_json_repair_prompt(broken_text: str) -> str:
    broken_text = str(broken_text or "")
    return f"""The text below contains broken JSON. Return ONLY valid JSON.
- No comments, no markdown.
- Do not rename fields; only fix syntax.
- Fix missing commas, quotes and brackets.

BROKEN TEXT:
{broken_text}
""".strip()
