"""content.parsing

Tolerant JSON parsing for model output (event decks).

We never execute model text. Cleanup steps only:
- strip ``` fences
- cut to the outermost {...} block
- straighten smart quotes
- escape raw newlines inside string literals
- drop trailing commas
then json.loads, with an ast.literal_eval fallback for Python-ish literals.
"""

from __future__ import annotations

import ast
import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ParseResult:
    data: Optional[Dict[str, Any]]
    raw: str
    cleaned: str
    error: str = ""


_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_SMART_QUOTES = str.maketrans({"\u201c": '"', "\u201d": '"', "\u2018": "'", "\u2019": "'", "\u00a0": " "})


def strip_code_fences(s: str) -> str:
    s = (s or "").strip()
    m = _FENCE_RE.search(s)
    return (m.group(1) or "").strip() if m else s


def extract_object(s: str) -> str:
    """Slice from the first '{' to the last '}' (best effort)."""
    s = (s or "").strip()
    start = s.find("{")
    if start < 0:
        return s
    end = s.rfind("}")
    return s[start:] if end <= start else s[start : end + 1]


def escape_newlines_in_strings(s: str) -> str:
    out = []
    quote = ""
    esc = False
    for ch in s or "":
        if not quote:
            if ch in ('"', "'"):
                quote = ch
            out.append(ch)
            continue
        if esc:
            esc = False
        elif ch == "\\":
            esc = True
        elif ch == quote:
            quote = ""
        elif ch == "\n":
            ch = "\\n"
        elif ch == "\r":
            ch = "\\r"
        out.append(ch)
    return "".join(out)


def clean_model_json(raw: str) -> str:
    s = extract_object(strip_code_fences(raw))
    s = s.translate(_SMART_QUOTES)
    s = escape_newlines_in_strings(s)
    return _TRAILING_COMMA_RE.sub(r"\1", s)


def try_parse_json(raw: str) -> ParseResult:
    """Best-effort parse. Returns ParseResult(data=None, error=...) on failure."""
    raw = (raw or "").strip()
    s = clean_model_json(raw)

    try:
        obj = json.loads(s)
    except ValueError as e:
        err = f"json.loads: {e}"
    else:
        if isinstance(obj, dict):
            return ParseResult(data=obj, raw=raw, cleaned=s)
        return ParseResult(data=None, raw=raw, cleaned=s, error="JSON root is not an object")

    py = re.sub(r"\btrue\b", "True", s)
    py = re.sub(r"\bfalse\b", "False", py)
    py = re.sub(r"\bnull\b", "None", py)
    try:
        obj = ast.literal_eval(py)
    except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError) as e:
        return ParseResult(data=None, raw=raw, cleaned=s, error=f"{err} | literal_eval: {type(e).__name__}: {e}")
    if not isinstance(obj, dict):
        return ParseResult(data=None, raw=raw, cleaned=s, error=f"literal_eval root is not an object; {err}")
    # normalize into JSON-serializable types
    return ParseResult(data=json.loads(json.dumps(obj, default=str)), raw=raw, cleaned=s)


def must_parse_json(raw: str) -> Dict[str, Any]:
    res = try_parse_json(raw)
    if res.data is None:
        raise ValueError(res.error or "JSON parse failed")
    return res.data
