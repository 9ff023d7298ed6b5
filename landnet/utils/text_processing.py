"""Text cleaning and coercion helpers for noisy generated payloads."""

from __future__ import annotations

import math
import re
import unicodedata
from typing import Any


def normalize_text(text: str) -> str:
    """Normalize unicode, collapse whitespace, strip."""
    text = unicodedata.normalize("NFKC", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def fold_keyword(text: str) -> str:
    """Lowercase and strip accents so "Álta" and "alta" compare equal."""
    decomposed = unicodedata.normalize("NFKD", normalize_text(text))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).lower()


def coerce_text(value: Any) -> str:
    """Free-text field from a generated payload; ``None`` and containers become ''."""
    if value is None or isinstance(value, (dict, list)):
        return ""
    return normalize_text(str(value))


def coerce_identifier(value: Any) -> str | None:
    """Identifier as a string; numbers are accepted since models emit ``1`` for ``"1"``."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, (str, int)):
        ident = str(value).strip()
        return ident or None
    return None


def coerce_int(value: Any) -> int | None:
    """Integer from an int, float or numeric string; anything else is ``None``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return round(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = re.search(r"-?\d+(?:[.,]\d+)?", value)
        if match:
            return round(float(match.group().replace(",", ".")))
    return None


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))
