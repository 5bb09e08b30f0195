# core/inputs.py
from __future__ import annotations

import math
from typing import Any, Optional


def parse_number(text: Any, default: float = 0.0) -> float:
    """
    Tolerant numeric parse for form fields.

    Grouping commas and surrounding spaces are ignored; empty, unparseable
    or non-finite input yields ``default``.
    """
    if isinstance(text, bool):
        return default
    if isinstance(text, (int, float)):
        n = float(text)
        return n if math.isfinite(n) else default
    clean = str(text or "").replace(",", "").strip()
    if clean == "":
        return default
    try:
        n = float(clean)
    except ValueError:
        return default
    return n if math.isfinite(n) else default


def is_number(text: Any) -> bool:
    clean = str(text or "").replace(",", "").strip()
    if clean == "":
        return False
    try:
        return math.isfinite(float(clean))
    except ValueError:
        return False


def clamp(v: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, v))


def clamp0(n: Optional[float]) -> float:
    """NaN, None and negatives become zero."""
    if n is None:
        return 0.0
    try:
        n = float(n)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(n) or n < 0:
        return 0.0
    return n


def clamp_int(text: Any, lo: int = 0, hi: Optional[int] = None) -> int:
    try:
        n = int(str(text or "0").strip() or "0")
    except ValueError:
        n = lo
    n = max(lo, n)
    return min(n, hi) if hi is not None else n
