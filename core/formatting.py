# core/formatting.py
"""
Display formatting for calculator results.

All helpers are pure with respect to the numeric value: formatting never
changes the underlying result, and non-finite input renders a placeholder
instead of raising. Grouping and decimal separators come from ``QLocale``
(the system locale unless one is passed in).
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from PySide6.QtCore import QLocale

PLACEHOLDER = "—"

MIN_PRECISION = 0
MAX_PRECISION = 12
DEFAULT_PRECISION = 6

# normal mode escalates to scientific outside this window
SCI_UPPER = 1e12
SCI_LOWER = 1e-6

COMPACT_MAX_FRACTION = 6
SUFFIXES = ("", "K", "M", "B", "T")

MONEY_SUFFIX_THRESHOLD = 9_999_999


class FormatMode(str, Enum):
    NORMAL = "normal"
    COMPACT = "compact"
    SCIENTIFIC = "scientific"

    @classmethod
    def coerce(cls, value: Any, default: Optional["FormatMode"] = None) -> "FormatMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            if default is None:
                raise
            return default

    @classmethod
    def parse(cls, value: Any) -> Optional["FormatMode"]:
        """Exact-match lookup used by the URL codec; None when unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


def clamp_precision(precision: Any) -> int:
    try:
        p = int(precision)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_PRECISION
    return max(MIN_PRECISION, min(MAX_PRECISION, p))


@dataclass
class DisplaySettings:
    """How a result is rendered; never affects the numeric value."""
    format_mode: FormatMode = FormatMode.NORMAL
    precision: int = DEFAULT_PRECISION

    def __post_init__(self):
        self.format_mode = FormatMode.coerce(self.format_mode, FormatMode.NORMAL)
        self.precision = clamp_precision(self.precision)

    def to_dict(self) -> dict:
        return {"fmt": self.format_mode.value, "p": self.precision}

    @staticmethod
    def from_dict(data: Any) -> "DisplaySettings":
        if not isinstance(data, dict):
            return DisplaySettings()
        return DisplaySettings(
            format_mode=FormatMode.coerce(data.get("fmt"), FormatMode.NORMAL),
            precision=clamp_precision(data.get("p", DEFAULT_PRECISION)),
        )

    def format(self, n: float, locale: Optional[QLocale] = None) -> str:
        return format_number(n, self.format_mode, self.precision, locale)


# ---------------- helpers ----------------

def _is_finite(n: Any) -> bool:
    try:
        return math.isfinite(n)
    except TypeError:
        return False


def _trim_fraction(text: str, decimal_point: str) -> str:
    if decimal_point not in text:
        return text
    text = text.rstrip("0")
    if text.endswith(decimal_point):
        text = text[: -len(decimal_point)]
    return text


def _grouped(n: float, digits: int, locale: QLocale) -> str:
    """Locale-grouped fixed-point with trailing fraction zeros trimmed."""
    text = locale.toString(float(n), "f", digits)
    text = _trim_fraction(text, locale.decimalPoint())
    # -0 after rounding reads as 0
    if re.fullmatch(r"-0", text):
        return "0"
    return text


def _scientific(n: float, digits: int) -> str:
    mantissa, exponent = f"{n:.{digits}e}".split("e")
    if "." in mantissa:
        mantissa = mantissa.rstrip("0").rstrip(".")
    sign = exponent[0]
    power = exponent[1:].lstrip("0") or "0"
    return f"{mantissa}e{sign}{power}"


def _suffix_tier(abs_value: float) -> int:
    if abs_value < 1000:
        return 0
    tier = int(math.floor(math.log10(abs_value) / 3))
    return min(tier, len(SUFFIXES) - 1)


def _compact(n: float, digits: int, locale: QLocale) -> str:
    a = abs(n)
    tier = _suffix_tier(a)
    scaled = a / 10 ** (3 * tier)
    # 999_999.9 rounds up into the next tier
    if round(scaled, digits) >= 1000 and tier < len(SUFFIXES) - 1:
        tier += 1
        scaled = a / 10 ** (3 * tier)
    sign = "-" if n < 0 else ""
    body = _grouped(scaled, digits, locale)
    if body == "0":
        sign = ""
    return f"{sign}{body}{SUFFIXES[tier]}"


# ---------------- public API ----------------

def format_number(
    n: float,
    mode: Any = FormatMode.NORMAL,
    precision: int = DEFAULT_PRECISION,
    locale: Optional[QLocale] = None,
) -> str:
    """
    Render ``n`` under a format mode.

    normal      grouped decimal, at most ``precision`` fraction digits with
                trailing zeros trimmed; switches to scientific when
                |n| >= 1e12 or 0 < |n| < 1e-6
    compact     K/M/B/T suffixes, at most min(precision, 6) fraction digits
    scientific  exponential notation, mantissa zeros trimmed
    """
    if not _is_finite(n):
        return PLACEHOLDER
    mode = FormatMode.coerce(mode, FormatMode.NORMAL)
    p = clamp_precision(precision)
    loc = locale if locale is not None else QLocale()
    a = abs(n)

    if mode is FormatMode.SCIENTIFIC or (
        mode is FormatMode.NORMAL and (a >= SCI_UPPER or (a != 0 and a < SCI_LOWER))
    ):
        return _scientific(n, p)
    if mode is FormatMode.COMPACT:
        return _compact(n, min(p, COMPACT_MAX_FRACTION), loc)
    return _grouped(n, p, loc)


def format_money(
    value: float,
    symbol: str = "$",
    *,
    suffix_threshold: float = MONEY_SUFFIX_THRESHOLD,
    suffix_precision: int = 2,
    locale: Optional[QLocale] = None,
) -> str:
    """
    Headline currency figure: plain grouped amount (max 2 fraction digits)
    below the threshold, K/M/B/T suffix with fixed digits above it.
    """
    if not _is_finite(value):
        return f"{symbol}0"
    loc = locale if locale is not None else QLocale()
    a = abs(value)
    sign = "-" if value < 0 else ""

    if a < suffix_threshold:
        body = _grouped(a, 2, loc)
        if body == "0":
            sign = ""
        return f"{sign}{symbol}{body}"

    tier = _suffix_tier(a)
    scaled = a / 10 ** (3 * tier)
    return f"{sign}{symbol}{scaled:.{suffix_precision}f}{SUFFIXES[tier]}"


def format_payout(value: Optional[float], symbol: str = "$", locale: Optional[QLocale] = None) -> str:
    """Payout figure: two fixed digits under 100, up to two above, "$0" under a cent."""
    if value is None or not _is_finite(value) or abs(value) < 0.01:
        return f"{symbol}0"
    loc = locale if locale is not None else QLocale()
    rounded = round(value * 100) / 100
    text = loc.toString(float(rounded), "f", 2)
    if rounded >= 100:
        text = _trim_fraction(text, loc.decimalPoint())
    return f"{symbol}{text}"


def format_percent(value: float, digits: int = 2, locale: Optional[QLocale] = None) -> str:
    if not _is_finite(value):
        return PLACEHOLDER
    loc = locale if locale is not None else QLocale()
    return f"{_grouped(value, digits, loc)}%"
