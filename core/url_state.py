# core/url_state.py
from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from core.formatting import DEFAULT_PRECISION, MAX_PRECISION, MIN_PRECISION, FormatMode
from core.inputs import is_number
from unit_manager.units import MASS, UnitRegistry

log = logging.getLogger(__name__)

DEFAULT_SHARE_URL = "https://quickcalc.app/mass-weight-converter"

# query parameter -> state field
PARAMS = {
    "v": "value",
    "from": "from_unit",
    "to": "to_unit",
    "fmt": "format_mode",
    "p": "precision",
}


@dataclass(frozen=True)
class ConverterUrlState:
    value: str = ""
    from_unit: str = "kg"
    to_unit: str = "lb"
    format_mode: FormatMode = FormatMode.NORMAL
    precision: int = DEFAULT_PRECISION


def encode(state: ConverterUrlState) -> str:
    """Every tracked field is written, defaults included."""
    return urlencode(
        [
            ("v", state.value),
            ("from", state.from_unit),
            ("to", state.to_unit),
            ("fmt", FormatMode.coerce(state.format_mode).value),
            ("p", str(int(state.precision))),
        ]
    )


def _query_part(query: str) -> str:
    q = (query or "").strip()
    if "://" in q:
        return urlsplit(q).query
    return q[1:] if q.startswith("?") else q


def _first(params: Dict[str, list], key: str):
    values = params.get(key)
    return values[0] if values else None


def decode(query: str, registry: UnitRegistry = MASS) -> Dict[str, Any]:
    """
    Partial state from a query string, bare or as part of a full URL.

    Fields that are absent or fail validation are left out of the result;
    one bad field never discards the others.
    """
    try:
        params = parse_qs(_query_part(query), keep_blank_values=True)
    except (TypeError, ValueError) as e:
        log.warning("url_state: unreadable query %r: %s", query, e)
        return {}

    out: Dict[str, Any] = {}

    v = _first(params, "v")
    if v is not None:
        if v.strip() == "" or is_number(v):
            out["value"] = v
        else:
            log.debug("url_state: skipping unparseable v=%r", v)

    for param in ("from", "to"):
        raw = _first(params, param)
        key = registry.canonical(raw)
        if key is not None:
            out[PARAMS[param]] = key
        elif raw is not None:
            log.debug("url_state: skipping unknown unit %s=%r", param, raw)

    fmt = FormatMode.parse(_first(params, "fmt"))
    if fmt is not None:
        out["format_mode"] = fmt

    p = _first(params, "p")
    if p is not None:
        try:
            precision = int(p.strip())
        except ValueError:
            precision = None
        if precision is not None and MIN_PRECISION <= precision <= MAX_PRECISION:
            out["precision"] = precision
        else:
            log.debug("url_state: skipping precision p=%r", p)

    return out


def apply(query: str, base: Optional[ConverterUrlState] = None, registry: UnitRegistry = MASS) -> ConverterUrlState:
    base = base if base is not None else ConverterUrlState()
    known = {f.name for f in fields(ConverterUrlState)}
    partial = {k: v for k, v in decode(query, registry).items() if k in known}
    return replace(base, **partial)


def share_url(state: ConverterUrlState, base_url: str = DEFAULT_SHARE_URL) -> str:
    """Rebuild the link with this state as its whole query (replace, not append)."""
    parts = urlsplit(base_url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, encode(state), ""))
