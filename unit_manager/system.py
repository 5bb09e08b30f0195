# unit_manager/system.py
from __future__ import annotations

import logging
from typing import Dict, Optional

from PySide6.QtCore import QObject, Signal

from core import url_state
from core.formatting import DisplaySettings, FormatMode, clamp_precision
from core.inputs import parse_number
from services.favorites import FavoritesList
from services.history import ConversionHistory
from services.persistence import PreferenceStore

from .converter import convert, convert_all
from .units import MASS, UnitRegistry

log = logging.getLogger(__name__)


class ConverterSession(QObject):
    """
    Live state of one converter page: raw value text, unit pair, display
    settings, favorites and history.

    Emits conversionChanged() whenever the value or a unit changes and
    displayChanged(mode, precision) when rendering settings change. Every
    value/unit change also lands in the history, which dedupes against its
    latest entry only.
    """
    conversionChanged = Signal()
    displayChanged = Signal(str, int)

    def __init__(
        self,
        store: Optional[PreferenceStore] = None,
        *,
        registry: UnitRegistry = MASS,
        from_unit: str = "kg",
        to_unit: str = "lb",
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.registry = registry
        self.store = store
        self._value_text = ""
        self._from = registry.get(from_unit).key
        self._to = registry.get(to_unit).key
        self.display = DisplaySettings()
        self.favorites = FavoritesList(store, registry=registry)
        self.history = ConversionHistory(store)
        self._record()

    # ---- properties ----
    @property
    def value_text(self) -> str:
        return self._value_text

    @property
    def from_unit(self) -> str:
        return self._from

    @property
    def to_unit(self) -> str:
        return self._to

    @property
    def value(self) -> float:
        """Parsed input; empty or unparseable reads as 0. Negatives pass through."""
        return parse_number(self._value_text)

    @property
    def has_input(self) -> bool:
        return self._value_text.strip() != ""

    # ---- setters emit ----
    def set_value_text(self, text: str) -> None:
        text = "" if text is None else str(text)
        if text != self._value_text:
            self._value_text = text
            self._changed()

    def set_from_unit(self, key: str) -> bool:
        canon = self.registry.canonical(key)
        if canon is None:
            log.warning("ConverterSession: ignoring unknown from-unit %r", key)
            return False
        if canon != self._from:
            self._from = canon
            self._changed()
        return True

    def set_to_unit(self, key: str) -> bool:
        canon = self.registry.canonical(key)
        if canon is None:
            log.warning("ConverterSession: ignoring unknown to-unit %r", key)
            return False
        if canon != self._to:
            self._to = canon
            self._changed()
        return True

    def swap_units(self) -> None:
        if self._from == self._to:
            return
        self._from, self._to = self._to, self._from
        self._changed()

    def set_format_mode(self, mode) -> None:
        m = FormatMode.coerce(mode, self.display.format_mode)
        if m is not self.display.format_mode:
            self.display.format_mode = m
            self.displayChanged.emit(m.value, self.display.precision)

    def set_precision(self, precision: int) -> None:
        p = clamp_precision(precision)
        if p != self.display.precision:
            self.display.precision = p
            self.displayChanged.emit(self.display.format_mode.value, p)

    # ---- results ----
    def result(self) -> float:
        return convert(self.value, self._from, self._to, self.registry)

    def grid(self, include_source: bool = False) -> Dict[str, float]:
        return convert_all(self.value, self._from, self.registry, include_source=include_source)

    def formatted_result(self) -> str:
        return self.display.format(self.result())

    def summary_line(self) -> str:
        src = self.registry.get(self._from)
        dst = self.registry.get(self._to)
        shown = self._value_text.strip() or "0"
        return f"{shown} {src.key} = {self.formatted_result()} {dst.key}"

    # ---- favorites / history ----
    def toggle_favorite(self, key: str) -> bool:
        return self.favorites.toggle(key)

    def clear_history(self) -> None:
        self.history.clear()

    def restore(self, value_text: str, from_unit: str, to_unit: str) -> None:
        """Re-apply a history entry as one change."""
        f = self.registry.canonical(from_unit)
        t = self.registry.canonical(to_unit)
        if f is None or t is None:
            log.warning("ConverterSession: history entry has unknown units %r -> %r", from_unit, to_unit)
            return
        self._value_text, self._from, self._to = str(value_text), f, t
        self._changed()

    # ---- shareable state ----
    def to_url_state(self) -> url_state.ConverterUrlState:
        return url_state.ConverterUrlState(
            value=self._value_text,
            from_unit=self._from,
            to_unit=self._to,
            format_mode=self.display.format_mode,
            precision=self.display.precision,
        )

    def apply_url_state(self, query: str) -> url_state.ConverterUrlState:
        """Decode a link or query; invalid fields keep their current value."""
        state = url_state.apply(query, self.to_url_state(), self.registry)
        changed = (state.value, state.from_unit, state.to_unit) != (self._value_text, self._from, self._to)
        self._value_text, self._from, self._to = state.value, state.from_unit, state.to_unit
        self.set_format_mode(state.format_mode)
        self.set_precision(state.precision)
        if changed:
            self._changed()
        return state

    def share_url(self, base_url: Optional[str] = None) -> str:
        return url_state.share_url(self.to_url_state(), base_url or url_state.DEFAULT_SHARE_URL)

    # ---- internals ----
    def _record(self) -> bool:
        return self.history.record(self._value_text, self._from, self._to)

    def _changed(self) -> None:
        self._record()
        self.conversionChanged.emit()


# ======================================================================
# Mixin for widgets that re-render when display settings change
# ======================================================================

class DisplayAwareMixin:
    """
    Bind once; re-render in update_display.
    """
    _session: ConverterSession | None = None

    def bind_session(self, session: ConverterSession | None) -> None:
        self._session = session
        if session is None:
            return
        # initial sync
        self.update_display(session.display.format_mode.value, session.display.precision)
        # subscribe
        session.displayChanged.connect(self._on_display_changed_proxy)
        session.conversionChanged.connect(self._on_conversion_changed_proxy)

    def _on_display_changed_proxy(self, mode: str, precision: int):
        self.update_display(mode, precision)

    def _on_conversion_changed_proxy(self):
        s = self._session
        if s is not None:
            self.update_display(s.display.format_mode.value, s.display.precision)

    def update_display(self, mode: str, precision: int) -> None:
        s = self._session
        if s is None:
            return
        for lab in getattr(self, "result_labels", []):
            lab.setText(s.formatted_result())
