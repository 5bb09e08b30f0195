# gui/main_window.py

from __future__ import annotations

import logging

from PySide6.QtWidgets import QComboBox, QLabel, QMainWindow, QSpinBox, QStatusBar, QTabWidget

from core.app_bus import get_app_bus
from core.formatting import MAX_PRECISION, MIN_PRECISION, FormatMode
from unit_manager import get_converter_session, get_store, set_display

from gui.pages import (
    CountdownPage,
    DisclaimerPage,
    FacebookRevenuePage,
    InflationPage,
    MassConverterPage,
    RecurringDepositPage,
    RetirementPage,
    TikTokRevenuePage,
)

log = logging.getLogger(__name__)

DISPLAY_KEY = "mass:display"
COUNTDOWN_TAB = "Countdown Timers"


class MainWindow(QMainWindow):

    def __init__(self, share_link: str | None = None) -> None:

        super().__init__()

        self.setWindowTitle("QuickCalc")

        # ---- Core systems ----
        self.bus = get_app_bus()
        self.store = get_store()
        self.session = get_converter_session()
        self._restore_display_settings()
        if share_link:
            self.session.apply_url_state(share_link)

        # ---- Central UI ----
        self.tabs = QTabWidget()
        self.setCentralWidget(self.tabs)

        self.converter = MassConverterPage(self.session, self)
        self.countdown = CountdownPage(self.store, self)
        self.tabs.addTab(self.converter, "Mass && Weight")
        self.tabs.addTab(self.countdown, COUNTDOWN_TAB)
        self.tabs.addTab(InflationPage(self), "Inflation")
        self.tabs.addTab(RecurringDepositPage(self), "Recurring Deposit")
        self.tabs.addTab(RetirementPage(self), "Retirement")
        self.tabs.addTab(FacebookRevenuePage(self.store, self), "Facebook In-Stream")
        self.tabs.addTab(TikTokRevenuePage(self.store, self), "TikTok Revenue")
        self.tabs.addTab(DisclaimerPage(self), "Disclaimer")

        # ---- Status bar ----
        sb = QStatusBar()
        self.setStatusBar(sb)
        self.counts_label = QLabel()
        self._history_count = 0
        self._favorite_count = 0
        self._setup_display_selectors(sb)

        # ---- Global events ----
        self.bus.statusMessage.connect(self._on_status_message)
        self.bus.displaySettingsChanged.connect(self._on_display_settings_changed)
        self.bus.historyChanged.connect(self._on_history_changed)
        self.bus.favoritesChanged.connect(self._on_favorites_changed)
        self.bus.timersChanged.connect(self._on_timers_changed)

        # pages emitted their initial state before the hooks above existed
        self._on_history_changed(self.session.history.entries)
        self._on_favorites_changed(self.session.favorites.keys)
        self._on_timers_changed(self.countdown.timers.items)

    # ---------------- Events ----------------

    def _on_status_message(self, msg: str) -> None:
        self.statusBar().showMessage(msg, 4000)

    def _on_display_settings_changed(self, mode: str, precision: int) -> None:
        self.store.save(DISPLAY_KEY, self.session.display.to_dict())
        self.format_combo.blockSignals(True)
        self.format_combo.setCurrentText(mode)
        self.format_combo.blockSignals(False)
        self.precision_spin.blockSignals(True)
        self.precision_spin.setValue(precision)
        self.precision_spin.blockSignals(False)

    def _on_history_changed(self, entries) -> None:
        self._history_count = len(entries)
        self._update_counts()

    def _on_favorites_changed(self, keys) -> None:
        self._favorite_count = len(keys)
        self._update_counts()

    def _on_timers_changed(self, items) -> None:
        """Countdown tab title carries the number of saved timers."""
        i = self.tabs.indexOf(self.countdown)
        self.tabs.setTabText(i, f"{COUNTDOWN_TAB} ({len(items)})" if items else COUNTDOWN_TAB)

    def closeEvent(self, event) -> None:
        self.countdown.shutdown()
        super().closeEvent(event)

    # ---------------- Helpers ----------------

    def _setup_display_selectors(self, sb: QStatusBar) -> None:
        """Hook format selectors to the converter session."""
        self.format_combo = QComboBox()
        self.format_combo.addItems([m.value for m in FormatMode])
        self.precision_spin = QSpinBox()
        self.precision_spin.setRange(MIN_PRECISION, MAX_PRECISION)

        self.format_combo.setCurrentText(self.session.display.format_mode.value)
        self.precision_spin.setValue(self.session.display.precision)
        self.format_combo.currentTextChanged.connect(self.session.set_format_mode)
        self.precision_spin.valueChanged.connect(self.session.set_precision)

        sb.addPermanentWidget(self.counts_label)
        sb.addPermanentWidget(QLabel("Format:"))
        sb.addPermanentWidget(self.format_combo)
        sb.addPermanentWidget(QLabel("Precision:"))
        sb.addPermanentWidget(self.precision_spin)

    def _update_counts(self) -> None:
        self.counts_label.setText(f"History: {self._history_count}   Favorites: {self._favorite_count}")

    def _restore_display_settings(self) -> None:
        """Apply persisted format mode / precision (if present) to the session."""
        payload = self.store.load(DISPLAY_KEY, default={})
        if not isinstance(payload, dict):
            return
        set_display(mode=payload.get("fmt"), precision=payload.get("p"))
