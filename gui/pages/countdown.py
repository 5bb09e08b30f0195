# gui/pages/countdown.py
from __future__ import annotations

import logging
from datetime import timedelta

from PySide6.QtCore import QDateTime, Qt
from PySide6.QtWidgets import (
    QAbstractItemView,
    QCheckBox,
    QDateTimeEdit,
    QFileDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from core.app_bus import get_app_bus
from core.countdown import PRESET_MINUTES, TimerItem, TimerState, format_countdown, new_timer, remaining_ms, state_of, utc_now
from core.scheduling import CountdownTicker
from services import desktop
from services.export import export_timers_pdf, timers_summary_text
from services.persistence import PreferenceStore
from services.timers import TimerList

log = logging.getLogger(__name__)

COLUMNS = ["Title", "Target", "Remaining", "Status"]


class CountdownPage(QWidget):
    """Saved countdown timers with a 1-second live refresh and completion alerts."""

    def __init__(self, store: PreferenceStore | None = None, parent=None):
        super().__init__(parent)
        self.bus = get_app_bus()
        self.timers = TimerList(store)

        # ---- new timer ----
        new_group = QGroupBox("New Timer")
        form = QFormLayout(new_group)
        self.title_edit = QLineEdit()
        self.title_edit.setPlaceholderText("e.g. Tea, Launch, Meeting")
        self.desc_edit = QLineEdit()
        self.target_edit = QDateTimeEdit(QDateTime.currentDateTime().addSecs(600))
        self.target_edit.setCalendarPopup(True)
        self.target_edit.setDisplayFormat("yyyy-MM-dd HH:mm:ss")
        self.sound_check = QCheckBox("Play sound on completion")
        self.sound_check.setChecked(True)
        self.btn_add = QPushButton("Add Timer")
        form.addRow(QLabel("Title:"), self.title_edit)
        form.addRow(QLabel("Description:"), self.desc_edit)
        form.addRow(QLabel("Target:"), self.target_edit)
        form.addRow(self.sound_check)
        form.addRow(self.btn_add)

        presets = QHBoxLayout()
        presets.addWidget(QLabel("Quick:"))
        for minutes in PRESET_MINUTES:
            b = QPushButton(f"{minutes}m")
            b.clicked.connect(lambda _checked=False, m=minutes: self._add_preset(m))
            presets.addWidget(b)
        presets.addStretch()
        form.addRow(presets)

        # ---- list ----
        list_group = QGroupBox("Timers")
        list_lay = QVBoxLayout(list_group)
        self.table = QTableWidget(0, len(COLUMNS))
        self.table.setHorizontalHeaderLabels(COLUMNS)
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SingleSelection)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setAlternatingRowColors(True)
        list_lay.addWidget(self.table)

        btns = QHBoxLayout()
        self.btn_extend = QPushButton("+1 min")
        self.btn_delete = QPushButton("Delete")
        self.btn_clear = QPushButton("Clear All")
        self.btn_copy = QPushButton("Copy Summary")
        self.btn_pdf = QPushButton("Export PDF…")
        for b in (self.btn_extend, self.btn_delete, self.btn_clear, self.btn_copy, self.btn_pdf):
            btns.addWidget(b)
        btns.addStretch()
        list_lay.addLayout(btns)

        lay = QVBoxLayout(self)
        lay.addWidget(new_group)
        lay.addWidget(list_group, 1)

        # ---- connections ----
        self.btn_add.clicked.connect(self._on_add_clicked)
        self.btn_extend.clicked.connect(self._on_extend_clicked)
        self.btn_delete.clicked.connect(self._on_delete_clicked)
        self.btn_clear.clicked.connect(self._on_clear_clicked)
        self.btn_copy.clicked.connect(self._on_copy_clicked)
        self.btn_pdf.clicked.connect(self._on_pdf_clicked)

        self.ticker = CountdownTicker(lambda: self.timers.items, self)
        self.ticker.ticked.connect(self._on_tick)
        self.ticker.timerCompleted.connect(self._on_timer_completed)

        self._rebuild()
        self.ticker.start()

    def shutdown(self) -> None:
        self.ticker.stop()

    # ---- table ----
    def _rebuild(self) -> None:
        items = self.timers.items
        self.table.setRowCount(len(items))
        for r, t in enumerate(items):
            title = QTableWidgetItem(t.title or "Untitled timer")
            title.setData(Qt.UserRole, t.id)
            if t.description:
                title.setToolTip(t.description)
            self.table.setItem(r, 0, title)
            target = t.target.astimezone().strftime("%Y-%m-%d %H:%M:%S")
            self.table.setItem(r, 1, QTableWidgetItem(target))
        self._on_tick(utc_now())
        self.bus.timersChanged.emit(items)

    def _on_tick(self, now) -> None:
        for r, t in enumerate(self.timers.items):
            rem = remaining_ms(t.target, now)
            rem_item = QTableWidgetItem(format_countdown(rem))
            rem_item.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
            self.table.setItem(r, 2, rem_item)
            done = state_of(t, now) is TimerState.COMPLETED
            self.table.setItem(r, 3, QTableWidgetItem("Completed" if done else "Running"))

    def _selected_id(self) -> str | None:
        row = self.table.currentRow()
        if row < 0:
            return None
        item = self.table.item(row, 0)
        return item.data(Qt.UserRole) if item else None

    # ---- handlers ----
    def _on_add_clicked(self) -> None:
        target = self.target_edit.dateTime().toPython().astimezone()
        if remaining_ms(target, utc_now()) <= 0:
            self.bus.statusMessage.emit("Pick a time in the future.")
            return
        self._add(new_timer(
            target,
            title=self.title_edit.text(),
            description=self.desc_edit.text(),
            sound_enabled=self.sound_check.isChecked(),
        ))
        self.title_edit.clear()
        self.desc_edit.clear()

    def _add_preset(self, minutes: int) -> None:
        now = utc_now()
        self._add(new_timer(
            now + timedelta(minutes=minutes),
            title=f"{minutes} minute timer",
            sound_enabled=self.sound_check.isChecked(),
            now=now,
        ))

    def _add(self, item: TimerItem) -> None:
        self.timers.add(item)
        self._rebuild()
        self.bus.statusMessage.emit(f"Timer '{item.title or 'Untitled timer'}' added.")

    def _on_extend_clicked(self) -> None:
        timer_id = self._selected_id()
        t = self.timers.get(timer_id) if timer_id else None
        if t is None:
            return
        base = max(t.target, utc_now())
        self.timers.replace(t.with_target(base + timedelta(minutes=1)))
        self._rebuild()

    def _on_delete_clicked(self) -> None:
        timer_id = self._selected_id()
        if timer_id and self.timers.remove(timer_id):
            self.ticker.tracker.forget(timer_id)
            self._rebuild()

    def _on_clear_clicked(self) -> None:
        self.timers.clear()
        self.ticker.tracker.reset()
        self._rebuild()

    def _on_copy_clicked(self) -> None:
        if desktop.copy_to_clipboard(timers_summary_text(self.timers.items)):
            self.bus.statusMessage.emit("Timer summary copied.")

    def _on_pdf_clicked(self) -> None:
        if not len(self.timers):
            return
        path, _ = QFileDialog.getSaveFileName(self, "Export Timers", "timers.pdf", "PDF Files (*.pdf)")
        if not path:
            return
        try:
            export_timers_pdf(path, self.timers.items)
            self.bus.statusMessage.emit(f"Saved {path}")
        except OSError as e:
            log.warning("CountdownPage: PDF export failed: %s", e)
            self.bus.statusMessage.emit("Export failed.")

    def _on_timer_completed(self, t: TimerItem) -> None:
        title = t.title or "Timer"
        desktop.notify(f"{title} finished", t.description or "Your countdown has completed.")
        desktop.play_chime(muted=t.sound_enabled is False)
        self.bus.timerCompleted.emit(t)
        self.bus.statusMessage.emit(f"⏰ {title} finished")
