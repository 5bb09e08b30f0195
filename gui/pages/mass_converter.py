# gui/pages/mass_converter.py
from __future__ import annotations

import logging
from datetime import datetime

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QFileDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QSpinBox,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from core.app_bus import get_app_bus
from core.formatting import MAX_PRECISION, MIN_PRECISION, FormatMode
from services import desktop
from services.export import grid_clipboard_text, grid_to_csv, write_text
from unit_manager import ConverterSession, DisplayAwareMixin, get_converter_session

log = logging.getLogger(__name__)

STAR = "★"


class MassConverterPage(QWidget, DisplayAwareMixin):
    """Mass & weight converter: value, unit pair, full grid, favorites, history, share link."""

    def __init__(self, session: ConverterSession | None = None, parent=None):
        super().__init__(parent)
        self.session = session or get_converter_session()
        self.bus = get_app_bus()

        # ---- input row ----
        input_group = QGroupBox("Convert")
        form = QFormLayout(input_group)

        self.value_edit = QLineEdit(self.session.value_text)
        self.value_edit.setPlaceholderText("Enter a value")
        self.value_edit.setClearButtonEnabled(True)
        form.addRow(QLabel("Value:"), self.value_edit)

        units_row = QHBoxLayout()
        self.from_combo = QComboBox()
        self.to_combo = QComboBox()
        self.btn_swap = QPushButton("⇄")
        self.btn_swap.setToolTip("Swap units")
        self.btn_fav = QPushButton(STAR)
        self.btn_fav.setToolTip("Pin / unpin the target unit")
        units_row.addWidget(self.from_combo, 1)
        units_row.addWidget(self.btn_swap)
        units_row.addWidget(self.to_combo, 1)
        units_row.addWidget(self.btn_fav)
        form.addRow(QLabel("Units:"), units_row)

        self.result_label = QLabel()
        self.result_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        f = self.result_label.font()
        f.setPointSize(f.pointSize() + 6)
        f.setBold(True)
        self.result_label.setFont(f)
        self.summary_label = QLabel()
        form.addRow(QLabel("Result:"), self.result_label)
        form.addRow(QLabel(""), self.summary_label)

        # ---- display settings ----
        display_row = QHBoxLayout()
        self.format_combo = QComboBox()
        for m in FormatMode:
            self.format_combo.addItem(m.value.title(), m.value)
        self.precision_spin = QSpinBox()
        self.precision_spin.setRange(MIN_PRECISION, MAX_PRECISION)
        display_row.addWidget(QLabel("Format:"))
        display_row.addWidget(self.format_combo)
        display_row.addWidget(QLabel("Precision:"))
        display_row.addWidget(self.precision_spin)
        display_row.addStretch()
        form.addRow(display_row)

        # ---- all units grid ----
        grid_group = QGroupBox("All Units")
        grid_lay = QVBoxLayout(grid_group)
        self.grid = QTableWidget(0, 2)
        self.grid.setHorizontalHeaderLabels(["Unit", "Value"])
        self.grid.verticalHeader().setVisible(False)
        self.grid.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.grid.setAlternatingRowColors(True)
        self.grid.setEditTriggers(QAbstractItemView.NoEditTriggers)
        grid_lay.addWidget(self.grid)

        grid_btns = QHBoxLayout()
        self.btn_copy = QPushButton("Copy Result")
        self.btn_copy_all = QPushButton("Copy All")
        self.btn_csv = QPushButton("Export CSV…")
        for b in (self.btn_copy, self.btn_copy_all, self.btn_csv):
            grid_btns.addWidget(b)
        grid_btns.addStretch()
        grid_lay.addLayout(grid_btns)

        # ---- history ----
        hist_group = QGroupBox("Recent Conversions")
        hist_lay = QVBoxLayout(hist_group)
        self.history_list = QListWidget()
        hist_lay.addWidget(self.history_list)
        self.btn_clear_history = QPushButton("Clear History")
        hist_lay.addWidget(self.btn_clear_history)

        # ---- share ----
        share_group = QGroupBox("Share")
        share_lay = QHBoxLayout(share_group)
        self.link_edit = QLineEdit()
        self.link_edit.setPlaceholderText("Paste a shared link or query to apply it")
        self.btn_apply_link = QPushButton("Apply")
        self.btn_copy_link = QPushButton("Copy Link")
        share_lay.addWidget(self.link_edit, 1)
        share_lay.addWidget(self.btn_apply_link)
        share_lay.addWidget(self.btn_copy_link)

        lower = QHBoxLayout()
        lower.addWidget(grid_group, 3)
        lower.addWidget(hist_group, 2)

        lay = QVBoxLayout(self)
        lay.addWidget(input_group)
        lay.addLayout(lower, 1)
        lay.addWidget(share_group)

        # ---- connections ----
        self.value_edit.textChanged.connect(self.session.set_value_text)
        self.from_combo.currentIndexChanged.connect(self._on_from_changed)
        self.to_combo.currentIndexChanged.connect(self._on_to_changed)
        self.btn_swap.clicked.connect(self.session.swap_units)
        self.btn_fav.clicked.connect(self._on_favorite_clicked)
        self.format_combo.currentIndexChanged.connect(
            lambda _i: self.session.set_format_mode(self.format_combo.currentData())
        )
        self.precision_spin.valueChanged.connect(self.session.set_precision)
        self.btn_copy.clicked.connect(self._on_copy_result)
        self.btn_copy_all.clicked.connect(self._on_copy_all)
        self.btn_csv.clicked.connect(self._on_export_csv)
        self.btn_clear_history.clicked.connect(self._on_clear_history)
        self.history_list.itemActivated.connect(self._on_history_activated)
        self.btn_apply_link.clicked.connect(self._on_apply_link)
        self.link_edit.returnPressed.connect(self._on_apply_link)
        self.btn_copy_link.clicked.connect(self._on_copy_link)

        self.session.conversionChanged.connect(self._sync_from_session)
        self.session.displayChanged.connect(self._on_display_changed)

        self.result_labels = [self.result_label]
        self._populate_unit_combos()
        self._sync_from_session()
        self._on_display_changed(self.session.display.format_mode.value, self.session.display.precision)
        self.bind_session(self.session)

    # ---- display-aware ----
    def update_display(self, mode: str, precision: int) -> None:
        super().update_display(mode, precision)
        self.summary_label.setText(self.session.summary_line())
        self._refresh_grid()

    # ---- sync ----
    def _populate_unit_combos(self) -> None:
        favored, others = self.session.favorites.partition()
        for combo in (self.from_combo, self.to_combo):
            combo.blockSignals(True)
            combo.clear()
            for u in favored:
                combo.addItem(f"{STAR} {u.display_name}", u.key)
            if favored and others:
                combo.insertSeparator(combo.count())
            for u in others:
                combo.addItem(u.display_name, u.key)
            combo.blockSignals(False)
        self._select_units()

    def _select_units(self) -> None:
        for combo, key in ((self.from_combo, self.session.from_unit), (self.to_combo, self.session.to_unit)):
            combo.blockSignals(True)
            combo.setCurrentIndex(combo.findData(key))
            combo.blockSignals(False)
        self.btn_fav.setText(STAR if self.session.to_unit in self.session.favorites else "☆")

    def _sync_from_session(self) -> None:
        s = self.session
        if self.value_edit.text() != s.value_text:
            self.value_edit.blockSignals(True)
            self.value_edit.setText(s.value_text)
            self.value_edit.blockSignals(False)
        self._select_units()
        self._refresh_history()

    def _on_display_changed(self, mode: str, precision: int) -> None:
        self.format_combo.blockSignals(True)
        self.format_combo.setCurrentIndex(self.format_combo.findData(mode))
        self.format_combo.blockSignals(False)
        self.precision_spin.blockSignals(True)
        self.precision_spin.setValue(precision)
        self.precision_spin.blockSignals(False)
        self.bus.displaySettingsChanged.emit(mode, precision)

    def _refresh_grid(self) -> None:
        s = self.session
        results = s.grid()
        self.grid.setRowCount(len(results))
        for r, (key, value) in enumerate(results.items()):
            self.grid.setItem(r, 0, QTableWidgetItem(s.registry.display_name(key)))
            it = QTableWidgetItem(s.display.format(value))
            it.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
            self.grid.setItem(r, 1, it)

    def _refresh_history(self) -> None:
        self.history_list.clear()
        for e in self.session.history:
            stamp = datetime.fromtimestamp(e.timestamp_ms / 1000).strftime("%H:%M") if e.timestamp_ms else ""
            item = QListWidgetItem(f"{e.value} {e.from_unit} → {e.to_unit}   {stamp}".rstrip())
            item.setData(Qt.UserRole, (e.value, e.from_unit, e.to_unit))
            self.history_list.addItem(item)
        self.bus.historyChanged.emit(self.session.history.entries)

    # ---- handlers ----
    def _on_from_changed(self, _index: int) -> None:
        key = self.from_combo.currentData()
        if key:
            self.session.set_from_unit(key)

    def _on_to_changed(self, _index: int) -> None:
        key = self.to_combo.currentData()
        if key:
            self.session.set_to_unit(key)

    def _on_favorite_clicked(self) -> None:
        key = self.session.to_unit
        was = key in self.session.favorites
        now = self.session.toggle_favorite(key)
        if not was and not now:
            self.bus.statusMessage.emit(f"Favorites are full ({self.session.favorites.capacity}); unpin one first.")
        self._populate_unit_combos()
        self.bus.favoritesChanged.emit(self.session.favorites.keys)

    def _on_history_activated(self, item: QListWidgetItem) -> None:
        value, from_unit, to_unit = item.data(Qt.UserRole)
        self.session.restore(value, from_unit, to_unit)

    def _on_clear_history(self) -> None:
        self.session.clear_history()
        self._refresh_history()

    def _on_copy_result(self) -> None:
        if desktop.copy_to_clipboard(self.session.summary_line()):
            self.bus.statusMessage.emit("Result copied.")

    def _on_copy_all(self) -> None:
        text = grid_clipboard_text(self.session.grid(), self.session.registry)
        if desktop.copy_to_clipboard(text):
            self.bus.statusMessage.emit("All conversions copied.")

    def _on_export_csv(self) -> None:
        path, _ = QFileDialog.getSaveFileName(self, "Export Conversions", "mass-conversions.csv", "CSV Files (*.csv)")
        if not path:
            return
        try:
            write_text(path, grid_to_csv(self.session.grid(), self.session.registry))
            self.bus.statusMessage.emit(f"Saved {path}")
        except OSError as e:
            log.warning("MassConverterPage: CSV export failed: %s", e)
            self.bus.statusMessage.emit("Export failed.")

    def _on_apply_link(self) -> None:
        text = self.link_edit.text().strip()
        if not text:
            return
        self.session.apply_url_state(text)
        self.link_edit.clear()
        self.bus.statusMessage.emit("Link applied.")

    def _on_copy_link(self) -> None:
        url = self.session.share_url()
        self.link_edit.setText(url)
        if desktop.copy_to_clipboard(url):
            self.bus.statusMessage.emit("Share link copied.")
