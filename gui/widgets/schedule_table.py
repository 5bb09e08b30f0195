# gui/widgets/schedule_table.py
from __future__ import annotations

import logging
from typing import Dict, Optional

import pandas as pd
from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QFileDialog,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QSizePolicy,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from services.export import schedule_to_csv, write_text

log = logging.getLogger(__name__)

VIEW_MONTHLY = "Monthly"
VIEW_YEARLY = "Yearly"


class ScheduleTable(QWidget):
    """Monthly / yearly schedule viewer with CSV export."""

    def __init__(self, title: str = "Schedule", headers: Optional[Dict[str, str]] = None, parent=None):
        super().__init__(parent)
        self._headers = dict(headers or {})
        self._frames: Dict[str, pd.DataFrame] = {VIEW_MONTHLY: pd.DataFrame(), VIEW_YEARLY: pd.DataFrame()}

        self.group = QGroupBox(title)
        vbox = QVBoxLayout(self.group)

        # view selector
        row = QHBoxLayout()
        row.addWidget(QLabel("View:"))
        self.view_combo = QComboBox()
        self.view_combo.addItems([VIEW_YEARLY, VIEW_MONTHLY])
        row.addWidget(self.view_combo)
        row.addStretch()
        self.btn_export = QPushButton("Export CSV…")
        row.addWidget(self.btn_export)
        vbox.addLayout(row)

        # table
        self.table = QTableWidget(0, 0)
        self.table.verticalHeader().setVisible(False)
        self.table.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.verticalHeader().setSectionResizeMode(QHeaderView.Fixed)
        self.table.verticalHeader().setDefaultSectionSize(26)
        self.table.setAlternatingRowColors(True)
        self.table.setWordWrap(False)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        vbox.addWidget(self.table)

        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(self.group)

        self.view_combo.currentIndexChanged.connect(self.refresh)
        self.btn_export.clicked.connect(self._on_export_clicked)
        self.btn_export.setEnabled(False)

    # ---- public API ----
    def set_frames(self, monthly: pd.DataFrame, yearly: pd.DataFrame) -> None:
        self._frames = {VIEW_MONTHLY: monthly, VIEW_YEARLY: yearly}
        self.btn_export.setEnabled(not monthly.empty)
        self.refresh()

    def current_frame(self) -> pd.DataFrame:
        return self._frames.get(self.view_combo.currentText(), pd.DataFrame())

    def refresh(self) -> None:
        df = self.current_frame()
        cols = list(df.columns)
        self.table.setColumnCount(len(cols))
        self.table.setHorizontalHeaderLabels([self._label(c) for c in cols])
        self.table.setRowCount(len(df))
        for r, record in enumerate(df.itertuples(index=False)):
            for c, value in enumerate(record):
                if cols[c] == "period":
                    it = QTableWidgetItem(str(int(value)))
                    it.setTextAlignment(Qt.AlignCenter)
                else:
                    it = self._num(value)
                self.table.setItem(r, c, it)

    # ---- helpers ----
    def _label(self, column: str) -> str:
        if column == "period":
            return "Year" if self.view_combo.currentText() == VIEW_YEARLY else "Month"
        return self._headers.get(column, column.title())

    def _on_export_clicked(self) -> None:
        df = self.current_frame()
        if df.empty:
            return
        path, _ = QFileDialog.getSaveFileName(self, "Export Schedule", "schedule.csv", "CSV Files (*.csv)")
        if not path:
            return
        try:
            write_text(path, schedule_to_csv(df))
        except OSError as e:
            log.warning("ScheduleTable: export failed: %s", e)

    @staticmethod
    def _num(value, nd=2):
        if value is None or (isinstance(value, float) and pd.isna(value)):
            txt = ""
        elif isinstance(value, (int, float)):
            txt = f"{value:,.{nd}f}"
        else:
            txt = str(value)
        it = QTableWidgetItem(txt)
        it.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
        return it
