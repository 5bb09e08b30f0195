# gui/pages/inflation.py
from PySide6.QtWidgets import QFormLayout, QGroupBox, QLabel, QVBoxLayout, QWidget

from core.finance import purchasing_power
from core.formatting import format_money
from gui.widgets import number_edit, read_number, result_label


class InflationPage(QWidget):
    """Purchasing power of an amount after N years of constant inflation."""

    def __init__(self, parent=None):
        super().__init__(parent)

        self.group = QGroupBox("Inflation")
        form = QFormLayout(self.group)
        self.amount = number_edit("10000")
        self.rate = number_edit("3", 0.0, 100.0)
        self.years = number_edit("10", 0.0, 200.0, 1)
        form.addRow(QLabel("Amount today:"), self.amount)
        form.addRow(QLabel("Inflation rate (%/yr):"), self.rate)
        form.addRow(QLabel("Years:"), self.years)

        self.future_label = result_label()
        self.lost_label = result_label()
        form.addRow(QLabel("Future purchasing power:"), self.future_label)
        form.addRow(QLabel("Value lost:"), self.lost_label)

        lay = QVBoxLayout(self)
        lay.addWidget(self.group)
        lay.addStretch()

        for edit in (self.amount, self.rate, self.years):
            edit.textChanged.connect(self.recalculate)
        self.recalculate()

    def values(self) -> dict:
        return {
            "amount": read_number(self.amount),
            "rate": read_number(self.rate),
            "years": read_number(self.years),
        }

    def recalculate(self) -> None:
        v = self.values()
        res = purchasing_power(v["amount"], v["rate"], v["years"])
        self.future_label.setText(format_money(res.future_value))
        self.lost_label.setText(format_money(res.value_lost))
