# gui/pages/recurring_deposit.py
from PySide6.QtWidgets import QComboBox, QFormLayout, QGroupBox, QLabel, QSpinBox, QVBoxLayout, QWidget

from core.finance import Compounding, rd_closed_form, rd_schedule, rd_summary, yearly_rollup
from core.formatting import format_money, format_percent
from gui.widgets import ScheduleTable, number_edit, read_number, result_label


class RecurringDepositPage(QWidget):
    """Monthly deposit with periodic compounding; summary plus month/year schedule."""

    def __init__(self, parent=None):
        super().__init__(parent)

        self.group = QGroupBox("Recurring Deposit")
        form = QFormLayout(self.group)
        self.deposit = number_edit("5000")
        self.rate = number_edit("7", 0.0, 100.0)
        self.years = QSpinBox()
        self.years.setRange(0, 50)
        self.years.setValue(5)
        self.months = QSpinBox()
        self.months.setRange(0, 11)
        self.compounding = QComboBox()
        for c in Compounding:
            self.compounding.addItem(c.value.title(), c.value)
        self.compounding.setCurrentIndex(self.compounding.findData(Compounding.QUARTERLY.value))

        form.addRow(QLabel("Monthly deposit:"), self.deposit)
        form.addRow(QLabel("Interest rate (%/yr):"), self.rate)
        form.addRow(QLabel("Years:"), self.years)
        form.addRow(QLabel("Months:"), self.months)
        form.addRow(QLabel("Compounding:"), self.compounding)

        self.deposits_label = result_label()
        self.maturity_label = result_label()
        self.interest_label = result_label()
        self.approx_label = QLabel()
        form.addRow(QLabel("Total deposits:"), self.deposits_label)
        form.addRow(QLabel("Maturity value:"), self.maturity_label)
        form.addRow(QLabel("Interest earned:"), self.interest_label)
        form.addRow(QLabel("Closed-form estimate:"), self.approx_label)

        self.schedule = ScheduleTable("Schedule", {"deposit": "Deposit", "interest": "Interest", "balance": "Balance"})

        lay = QVBoxLayout(self)
        lay.addWidget(self.group)
        lay.addWidget(self.schedule, 1)

        self.deposit.textChanged.connect(self.recalculate)
        self.rate.textChanged.connect(self.recalculate)
        self.years.valueChanged.connect(self.recalculate)
        self.months.valueChanged.connect(self.recalculate)
        self.compounding.currentIndexChanged.connect(self.recalculate)
        self.recalculate()

    def values(self) -> dict:
        return {
            "monthly_deposit": read_number(self.deposit),
            "annual_rate_pct": read_number(self.rate),
            "years": self.years.value(),
            "months": self.months.value(),
            "compounding": Compounding(self.compounding.currentData()),
        }

    def recalculate(self) -> None:
        v = self.values()
        monthly = rd_schedule(**v)
        s = rd_summary(monthly)
        self.deposits_label.setText(format_money(s.deposits_total))
        self.maturity_label.setText(format_money(s.maturity))
        self.interest_label.setText(f"{format_money(s.total_interest)} ({format_percent(s.interest_pct)})")
        self.approx_label.setText(format_money(rd_closed_form(**v)) if not monthly.empty else "—")
        self.schedule.set_frames(monthly, yearly_rollup(monthly))
