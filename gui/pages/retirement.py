# gui/pages/retirement.py
from PySide6.QtWidgets import QFormLayout, QGroupBox, QHBoxLayout, QLabel, QSpinBox, QTabWidget, QVBoxLayout, QWidget

from core.finance import RetirementInputs, plan_retirement
from core.finance.retirement import accumulation_schedule, accumulation_yearly, withdrawal_schedule, withdrawal_yearly
from core.formatting import format_money
from gui.widgets import ScheduleTable, number_edit, read_number, result_label


def _age_spin(value: int) -> QSpinBox:
    s = QSpinBox()
    s.setRange(0, 120)
    s.setValue(value)
    return s


class RetirementPage(QWidget):
    """Nest egg projection against the capital needed for the desired income."""

    def __init__(self, parent=None):
        super().__init__(parent)
        d = RetirementInputs()

        inputs = QGroupBox("Your Plan")
        form = QFormLayout(inputs)
        self.current_age = _age_spin(d.current_age)
        self.retire_age = _age_spin(d.retire_age)
        self.life_expectancy = _age_spin(d.life_expectancy)
        self.savings = number_edit("50000")
        self.contribution = number_edit("1000")
        self.return_pre = number_edit(d.annual_return_pre_pct, 0.0, 100.0)
        self.return_post = number_edit(d.annual_return_post_pct, 0.0, 100.0)
        self.inflation = number_edit(d.inflation_pct, 0.0, 100.0)
        self.income = number_edit("4000")
        form.addRow(QLabel("Current age:"), self.current_age)
        form.addRow(QLabel("Retirement age:"), self.retire_age)
        form.addRow(QLabel("Life expectancy:"), self.life_expectancy)
        form.addRow(QLabel("Current savings:"), self.savings)
        form.addRow(QLabel("Monthly contribution:"), self.contribution)
        form.addRow(QLabel("Return before retirement (%):"), self.return_pre)
        form.addRow(QLabel("Return after retirement (%):"), self.return_post)
        form.addRow(QLabel("Inflation (%):"), self.inflation)
        form.addRow(QLabel("Desired monthly income (today):"), self.income)

        results = QGroupBox("Projection")
        rform = QFormLayout(results)
        self.nest_egg_label = result_label()
        self.income_label = result_label()
        self.required_label = result_label()
        self.gap_label = result_label()
        rform.addRow(QLabel("Nest egg at retirement:"), self.nest_egg_label)
        rform.addRow(QLabel("Monthly income needed then:"), self.income_label)
        rform.addRow(QLabel("Required nest egg:"), self.required_label)
        rform.addRow(QLabel("Surplus / shortfall:"), self.gap_label)

        top = QHBoxLayout()
        top.addWidget(inputs)
        top.addWidget(results)

        self.accumulation = ScheduleTable("Saving Phase", {"contribution": "Contribution", "interest": "Growth", "balance": "Balance"})
        self.withdrawal = ScheduleTable("Retirement Phase", {"withdrawal": "Withdrawal", "interest": "Growth", "balance": "Balance"})
        tabs = QTabWidget()
        tabs.addTab(self.accumulation, "Saving")
        tabs.addTab(self.withdrawal, "Drawdown")

        lay = QVBoxLayout(self)
        lay.addLayout(top)
        lay.addWidget(tabs, 1)

        for spin in (self.current_age, self.retire_age, self.life_expectancy):
            spin.valueChanged.connect(self.recalculate)
        for edit in (self.savings, self.contribution, self.return_pre, self.return_post, self.inflation, self.income):
            edit.textChanged.connect(self.recalculate)
        self.recalculate()

    def values(self) -> RetirementInputs:
        return RetirementInputs(
            current_age=self.current_age.value(),
            retire_age=self.retire_age.value(),
            life_expectancy=self.life_expectancy.value(),
            current_savings=read_number(self.savings),
            monthly_contribution=read_number(self.contribution),
            annual_return_pre_pct=read_number(self.return_pre),
            annual_return_post_pct=read_number(self.return_post),
            inflation_pct=read_number(self.inflation),
            desired_monthly_income_today=read_number(self.income),
        )

    def recalculate(self) -> None:
        inputs = self.values()
        plan = plan_retirement(inputs)
        self.nest_egg_label.setText(format_money(plan.nest_egg))
        self.income_label.setText(format_money(plan.income_at_retirement))
        self.required_label.setText(format_money(plan.required_nest_egg))
        word = "surplus" if plan.on_track else "shortfall"
        self.gap_label.setText(f"{format_money(abs(plan.surplus))} {word}")

        acc = accumulation_schedule(inputs)
        self.accumulation.set_frames(acc, accumulation_yearly(acc))
        wd = withdrawal_schedule(inputs, plan)
        self.withdrawal.set_frames(wd, withdrawal_yearly(wd))
