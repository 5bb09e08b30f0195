# gui/pages/disclaimer.py
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget

DISCLAIMER_TEXT = (
    "<h3>Disclaimer</h3>"
    "<p>The calculators in this application are provided for general information "
    "and educational purposes only. Results are estimates based on the figures "
    "you enter and simplified formulas; they are not financial, tax or "
    "investment advice.</p>"
    "<p>Ad revenue estimates use typical CPM and RPM ranges that change with "
    "season, niche and platform policy. Actual payouts will differ.</p>"
    "<p>Unit conversions use exact international definitions where they exist. "
    "Displayed values are rounded for readability; copied and exported values "
    "keep full precision.</p>"
)


class DisclaimerPage(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        text = QLabel(DISCLAIMER_TEXT)
        text.setWordWrap(True)
        text.setTextFormat(Qt.RichText)
        text.setAlignment(Qt.AlignTop | Qt.AlignLeft)
        lay = QVBoxLayout(self)
        lay.addWidget(text)
        lay.addStretch()
