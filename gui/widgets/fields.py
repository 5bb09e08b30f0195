# gui/widgets/fields.py
from PySide6.QtCore import Qt
from PySide6.QtGui import QDoubleValidator
from PySide6.QtWidgets import QLabel, QLineEdit

from core.inputs import parse_number


def number_edit(text="", lo=0.0, hi=1e15, decimals=2) -> QLineEdit:
    """QLineEdit restricted to plain decimals; grouping commas are stripped on read."""
    edit = QLineEdit(str(text))
    v = QDoubleValidator(lo, hi, decimals, edit)
    v.setNotation(QDoubleValidator.Notation.StandardNotation)
    edit.setValidator(v)
    edit.setAlignment(Qt.AlignRight)
    return edit


def read_number(edit: QLineEdit, default: float = 0.0) -> float:
    return parse_number(edit.text(), default)


def result_label(text="—") -> QLabel:
    lab = QLabel(text)
    lab.setTextInteractionFlags(Qt.TextSelectableByMouse)
    lab.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
    f = lab.font()
    f.setBold(True)
    lab.setFont(f)
    return lab
