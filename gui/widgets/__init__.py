# gui/widgets/__init__.py

from .fields import number_edit, read_number, result_label
from .schedule_table import ScheduleTable

__all__ = ["ScheduleTable", "number_edit", "read_number", "result_label"]
