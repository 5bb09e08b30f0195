# tests/test_export.py

import csv
import io
from datetime import datetime, timezone

from core.countdown import TimerItem
from core.finance.recurring_deposit import rd_schedule
from services import desktop
from services.export import (
    export_timers_pdf,
    grid_clipboard_text,
    grid_to_csv,
    schedule_to_csv,
    timers_summary_text,
    write_text,
)
from unit_manager import Unit, UnitRegistry, convert_all

T0 = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


def test_grid_csv_quotes_every_field():
    text = grid_to_csv({"lb": 2.2046226218487757, "g": 1000.0})
    lines = text.splitlines()
    assert lines[0] == '"Unit","Value"'
    assert lines[1] == '"Pound (lb)","2.2046226218487757"'
    assert lines[2] == '"Gram (g)","1000.0"'


def test_grid_csv_doubles_embedded_quotes():
    reg = UnitRegistry([Unit("in", 'Inch (")', 1.0)], base_key="in")
    text = grid_to_csv({"in": 1.0}, reg)
    assert '"Inch ("")"' in text
    rows = list(csv.reader(io.StringIO(text)))
    assert rows[1] == ['Inch (")', "1.0"]


def test_grid_csv_keeps_full_precision():
    grid = convert_all(1, "kg")
    rows = list(csv.DictReader(io.StringIO(grid_to_csv(grid))))
    assert len(rows) == len(grid)
    by_name = {r["Unit"]: float(r["Value"]) for r in rows}
    assert by_name["Pound (lb)"] == grid["lb"]


def test_clipboard_text():
    assert grid_clipboard_text({"oz": 16.0, "g": 453.59237}) == "Ounce (oz): 16.0\nGram (g): 453.59237"


def test_schedule_csv_and_write(tmp_path):
    text = schedule_to_csv(rd_schedule(100.0, 12, 0, 3))
    assert text.splitlines()[0] == "period,deposit,interest,balance"
    assert text.splitlines()[3] == "3,100.00,9.00,309.00"
    out = write_text(tmp_path / "sub" / "rd.csv", text)
    assert out.read_text(encoding="utf-8") == text


def test_timers_summary_text():
    timers = [
        TimerItem("a", T0, T0, title="Launch", description="Go time"),
        TimerItem("b", T0, T0),
    ]
    text = timers_summary_text(timers)
    assert text.startswith("1. Launch\n   Target: 2026-03-01T09:30:00.000Z\n   Go time")
    assert "2. Untitled timer" in text


def test_timers_pdf(qapp, tmp_path):
    path = export_timers_pdf(tmp_path / "timers.pdf", [TimerItem("a", T0, T0, title="<Tea & cake>")])
    assert path.read_bytes()[:4] == b"%PDF"


def test_desktop_chime_respects_mute(qapp):
    assert desktop.play_chime(muted=True) is False
    assert desktop.play_chime() is True
    assert desktop.notify("t", "m") in (True, False)
