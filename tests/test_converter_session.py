# tests/test_converter_session.py

import pytest

from core.formatting import FormatMode
from services.history import HISTORY_KEY
from unit_manager import ConverterSession


@pytest.fixture
def session(qapp, store):
    return ConverterSession(store)


def test_defaults(session):
    assert (session.from_unit, session.to_unit) == ("kg", "lb")
    assert session.value == 0
    assert not session.has_input
    assert session.result() == 0


def test_value_change_emits_and_records(session):
    seen = []
    session.conversionChanged.connect(lambda: seen.append(session.value_text))
    session.set_value_text("2")
    session.set_value_text("2")
    assert seen == ["2"]
    assert session.result() == pytest.approx(4.40924524)
    assert session.history.entries[0].value == "2"


def test_grouped_input_parses(session):
    session.set_value_text("1,000")
    assert session.value == 1000


def test_unknown_unit_is_ignored(session):
    assert session.set_from_unit("xyz") is False
    assert session.from_unit == "kg"
    assert session.set_to_unit("oz") is True
    assert session.to_unit == "oz"


def test_swap(session):
    session.set_value_text("1")
    session.swap_units()
    assert (session.from_unit, session.to_unit) == ("lb", "kg")
    assert session.result() == pytest.approx(0.45359237)


def test_display_change_does_not_touch_history(session):
    shown = []
    session.displayChanged.connect(lambda m, p: shown.append((m, p)))
    before = len(session.history)
    session.set_format_mode("scientific")
    session.set_precision(99)
    assert shown == [("scientific", 6), ("scientific", 12)]
    assert len(session.history) == before


def test_url_state_round_trip(qapp, session, store):
    session.set_value_text("3.5")
    session.set_from_unit("st")
    session.set_to_unit("g")
    session.set_format_mode(FormatMode.COMPACT)
    session.set_precision(2)

    other = ConverterSession(store)
    other.apply_url_state(session.share_url())
    assert other.to_url_state() == session.to_url_state()


def test_apply_url_state_skips_bad_fields(session):
    session.apply_url_state("?v=9&from=nope&to=oz&p=77")
    assert session.value_text == "9"
    assert session.from_unit == "kg"
    assert session.to_unit == "oz"
    assert session.display.precision == 6


def test_restore_history_entry(session):
    session.restore("12", "oz", "g")
    assert (session.value_text, session.from_unit, session.to_unit) == ("12", "oz", "g")
    assert session.result() == pytest.approx(340.1942775)


def test_history_is_persisted(session, store):
    session.set_value_text("5")
    saved = store.load(HISTORY_KEY)
    assert saved[0]["v"] == "5" and saved[0]["from"] == "kg"


def test_summary_line(session, monkeypatch):
    monkeypatch.setattr(session.display, "format", lambda n: f"{n:.2f}")
    session.set_value_text("1")
    assert session.summary_line() == "1 kg = 2.20 lb"


def test_global_session_and_set_display(qapp, tmp_path, monkeypatch):
    from services.persistence import HOME_ENV
    from unit_manager import manager

    monkeypatch.setenv(HOME_ENV, str(tmp_path))
    monkeypatch.setattr(manager, "__STORE", None)
    monkeypatch.setattr(manager, "__SESSION", None)

    s = manager.get_converter_session()
    assert manager.get_converter_session() is s
    assert manager.get_store().base_dir == tmp_path.resolve()

    manager.set_display(mode="compact", precision=3)
    assert s.display.to_dict() == {"fmt": "compact", "p": 3}
    manager.set_display(mode="bogus")
    assert s.display.format_mode is FormatMode.COMPACT
