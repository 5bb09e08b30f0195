# tests/test_history_favorites.py

import pytest

from services.favorites import DEFAULT_FAVORITES, FAVORITES_KEY, FavoritesList
from services.history import HISTORY_CAPACITY, HISTORY_KEY, ConversionHistory
from unit_manager import UnknownUnitError


# ---------------- history ----------------

def test_history_is_newest_first_and_capped(store):
    h = ConversionHistory(store)
    for i in range(HISTORY_CAPACITY + 5):
        h.record(str(i), "kg", "lb", timestamp_ms=i)
    assert len(h) == HISTORY_CAPACITY
    assert h.entries[0].value == str(HISTORY_CAPACITY + 4)
    assert h.entries[-1].value == "5"


def test_history_skips_only_adjacent_duplicates(store):
    """A repeat of the latest entry is dropped; A, B, A keeps all three."""
    h = ConversionHistory(store)
    assert h.record("1", "kg", "lb") is True
    assert h.record("1", "kg", "lb") is False
    h.record("2", "kg", "lb")
    h.record("1", "kg", "lb")
    assert [e.value for e in h] == ["1", "2", "1"]


def test_history_empty_value_is_stored_as_zero(store):
    h = ConversionHistory(store)
    h.record("", "g", "oz")
    assert h.entries[0].value == "0"


def test_history_survives_reload(store):
    ConversionHistory(store).record("4.2", "st", "kg", timestamp_ms=99)
    again = ConversionHistory(store)
    e = again.entries[0]
    assert (e.value, e.from_unit, e.to_unit, e.timestamp_ms) == ("4.2", "st", "kg", 99)


def test_history_reload_drops_invalid_entries(store):
    store.save(HISTORY_KEY, [{"v": "1", "from": "kg", "to": "lb", "ts": 5}, {"bogus": True}])
    assert len(ConversionHistory(store)) == 1


@pytest.mark.parametrize("ts", ["Infinity", "-Infinity", "NaN"])
def test_history_reload_tolerates_non_finite_timestamp(store, ts):
    """json accepts Infinity/NaN; such a timestamp reads as 0 instead of failing the load."""
    path = store.path_for(HISTORY_KEY)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f'[{{"v": "1", "from": "kg", "to": "lb", "ts": {ts}}}]', encoding="utf-8")
    h = ConversionHistory(store)
    assert len(h) == 1
    assert h.entries[0].timestamp_ms == 0
    assert h.entries[0].value == "1"


def test_history_clear(store):
    h = ConversionHistory(store)
    h.record("1", "kg", "lb")
    h.clear()
    assert len(h) == 0
    assert store.load(HISTORY_KEY) == []


# ---------------- favorites ----------------

def test_favorites_default_when_nothing_stored(store):
    assert FavoritesList(store).keys == list(DEFAULT_FAVORITES)


def test_favorites_toggle_and_persist(store):
    f = FavoritesList(store)
    assert f.toggle("lb") is False           # removed
    assert "lb" not in f
    assert f.toggle("LBS") is True           # alias adds the canonical key
    assert f.keys[-1] == "lb"
    assert FavoritesList(store).keys == f.keys


def test_favorites_capacity_rejects_new_entry(store):
    f = FavoritesList(store)
    assert len(f) == 6
    assert f.toggle("slug") is False
    assert "slug" not in f
    assert len(f) == 6


def test_favorites_unknown_unit_raises(store):
    with pytest.raises(UnknownUnitError):
        FavoritesList(store).toggle("xyz")


def test_favorites_cleans_stored_list(store):
    store.save(FAVORITES_KEY, ["kg", "KG", "nope", 3, "oz"])
    assert FavoritesList(store).keys == ["kg", "oz"]


def test_favorites_non_list_payload_reads_empty(store):
    store.save(FAVORITES_KEY, {"kg": True})
    assert FavoritesList(store).keys == []


def test_favorites_partition_keeps_registry_order(store):
    store.save(FAVORITES_KEY, ["lb", "g"])
    favored, others = FavoritesList(store).partition()
    assert [u.key for u in favored] == ["g", "lb"]
    assert "kg" in [u.key for u in others]
