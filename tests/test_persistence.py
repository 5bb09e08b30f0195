# tests/test_persistence.py

import json

import pytest

from services.persistence import HOME_ENV, PreferenceStore, StorageError
from services.schemas import HISTORY_ENTRY_SCHEMA, TIMER_SCHEMA


def test_save_then_load(store):
    assert store.save("mass:favorites", ["kg", "lb"]) is True
    assert store.load("mass:favorites") == ["kg", "lb"]


def test_missing_key_returns_default(store):
    assert store.load("nothing", default={"a": 1}) == {"a": 1}


def test_keys_map_to_safe_filenames(store):
    path = store.path_for("mass:history")
    assert path.parent == store.base_dir
    assert path.name == "mass_history.json"
    assert store.path_for("../../etc").parent == store.base_dir


def test_corrupt_file_reads_as_default_and_is_backed_up(store):
    path = store.path_for("mass:history")
    path.write_text("{not json", encoding="utf-8")
    assert store.load("mass:history", default=[]) == []
    assert path.with_suffix(".json.corrupt.bak").exists()


def test_previous_version_is_kept_as_backup(store):
    store.save("k", [1])
    store.save("k", [2])
    backup = store.path_for("k").with_suffix(".json.bak")
    assert json.loads(backup.read_text(encoding="utf-8")) == [1]
    assert store.load("k") == [2]


def test_non_json_value_is_a_programming_error(store):
    with pytest.raises(StorageError):
        store.save("k", {"when": object()})


def test_load_list_drops_invalid_items_only(store):
    store.save("mass:history", [
        {"v": "1", "from": "kg", "to": "lb", "ts": 1},
        {"v": "2", "from": "kg"},
        "junk",
        {"v": "3", "from": "g", "to": "oz"},
    ])
    kept = store.load_list("mass:history", HISTORY_ENTRY_SCHEMA)
    assert [d["v"] for d in kept] == ["1", "3"]


def test_load_list_non_array_is_empty(store):
    store.save("countdown:timers", {"id": "x"})
    assert store.load_list("countdown:timers", TIMER_SCHEMA) == []


def test_flags_are_stored_as_strings(store):
    assert store.load_flag("adv") is False
    store.save_flag("adv", True)
    assert store.load("adv") == "1"
    assert store.load_flag("adv") is True
    store.save_flag("adv", False)
    assert store.load_flag("adv", default=True) is False


def test_remove(store):
    store.save("k", 1)
    store.remove("k")
    assert store.load("k", default=None) is None


def test_env_var_overrides_base_dir(tmp_path, monkeypatch):
    monkeypatch.setenv(HOME_ENV, str(tmp_path / "from-env"))
    s = PreferenceStore()
    assert s.base_dir == (tmp_path / "from-env").resolve()
    assert s.available


def test_unavailable_storage_fails_soft(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    s = PreferenceStore(base_dir=blocker / "sub")
    assert s.available is False
    assert s.save("k", [1]) is False
    assert s.load("k", default="d") == "d"
    assert s.load_list("k") == []
