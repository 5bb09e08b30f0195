# services/persistence.py
from __future__ import annotations

import json
import logging
import os
import re
import shutil
import tempfile
import threading
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, List, Optional, Union

import jsonschema

log = logging.getLogger(__name__)

HOME_ENV = "QUICKCALC_HOME"

_SAFE_CHARS_RE = re.compile(r"[^\w\-\.]+")
_UNDERSCORE_RUN_RE = re.compile(r"_+")


def _expand(path: Union[str, Path]) -> Path:
    return Path(os.path.expanduser(str(path))).resolve()


def _safe_name(name: str) -> str:
    """Storage key -> single filesystem-friendly path component."""
    s = str(name or "").strip()
    s = _SAFE_CHARS_RE.sub("_", s)
    s = _UNDERSCORE_RUN_RE.sub("_", s).strip("_")
    if not s or s in {".", ".."}:
        return "unnamed"
    return s[:128]


class StorageError(RuntimeError):
    pass


class PreferenceStore:
    """
    Small persisted key-value store, one JSON file per key.

    - Atomic writes (tempfile + os.replace) with a .bak of the previous file
    - Fails soft: a missing, corrupt or unreadable key loads as its default
      and a failed write is logged and reported as False
    - jsonschema validation for persisted lists, item by item

    Typical use:
        store = PreferenceStore()
        favorites = store.load("mass:favorites", default=["kg", "lb"])
        store.save("mass:favorites", favorites)
    """

    def __init__(
        self,
        app_name: str = "quickcalc",
        base_dir: Optional[Union[str, Path]] = None,
    ):
        self._lock = threading.RLock()
        self.app_name = app_name
        self.base_dir = _expand(base_dir or os.environ.get(HOME_ENV) or Path.home() / f".{app_name}")
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            self.available = True
        except OSError as e:
            log.warning("PreferenceStore: storage unavailable at %s: %s", self.base_dir, e)
            self.available = False

    # ------------- generic API -------------

    def load(self, key: str, default: Any = None) -> Any:
        """Return the stored value for key, or default when missing or unreadable."""
        if not self.available:
            return default
        path = self.path_for(key)
        with self._lock:
            if not path.exists():
                return default
            try:
                return self._read_json(path)
            except (OSError, ValueError) as e:
                log.warning("PreferenceStore: unreadable %s, using default: %s", path.name, e)
                self._backup_corrupt(path)
                return default

    def save(self, key: str, value: Any) -> bool:
        """
        Persist value under key. Returns False when the write failed; the
        caller's in-memory state stays authoritative either way.
        """
        payload = asdict(value) if is_dataclass(value) else value
        try:
            json.dumps(payload)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for '{key}' is not JSON-serializable: {e}") from e
        if not self.available:
            return False
        path = self.path_for(key)
        with self._lock:
            try:
                self._atomic_write(path, payload, make_backup=True)
                return True
            except OSError as e:
                log.warning("PreferenceStore: write failed for %s: %s", path.name, e)
                return False

    def remove(self, key: str) -> None:
        if not self.available:
            return
        path = self.path_for(key)
        with self._lock:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                log.warning("PreferenceStore: could not remove %s: %s", path.name, e)

    # ------------- typed helpers -------------

    def load_list(self, key: str, item_schema: Optional[dict] = None) -> List[Any]:
        """
        Load a persisted list. Non-array payloads read as an empty list;
        items failing item_schema are dropped, the rest are kept in order.
        """
        data = self.load(key, default=[])
        if not isinstance(data, list):
            log.warning("PreferenceStore: %s is not a list, ignoring", key)
            return []
        if item_schema is None:
            return data
        validator = jsonschema.Draft7Validator(item_schema)
        kept = [item for item in data if validator.is_valid(item)]
        if len(kept) != len(data):
            log.info("PreferenceStore: dropped %d invalid item(s) from %s", len(data) - len(kept), key)
        return kept

    def load_flag(self, key: str, default: bool = False) -> bool:
        raw = self.load(key, default=None)
        if isinstance(raw, bool):
            return raw
        if raw in ("1", 1):
            return True
        if raw in ("0", 0):
            return False
        return default

    def save_flag(self, key: str, value: bool) -> bool:
        return self.save(key, "1" if value else "0")

    # ------------- internal utils -------------

    def path_for(self, key: str) -> Path:
        return self.base_dir / f"{_safe_name(key)}.json"

    def _read_json(self, path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    def _atomic_write(self, path: Path, data: Any, make_backup: bool = False) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=path.stem + ".", suffix=".tmp", dir=str(path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            if path.exists() and make_backup:
                backup = path.with_suffix(path.suffix + ".bak")
                shutil.copy2(path, backup)
            os.replace(tmp, path)
        finally:
            # tmp is gone when replace succeeded
            if os.path.exists(tmp):
                try:
                    os.remove(tmp)
                except OSError:
                    log.debug("PreferenceStore: could not clean up %s", tmp)

    def _backup_corrupt(self, path: Path) -> None:
        try:
            shutil.copy2(path, path.with_suffix(path.suffix + ".corrupt.bak"))
        except OSError as e:
            log.debug("PreferenceStore: corrupt backup skipped for %s: %s", path.name, e)
