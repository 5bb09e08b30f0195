# unit_manager/manager.py
from typing import Optional
from services.persistence import PreferenceStore
from unit_manager.system import ConverterSession

# Singleton instances
__STORE: Optional[PreferenceStore] = None
__SESSION: Optional[ConverterSession] = None

def get_store() -> PreferenceStore:
    """Return the global PreferenceStore (creates on first use)."""
    global __STORE
    if __STORE is None:
        __STORE = PreferenceStore()
    return __STORE

def get_converter_session() -> ConverterSession:
    """Return the global mass ConverterSession (creates on first use)."""
    global __SESSION
    if __SESSION is None:
        __SESSION = ConverterSession(get_store())
    return __SESSION

def set_display(*, mode: Optional[str] = None, precision: Optional[int] = None) -> ConverterSession:
    """Programmatic update; emits displayChanged exactly like the UI would."""
    s = get_converter_session()
    if mode:
        s.set_format_mode(mode)
    if precision is not None:
        s.set_precision(precision)
    return s
