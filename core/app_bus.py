# core/app_bus.py
from PySide6.QtCore import QObject, Signal

class AppBus(QObject):
    """
    Centralized global signal hub for the entire application.
    Any page or controller can subscribe or emit.
    """

    # ---- Converter ----
    displaySettingsChanged = Signal(str, int)  # (format mode, precision)
    historyChanged = Signal(object)            # list[HistoryEntry]
    favoritesChanged = Signal(object)          # list[str]

    # ---- Countdown ----
    timersChanged = Signal(object)             # list[TimerItem]
    timerCompleted = Signal(object)            # TimerItem

    # ---- Status ----
    statusMessage = Signal(str)


# Singleton pattern
_app_bus: AppBus | None = None

def get_app_bus() -> AppBus:
    global _app_bus
    if _app_bus is None:
        _app_bus = AppBus()
    return _app_bus
