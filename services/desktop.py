# services/desktop.py
"""
Optional desktop integrations: clipboard, tray notifications, audio cue.

Each call degrades to a no-op returning False when the platform piece is
missing (no GUI application, no system tray), so the calculation path is
never blocked by them.
"""
from __future__ import annotations

import logging

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication, QSystemTrayIcon

log = logging.getLogger(__name__)

_tray: QSystemTrayIcon | None = None


def copy_to_clipboard(text: str) -> bool:
    if QGuiApplication.instance() is None:
        return False
    try:
        QGuiApplication.clipboard().setText(text)
        return True
    except RuntimeError as e:
        log.warning("desktop: clipboard unavailable: %s", e)
        return False


def notify(title: str, message: str, timeout_ms: int = 8000) -> bool:
    global _tray
    if not isinstance(QApplication.instance(), QApplication):
        return False
    if not QSystemTrayIcon.isSystemTrayAvailable() or not QSystemTrayIcon.supportsMessages():
        log.info("desktop: tray notifications unavailable")
        return False
    if _tray is None:
        _tray = QSystemTrayIcon(QApplication.windowIcon())
        _tray.show()
    _tray.showMessage(title, message, QSystemTrayIcon.MessageIcon.Information, timeout_ms)
    return True


def play_chime(muted: bool = False) -> bool:
    if muted or not isinstance(QApplication.instance(), QApplication):
        return False
    QApplication.beep()
    return True
