"""Deferred, aggregated notification of plugin load failures."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from PyQt6 import QtCore, QtWidgets

from data_model import ErrorLog

logger = logging.getLogger(__name__)


def defer_to_event_loop(callback: Callable[[], None]) -> None:
    """Run ``callback`` once control returns to the Qt event loop."""
    QtCore.QTimer.singleShot(0, callback)


def show_blocking_message(text: str) -> None:
    count = text.count("=== Load Error ===")
    box = QtWidgets.QMessageBox()
    box.setIcon(QtWidgets.QMessageBox.Icon.Warning)
    box.setWindowTitle("Proxy Loader")
    box.setText(f"{count} plugin file(s) failed to load.")
    box.setDetailedText(text)
    box.setStandardButtons(QtWidgets.QMessageBox.StandardButton.Ok)
    box.exec()


class ErrorReporter:
    def __init__(
        self,
        notify: Callable[[str], None] = show_blocking_message,
        defer: Callable[[Callable[[], None]], None] = defer_to_event_loop,
    ) -> None:
        self.notify = notify
        self.defer = defer
        self.pending: Optional[str] = None

    def report(self, error_log: ErrorLog) -> bool:
        """Schedule one notification with the whole log; no-op when empty."""
        if error_log.is_empty():
            return False
        self.pending = error_log.text
        logger.info("%d plugin file(s) failed to load; notifying after startup", len(error_log))
        self.defer(self._deliver)
        return True

    def _deliver(self) -> None:
        text, self.pending = self.pending, None
        if text:
            self.notify(text)
