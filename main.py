"""
Plugin Proxy Loader
-------------------

Loads every plugin found in the folders under a set of configured
locations, reports load errors once after startup and keeps per-folder
load-time statistics across runs.

Dependencies
------------
pip install PyQt6 pyqtgraph pandas numpy

Run
---
python main.py [config.json]
"""
from __future__ import annotations

import logging
import sys

import pyqtgraph as pg
from PyQt6 import QtWidgets

from dialogs import LoadStatsDialog
from error_reporter import ErrorReporter, show_blocking_message
from errors import ConfigError
from log_config import configure_logging
from loader_config import LoaderConfig
from proxy_loader import ProxyLoader

logger = logging.getLogger(__name__)


def log_report(loader: ProxyLoader) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("%s", loader.report_text())


def main() -> None:
    app = QtWidgets.QApplication(sys.argv)
    pg.setConfigOptions(antialias=True)
    args = app.arguments()[1:]
    try:
        config = LoaderConfig.load(args[0]) if args else LoaderConfig()
    except ConfigError as exc:
        configure_logging()
        logger.error("%s", exc)
        sys.exit(2)
    configure_logging(config.log_level)

    def notify(text: str) -> None:
        show_blocking_message(text)
        if not config.show_stats:
            app.quit()

    loader = ProxyLoader(config, reporter=ErrorReporter(notify=notify))
    session = loader.run()
    loader.search_path.install()
    log_report(loader)
    if config.show_stats:
        dialog = LoadStatsDialog(loader.stats.to_frame(session), loader.report_text())
        dialog.show()
    elif session.error_log.is_empty():
        sys.exit(0)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
