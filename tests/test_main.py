import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from main import log_report


class CountingLoader:
    def __init__(self) -> None:
        self.calls = 0

    def report_text(self) -> str:
        self.calls += 1
        return "Proxy Loader - Loading Statistics"


def test_report_not_built_without_debug_logging(caplog):
    caplog.set_level(logging.INFO, logger="main")
    loader = CountingLoader()
    log_report(loader)
    assert loader.calls == 0


def test_report_logged_at_debug(caplog):
    caplog.set_level(logging.DEBUG, logger="main")
    loader = CountingLoader()
    log_report(loader)
    assert loader.calls == 1
    assert "Loading Statistics" in caplog.text
