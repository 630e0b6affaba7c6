import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from data_model import ErrorLog, LoadFailure
from error_reporter import ErrorReporter


class Deferred:
    def __init__(self) -> None:
        self.queue = []

    def __call__(self, callback) -> None:
        self.queue.append(callback)

    def run(self) -> None:
        while self.queue:
            self.queue.pop(0)()


def _failure(name: str) -> LoadFailure:
    return LoadFailure(file=f"/plugins/A/{name}", folder="/plugins/A", message=f"SyntaxError: bad {name}", trace="Traceback ...\n")


def test_empty_log_is_a_noop():
    shown = []
    deferred = Deferred()
    reporter = ErrorReporter(notify=shown.append, defer=deferred)
    assert reporter.report(ErrorLog()) is False
    assert deferred.queue == []
    assert shown == []


def test_notification_waits_for_deferral():
    shown = []
    deferred = Deferred()
    log = ErrorLog()
    log.append(_failure("a.py"))
    log.append(_failure("b.py"))
    reporter = ErrorReporter(notify=shown.append, defer=deferred)

    assert reporter.report(log) is True
    assert shown == []
    assert len(deferred.queue) == 1

    deferred.run()
    assert shown == [log.text]
    assert "File: a.py" in shown[0]
    assert "File: b.py" in shown[0]
    assert "SyntaxError: bad b.py" in shown[0]


def test_failure_block_format():
    text = _failure("a.py").format()
    assert text.splitlines()[:5] == [
        "=== Load Error ===",
        "File: a.py",
        "Path: /plugins/A",
        "--- Error Message ---",
        "SyntaxError: bad a.py",
    ]
    assert text.endswith("\n\n")


def test_notification_delivered_at_most_once():
    shown = []
    deferred = Deferred()
    log = ErrorLog()
    log.append(_failure("a.py"))
    reporter = ErrorReporter(notify=shown.append, defer=deferred)
    reporter.report(log)
    reporter.report(log)
    deferred.run()
    assert len(shown) == 1
