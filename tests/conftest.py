import time

import pytest
from PyQt6.QtCore import QCoreApplication, QEventLoop

from clipmaster.core.clipboard import ClipboardPoller, HistoryStore
from clipmaster.core.errors import StorageError
from clipmaster.core.storage import DatabaseManager, StateStore
from clipmaster.core.theme import ThemeState
from clipmaster.services import SyncChannel


class MemoryPersistence:
    """In-memory stand-in for StateStore"""

    def __init__(self, **values):
        self.values = dict(values)
        self.fail_writes = False
        self.writes = []

    def get(self, key, default=None):
        return self.values.get(key, default)

    def set(self, key, value):
        self.writes.append(key)
        if self.fail_writes:
            raise StorageError(f"write of '{key}' failed")
        self.values[key] = value


class FakeClipboard:
    def __init__(self, text=""):
        self.text = text
        self.reads = 0
        self.fail_reads = False
        self.fail_writes = False

    def read_text(self):
        self.reads += 1
        if self.fail_reads:
            raise RuntimeError("clipboard unavailable")
        return self.text

    def write_text(self, text):
        if self.fail_writes:
            raise RuntimeError("clipboard unavailable")
        self.text = text


@pytest.fixture(scope="session")
def qapp():
    """Single Qt core application for timer-driven tests."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def pump(qapp):
    """Run the Qt event loop until a predicate holds or the timeout passes."""

    def wait_until(predicate, timeout=1.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            qapp.processEvents(QEventLoop.ProcessEventsFlag.AllEvents, 10)
            if predicate():
                return True
            time.sleep(0.002)
        return predicate()

    return wait_until


@pytest.fixture
def persistence():
    return MemoryPersistence()


@pytest.fixture
def store(persistence):
    return HistoryStore(persistence)


@pytest.fixture
def clipboard():
    return FakeClipboard("already there")


@pytest.fixture
def poller(qapp, clipboard, store):
    p = ClipboardPoller(clipboard, store)
    yield p
    if p.is_running:
        p.stop()


@pytest.fixture
def theme(persistence):
    return ThemeState(persistence)


@pytest.fixture
def pushed():
    """Messages pushed by the channel, in order."""
    return []


@pytest.fixture
def channel(store, theme, poller, clipboard, pushed):
    ch = SyncChannel(store, theme, poller, clipboard)
    ch.message_pushed.connect(pushed.append)
    return ch


@pytest.fixture
def state_store(tmp_path):
    """StateStore over a temporary SQLite file."""
    db = DatabaseManager(str(tmp_path / "state.db"))
    yield StateStore(db)
    db.close()
