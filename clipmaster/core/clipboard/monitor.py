"""Adaptive clipboard polling on the Qt event loop"""

from enum import Enum
from typing import Optional
from PyQt6.QtCore import QObject, QTimer
from loguru import logger

from .history import HistoryStore
from ..errors import StorageError

IDLE_INTERVAL = 5000
ACTIVE_INTERVAL = 200


class PollerState(str, Enum):
    IDLE = 'idle'
    ACTIVE = 'active'


class ClipboardPoller(QObject):
    """Samples the clipboard and feeds changes into the history store.

    Two steady states: IDLE polls slowly while the presentation surface is
    hidden, ACTIVE polls fast while it is visible. A single QTimer is owned
    here; a state switch restarts it at the new interval immediately.
    """

    def __init__(self, clipboard, history: HistoryStore,
                 idle_interval: int = IDLE_INTERVAL,
                 active_interval: int = ACTIVE_INTERVAL,
                 parent: Optional[QObject] = None):
        """
        Initialize clipboard poller

        Args:
            clipboard: Object exposing ``read_text()``
            history: Store receiving newly observed content
            idle_interval: Sampling interval in milliseconds while idle
            active_interval: Sampling interval in milliseconds while active
        """
        super().__init__(parent)
        self._clipboard = clipboard
        self._history = history
        self._intervals = {
            PollerState.IDLE: idle_interval,
            PollerState.ACTIVE: active_interval,
        }
        self._state = PollerState.IDLE
        self._last_observed = ''
        self._running = False

        self._timer = QTimer(self)
        self._timer.timeout.connect(self.check_now)

        logger.info(f"ClipboardPoller initialized (idle={idle_interval}ms, active={active_interval}ms)")

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def interval(self) -> int:
        """Sampling interval of the current state in milliseconds"""
        return self._intervals[self._state]

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def last_observed(self) -> str:
        """Clipboard text seen most recently, by a tick or by our own paste"""
        return self._last_observed

    def mark_observed(self, content: str) -> None:
        """Record text the core itself just wrote so the next tick does not re-capture it"""
        self._last_observed = content

    def start(self) -> None:
        """Start polling; content already on the clipboard is not recorded"""
        if self._running:
            logger.warning("Poller already running")
            return

        try:
            self._last_observed = self._clipboard.read_text() or ''
        except Exception as e:
            logger.debug(f"Initial clipboard read failed: {e}")
            self._last_observed = ''

        self._running = True
        self._timer.start(self.interval)
        logger.info(f"Clipboard polling started ({self._state.value}, {self.interval}ms)")

    def stop(self) -> None:
        if not self._running:
            logger.warning("Poller not running")
            return

        self._timer.stop()
        self._running = False
        logger.info("Clipboard polling stopped")

    def set_active(self, active: bool) -> None:
        """
        Switch between IDLE and ACTIVE

        The pending tick is cancelled and sampling restarts at the new
        interval right away. Setting the current state again is a no-op.
        """
        new_state = PollerState.ACTIVE if active else PollerState.IDLE
        if new_state == self._state:
            return

        self._state = new_state
        if self._running:
            self._timer.start(self.interval)

        logger.debug(f"Clipboard polling interval set to {self.interval}ms")

    def check_now(self) -> None:
        """Run one sampling tick"""
        try:
            current = self._clipboard.read_text()
        except Exception as e:
            # Retried on the next tick
            logger.debug(f"Clipboard read failed: {e}")
            return

        if current is None or current == self._last_observed:
            return

        self._last_observed = current
        try:
            self._history.add(current)
        except StorageError as e:
            logger.error(f"Clipboard change recorded but not persisted: {e}")
