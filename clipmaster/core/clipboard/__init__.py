"""Clipboard monitoring and history management"""

from .history import HistoryItem, HistoryStore
from .monitor import ClipboardPoller, PollerState
from .system import SystemClipboard

__all__ = ['HistoryItem', 'HistoryStore', 'ClipboardPoller', 'PollerState', 'SystemClipboard']
