"""Application services"""

from .sync_channel import SyncChannel
from .messages import (
    SnapshotMessage, ThemeChangedMessage, PasteRequest, DeleteRequest,
    ThemeToggleRequest, CloseRequest, ClearRequest, parse_command,
)

__all__ = [
    'SyncChannel', 'SnapshotMessage', 'ThemeChangedMessage', 'PasteRequest',
    'DeleteRequest', 'ThemeToggleRequest', 'CloseRequest', 'ClearRequest',
    'parse_command',
]
