"""Messages exchanged with the presentation layer.

Every message serializes to ``{"type": <tag>, "payload": <payload>}``.
Pushes travel core -> presentation, commands presentation -> core.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Tuple

from ..core.clipboard.history import HistoryItem
from ..core.theme import Theme


@dataclass(frozen=True)
class SnapshotMessage:
    type: ClassVar[str] = 'snapshot'
    history: Tuple[HistoryItem, ...]
    theme: Theme

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'payload': {
                'history': [item.to_dict() for item in self.history],
                'theme': self.theme.value,
            },
        }


@dataclass(frozen=True)
class ThemeChangedMessage:
    type: ClassVar[str] = 'themeChanged'
    theme: Theme

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, 'payload': self.theme.value}


@dataclass(frozen=True)
class PasteRequest:
    type: ClassVar[str] = 'requestPaste'
    content: str


@dataclass(frozen=True)
class DeleteRequest:
    type: ClassVar[str] = 'requestDelete'
    item_id: str


@dataclass(frozen=True)
class ThemeToggleRequest:
    type: ClassVar[str] = 'requestThemeToggle'


@dataclass(frozen=True)
class CloseRequest:
    type: ClassVar[str] = 'requestClose'


@dataclass(frozen=True)
class ClearRequest:
    type: ClassVar[str] = 'requestClear'


def parse_command(data: Any) -> Optional[object]:
    """
    Build a command from its wire form

    Args:
        data: ``{"type": ..., "payload": ...}`` as sent by the presentation layer

    Returns:
        The command, or None if the message is malformed or unknown
    """
    if not isinstance(data, dict):
        return None

    kind = data.get('type')
    payload = data.get('payload')

    if kind == PasteRequest.type:
        if isinstance(payload, str) and payload:
            return PasteRequest(payload)
        return None

    if kind == DeleteRequest.type:
        if isinstance(payload, str) and payload:
            return DeleteRequest(payload)
        return None

    simple = {
        ThemeToggleRequest.type: ThemeToggleRequest,
        CloseRequest.type: CloseRequest,
        ClearRequest.type: ClearRequest,
    }
    if kind in simple:
        return simple[kind]()

    return None
