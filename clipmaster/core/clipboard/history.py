"""Bounded clipboard history with adjacent-duplicate suppression"""

import time
import uuid
from typing import List, Optional, Dict, Any, Callable, Set
from dataclasses import dataclass, replace
from loguru import logger


def _now_ms() -> int:
    return int(time.time() * 1000)


def generate_id(timestamp: Optional[int] = None) -> str:
    """Unique item id: creation millis plus a random suffix"""
    if timestamp is None:
        timestamp = _now_ms()
    return f"{timestamp}-{uuid.uuid4().hex[:9]}"


@dataclass(frozen=True)
class HistoryItem:
    """Single recorded clipboard snapshot"""
    id: str
    content: str
    timestamp: int  # milliseconds since the epoch
    char_count: int
    is_truncated: bool = False

    def truncated(self, max_characters: int) -> "HistoryItem":
        """Same item cut to max_characters; returns self when it already fits"""
        if len(self.content) <= max_characters:
            return self
        content = self.content[:max_characters]
        return replace(self, content=content, char_count=len(content), is_truncated=True)

    def preview(self, length: int = 50) -> str:
        return self.content[:length]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted/wire form"""
        return {
            'id': self.id,
            'content': self.content,
            'timestamp': self.timestamp,
            'charCount': self.char_count,
            'isTruncated': self.is_truncated,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HistoryItem':
        """Create from the persisted form; raises KeyError/TypeError/ValueError if malformed"""
        content = data['content']
        if not isinstance(content, str):
            raise TypeError("content must be a string")
        return cls(
            id=str(data['id']),
            content=content,
            timestamp=int(data['timestamp']),
            char_count=len(content),
            is_truncated=bool(data.get('isTruncated', False)),
        )


class HistoryStore:
    """Owns the newest-first history sequence and its persistence.

    Invariants held between every public call:
      * ``len(items) <= maxHistory``
      * the head item never equals the item recorded right before it
      * ``item.char_count == len(item.content) <= maxCharacters``

    Limits are read from the persistence capability on every ``add`` so an
    external change to ``maxHistory``/``maxCharacters`` applies immediately.
    """

    def __init__(self, persistence):
        """
        Initialize history store

        Args:
            persistence: Object exposing ``get(key, default)`` and ``set(key, value)``

        Raises:
            StorageError: If the loaded history had to be repaired and could not be saved
        """
        self._persistence = persistence
        self._listeners: Set[Callable[[HistoryItem], None]] = set()
        self._items: List[HistoryItem] = []
        self._load()

        logger.info(f"HistoryStore initialized with {len(self._items)} items "
                    f"(max_history={self.max_history}, max_characters={self.max_characters})")

    def _load(self) -> None:
        """Read persisted items, re-applying the current limits"""
        stored = self._persistence.get('history', []) or []
        max_characters = self.max_characters

        items = []
        for raw in stored:
            try:
                items.append(HistoryItem.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed history item: {e}")

        self._items = [item.truncated(max_characters) for item in items[:self.max_history]]

        if [item.to_dict() for item in self._items] != stored:
            logger.info("Persisted history did not fit current limits, rewriting")
            self._save()

    def _limit(self, key: str, default: int) -> int:
        value = self._persistence.get(key, default)
        try:
            value = int(value)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid stored {key}: {value!r}")
            return default

        if value < 1:
            logger.warning(f"Ignoring invalid stored {key}: {value!r}")
            return default
        return value

    @property
    def max_history(self) -> int:
        return self._limit('maxHistory', 30)

    @property
    def max_characters(self) -> int:
        return self._limit('maxCharacters', 5000)

    def add_listener(self, callback: Callable[[HistoryItem], None]) -> None:
        """Register a callback invoked with each newly recorded item"""
        self._listeners.add(callback)

    def add(self, raw_content) -> Optional[HistoryItem]:
        """
        Record clipboard content

        Args:
            raw_content: Text read from the clipboard (anything else is ignored)

        Returns:
            The new item, or None if the content was empty, not text, or
            equal to the current head item

        Raises:
            StorageError: If persisting fails (the item is still recorded in memory)
        """
        if not isinstance(raw_content, str):
            return None

        content = raw_content.strip()
        if not content:
            return None

        max_characters = self.max_characters
        is_truncated = len(content) > max_characters
        if is_truncated:
            content = content[:max_characters]

        if self._items and self._items[0].content == content:
            logger.debug("Suppressed adjacent duplicate")
            return None

        timestamp = _now_ms()
        item = HistoryItem(
            id=generate_id(timestamp),
            content=content,
            timestamp=timestamp,
            char_count=len(content),
            is_truncated=is_truncated,
        )

        self._items.insert(0, item)
        max_history = self.max_history
        if len(self._items) > max_history:
            evicted = len(self._items) - max_history
            del self._items[max_history:]
            logger.debug(f"Evicted {evicted} oldest item(s)")

        logger.info(f"Added to history: {item.preview()!r} ({item.char_count} chars)")

        try:
            self._save()
        finally:
            self._notify(item)

        return item

    def list(self) -> List[HistoryItem]:
        """Snapshot of the history, newest first"""
        return list(self._items)

    def get(self, item_id: str) -> Optional[HistoryItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def search(self, query: str) -> List[HistoryItem]:
        """
        Case-insensitive substring search

        Args:
            query: Search text; blank returns the whole history

        Returns:
            Matching items, newest first
        """
        query = (query or '').strip().lower()
        if not query:
            return self.list()

        return [item for item in self._items if query in item.content.lower()]

    def delete(self, item_id: str) -> bool:
        """
        Remove an item by id

        Returns:
            True if an item was removed; deleting an unknown id is a no-op
        """
        remaining = [item for item in self._items if item.id != item_id]
        removed = len(remaining) != len(self._items)
        self._items = remaining

        if removed:
            logger.info(f"Deleted item: {item_id}")
        else:
            logger.debug(f"Delete ignored, unknown id: {item_id}")

        self._save()
        return removed

    def clear(self) -> None:
        """Clear all history"""
        self._items = []
        logger.info("Clipboard history cleared")
        self._save()

    def configure(self, max_history: Optional[int] = None, max_characters: Optional[int] = None) -> None:
        """
        Change the history limits

        A smaller capacity evicts the oldest items right away, and a smaller
        character limit cuts longer items down in place of the originals
        (same id and timestamp, marked truncated).
        """
        if max_history is not None and max_history < 1:
            raise ValueError("max_history must be at least 1")
        if max_characters is not None and max_characters < 1:
            raise ValueError("max_characters must be at least 1")

        if max_history is not None:
            self._persistence.set('maxHistory', int(max_history))
            del self._items[max_history:]

        if max_characters is not None:
            self._persistence.set('maxCharacters', int(max_characters))
            self._items = [item.truncated(max_characters) for item in self._items]

        self._save()
        logger.info(f"History limits: max_history={self.max_history}, max_characters={self.max_characters}")

    def _save(self) -> None:
        self._persistence.set('history', [item.to_dict() for item in self._items])

    def _notify(self, item: HistoryItem) -> None:
        for callback in list(self._listeners):
            try:
                callback(item)
            except Exception as e:
                logger.error(f"Error in history listener {getattr(callback, '__name__', callback)}: {e}")

    def __len__(self) -> int:
        return len(self._items)
