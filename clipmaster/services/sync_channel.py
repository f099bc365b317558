"""Message boundary between the core and the presentation layer"""

from typing import Any, Optional
from PyQt6.QtCore import QObject, pyqtSignal
from loguru import logger

from ..core.clipboard import ClipboardPoller, HistoryItem, HistoryStore
from ..core.errors import StorageError
from ..core.theme import Theme, ThemeState
from .messages import (
    ClearRequest, CloseRequest, DeleteRequest, PasteRequest,
    SnapshotMessage, ThemeChangedMessage, ThemeToggleRequest, parse_command,
)


class SyncChannel(QObject):
    """Pushes history/theme state out and routes presentation commands in.

    Commands are fire-and-forget: answers arrive as pushes on
    ``message_pushed`` (a SnapshotMessage or ThemeChangedMessage).
    """

    message_pushed = pyqtSignal(object)
    hide_requested = pyqtSignal()
    notification_requested = pyqtSignal(str, str)
    storage_failed = pyqtSignal(str)

    def __init__(self, history: HistoryStore, theme: ThemeState,
                 poller: ClipboardPoller, clipboard,
                 show_notifications: bool = True,
                 parent: Optional[QObject] = None):
        """
        Initialize sync channel

        Args:
            history: History store commands act on
            theme: Theme state commands act on
            poller: Poller whose state follows visibility and whose
                last-observed value is updated on paste
            clipboard: Object exposing ``write_text(text)``
            show_notifications: Emit notification_requested for recorded/pasted items
        """
        super().__init__(parent)
        self._history = history
        self._theme = theme
        self._poller = poller
        self._clipboard = clipboard
        self.show_notifications = show_notifications
        self._visible = False

        self._handlers = {
            PasteRequest: lambda cmd: self.request_paste(cmd.content),
            DeleteRequest: lambda cmd: self.request_delete(cmd.item_id),
            ThemeToggleRequest: lambda cmd: self.request_theme_toggle(),
            CloseRequest: lambda cmd: self.request_close(),
            ClearRequest: lambda cmd: self.request_clear(),
        }

        self._history.add_listener(self._on_item_recorded)
        self._theme.add_callback(self._on_theme_changed)

    @property
    def visible(self) -> bool:
        return self._visible

    # ------------------------------------------------------------------
    # Push direction

    def snapshot(self) -> SnapshotMessage:
        return SnapshotMessage(tuple(self._history.list()), self._theme.get())

    def push_snapshot(self) -> None:
        message = self.snapshot()
        logger.debug(f"Pushing snapshot ({len(message.history)} items, {message.theme.value})")
        self.message_pushed.emit(message)

    def set_visible(self, visible: bool) -> None:
        """
        Visibility signal from the window controller

        Drives the poller between ACTIVE and IDLE; becoming visible also
        pushes a fresh snapshot.
        """
        self._visible = visible
        self._poller.set_active(visible)
        if visible:
            self.push_snapshot()

    def _on_item_recorded(self, item: HistoryItem) -> None:
        if self.show_notifications:
            self.notification_requested.emit("Text Copied to History", item.preview())
        if self._visible:
            self.push_snapshot()

    def _on_theme_changed(self, theme: Theme) -> None:
        self.message_pushed.emit(ThemeChangedMessage(theme))

    # ------------------------------------------------------------------
    # Command direction

    def handle(self, command: Any) -> None:
        """Dispatch a parsed command; unknown objects are ignored"""
        handler = self._handlers.get(type(command))
        if handler is None:
            logger.debug(f"Ignoring unknown command: {command!r}")
            return
        handler(command)

    def handle_raw(self, data: Any) -> None:
        """Dispatch a command in wire form; malformed messages are ignored"""
        command = parse_command(data)
        if command is None:
            logger.debug(f"Ignoring malformed command: {data!r}")
            return
        self.handle(command)

    def paste_item(self, item: HistoryItem) -> None:
        self.request_paste(item.content)

    def request_paste(self, content: str) -> None:
        """Write content back to the clipboard without re-recording it, then hide the window"""
        if not isinstance(content, str) or not content:
            return

        # Shadow first: a write that fails after changing the clipboard must not be re-recorded
        self._poller.mark_observed(content)
        try:
            self._clipboard.write_text(content)
        except Exception as e:
            logger.error(f"Failed to write clipboard: {e}")
            return

        self.hide_requested.emit()

        if self.show_notifications:
            self.notification_requested.emit(
                "ClipMaster", "Text copied to clipboard! You can now paste it manually."
            )

        logger.info(f"Pasted: {content[:50]!r}")

    def request_delete(self, item_id: str) -> None:
        try:
            self._history.delete(item_id)
        except StorageError as e:
            self._report_storage_failure(e)
        self.push_snapshot()

    def request_clear(self) -> None:
        try:
            self._history.clear()
        except StorageError as e:
            self._report_storage_failure(e)
        self.push_snapshot()

    def request_theme_toggle(self) -> None:
        try:
            self._theme.toggle()
        except StorageError as e:
            self._report_storage_failure(e)

    def request_close(self) -> None:
        self.hide_requested.emit()

    def _report_storage_failure(self, error: StorageError) -> None:
        logger.error(f"Change applied but not persisted: {error}")
        self.storage_failed.emit(str(error))
