"""Persisted dark/light theme preference"""

from enum import Enum
from typing import Callable, Set
from loguru import logger


class Theme(str, Enum):
    DARK = 'dark'
    LIGHT = 'light'

    @classmethod
    def parse(cls, value) -> 'Theme':
        """Theme for a stored value; anything unrecognised is DARK"""
        try:
            return cls(value)
        except ValueError:
            return cls.DARK

    def toggled(self) -> 'Theme':
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK


class ThemeState:
    """Single theme value with toggle and change broadcast"""

    def __init__(self, persistence):
        self._persistence = persistence
        self._theme = Theme.parse(persistence.get('theme', Theme.DARK.value))
        self._callbacks: Set[Callable[[Theme], None]] = set()
        logger.info(f"ThemeState initialized ({self._theme.value})")

    def add_callback(self, callback: Callable[[Theme], None]) -> None:
        self._callbacks.add(callback)

    def get(self) -> Theme:
        return self._theme

    def toggle(self) -> Theme:
        """
        Flip the theme, persist it and broadcast the new value

        Raises:
            StorageError: If persisting fails (the new theme still applies in memory)
        """
        self._theme = self._theme.toggled()
        logger.info(f"Theme changed to: {self._theme.value}")

        try:
            self._persistence.set('theme', self._theme.value)
        finally:
            for callback in list(self._callbacks):
                try:
                    callback(self._theme)
                except Exception as e:
                    logger.error(f"Error in theme callback: {e}")

        return self._theme
