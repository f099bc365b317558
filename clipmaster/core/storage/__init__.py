"""Data persistence and storage management"""

from .database import DatabaseManager
from .state_store import StateStore, DEFAULT_STATE

__all__ = ['DatabaseManager', 'StateStore', 'DEFAULT_STATE']
