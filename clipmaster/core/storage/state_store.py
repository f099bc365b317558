"""Write-through key/value store for persisted application state"""

import json
from typing import Any, Dict, Optional
from datetime import datetime
from contextlib import contextmanager
from sqlalchemy.exc import SQLAlchemyError
from loguru import logger

from .database import SettingsDB, DatabaseManager
from ..errors import StorageError

DEFAULT_STATE: Dict[str, Any] = {
    'history': [],
    'theme': 'dark',
    'maxHistory': 30,
    'maxCharacters': 5000,
}


class StateStore:
    """Persistence capability used by the history store and theme state.

    Every ``set`` commits before returning. Values are JSON encoded into the
    ``settings`` table.
    """

    def __init__(self, database_manager: DatabaseManager, defaults: Optional[Dict[str, Any]] = None):
        """
        Initialize state store

        Args:
            database_manager: DatabaseManager instance
            defaults: Values returned for keys that were never written
        """
        self.db_manager = database_manager
        self.defaults = dict(DEFAULT_STATE)
        if defaults:
            self.defaults.update(defaults)

    @contextmanager
    def get_session(self):
        """Get a new database session with proper cleanup"""
        session = self.db_manager.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get(self, key: str, default: Any = None) -> Any:
        """
        Read a persisted value

        Args:
            key: State key
            default: Returned when the key is absent and has no store default

        Returns:
            Decoded value

        Raises:
            StorageError: If the database cannot be read
        """
        try:
            with self.get_session() as session:
                row = session.get(SettingsDB, key)
                raw = row.value if row is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to read state '{key}': {e}")
            raise StorageError(f"Failed to read state '{key}'", e)

        if raw is None:
            return self.defaults.get(key, default)

        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning(f"Discarding corrupt state value for '{key}': {e}")
            return self.defaults.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """
        Persist a value, committing immediately

        Raises:
            StorageError: If the write fails
        """
        try:
            encoded = json.dumps(value)
            with self.get_session() as session:
                row = session.get(SettingsDB, key)
                if row is None:
                    row = SettingsDB(key=key)
                    session.add(row)
                row.value = encoded
                row.updated_at = datetime.now()
        except (SQLAlchemyError, TypeError) as e:
            logger.error(f"Failed to write state '{key}': {e}")
            raise StorageError(f"Failed to write state '{key}'", e)

        logger.debug(f"Persisted state: {key}")
