"""Database management using SQLAlchemy"""

from typing import Optional
from sqlalchemy import create_engine, Column, String, DateTime, Text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError
from loguru import logger

from ..errors import StorageError
from ...utils.config_manager import get_app_data_dir

Base = declarative_base()


class SettingsDB(Base):
    """Key/value row holding one JSON encoded piece of application state"""
    __tablename__ = 'settings'

    key = Column(String(100), primary_key=True)
    value = Column(Text)
    updated_at = Column(DateTime)


class DatabaseManager:
    """Manages database connections and operations"""

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize database manager

        Args:
            db_path: Path to database file (defaults to app data directory)
        """
        if db_path is None:
            db_path = str(get_app_data_dir() / 'clipmaster.db')

        self.db_path = db_path
        self.engine = None
        self.SessionLocal = None

        self._initialize_database()

    def _initialize_database(self):
        """Initialize database connection and create tables"""
        try:
            self.engine = create_engine(f'sqlite:///{self.db_path}')

            # Create tables if they don't exist
            Base.metadata.create_all(bind=self.engine)

            self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

            logger.info(f"Database initialized at: {self.db_path}")

        except SQLAlchemyError as e:
            logger.error(f"Failed to initialize database: {e}")
            raise StorageError("Failed to initialize database", e)

    def get_session(self) -> Session:
        """
        Get database session

        Returns:
            SQLAlchemy session
        """
        if self.SessionLocal is None:
            raise StorageError("Database not initialized")

        return self.SessionLocal()

    def close(self):
        """Close database connection"""
        if self.engine:
            self.engine.dispose()
            logger.info("Database connection closed")

