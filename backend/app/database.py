"""
Database configuration and session management.

This module sets up SQLAlchemy with SQLite and provides
database session management for the application.
"""

import logging
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from sqlalchemy.engine import Engine

from app.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Get the backend directory path (parent of app directory)
BACKEND_DIR = Path(__file__).parent.parent
DATA_DIR = BACKEND_DIR / "data"

# Ensure the data directory exists
DATA_DIR.mkdir(parents=True, exist_ok=True)

# Database file path
DB_FILE = DATA_DIR / "eventfeed.db"
DATABASE_URL = settings.database.DATABASE_URL or f"sqlite:///{DB_FILE}"

# Create SQLAlchemy engine
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
    echo=settings.database.ECHO_SQL,
)

# Enable foreign key constraints and case-sensitive LIKE for SQLite
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints and case-sensitive LIKE on SQLite connections."""
    if type(dbapi_conn).__module__ != "sqlite3":
        return
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA case_sensitive_like=ON")
    cursor.close()

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all models
Base = declarative_base()


def get_db() -> Session:
    """
    Dependency function to get database session.

    Yields:
        Session: Database session that will be automatically closed.

    Usage:
        @app.get("/users/{user_id}")
        async def read_user(user_id: int, db: Session = Depends(get_db)):
            return user_service.get_user_by_id(db, user_id)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Initialise the database.

    Creates all tables defined in the models if they don't exist.
    This is called on application startup.
    """
    # Import all models so they are registered with Base
    from app import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database initialised at {engine.url.render_as_string(hide_password=True)}")
