"""
Database connection and session management.
Provides SQLAlchemy engine, session, and base class for models.
"""
import logging
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base
from .config import settings

logger = logging.getLogger(__name__)

# SQLite connections are shared across FastAPI worker threads
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

# Create SQLAlchemy engine for database connection
engine = create_engine(settings.database_url, connect_args=connect_args, pool_pre_ping=True)

# Create session factory for database sessions
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

# Create base class for declarative models
Base = declarative_base()


def connect(bind=None) -> None:
    """
    Verify the database is reachable before the application serves requests.

    The process cannot do anything useful without the database, so an
    unreachable database terminates it with exit status 1.

    Args:
        bind: Engine to check (defaults to the application engine)

    Raises:
        SystemExit: If the database cannot be reached
    """
    bind = bind or engine
    try:
        with bind.connect() as connection:
            connection.execute(text("SELECT 1"))
        logger.info("Connected to the database")
    except SQLAlchemyError as e:
        logger.critical(f"Could not connect to the database: {str(e)}")
        raise SystemExit(1)


def get_db():
    """
    Database dependency - Creates and yields a database session.

    The session is automatically closed after the request is processed,
    even if an exception occurs during request handling.

    Yields:
        SQLAlchemy Session: Database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
