"""
Handles database connection setup and session management using SQLAlchemy.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from .config import settings

# SQLite connections are shared across FastAPI's worker threads
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# Create the main SQLAlchemy engine
engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)

# Create a session factory that will be used to create new DB sessions
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class that our ORM models will inherit from
Base = declarative_base()


def get_db():
    """
    FastAPI dependency to create and manage database sessions per request.

    Yields:
        Session: A new SQLAlchemy database session, closed once the request ends.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
