"""Database package."""
from wellpulse.db.session import engine, SessionLocal, get_db, get_db_context
from wellpulse.db.base import Base

__all__ = ["engine", "SessionLocal", "get_db", "get_db_context", "Base"]
