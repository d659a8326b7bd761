"""
Database configuration and connection management
"""
from stockflow.database.config import engine, SessionLocal, get_db, init_db
from stockflow.database.base import Base

__all__ = ["engine", "SessionLocal", "get_db", "init_db", "Base"]
