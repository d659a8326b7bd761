"""
Database connection configuration using SQLAlchemy

DATABASE_URL selects the backend (SQLite file by default, PostgreSQL on a
hosted install). Relative SQLite paths resolve against the project root so
the app and scripts/ share one file.
"""
import os
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_DATABASE_URL = f"sqlite:///{PROJECT_ROOT / 'stockflow.db'}"


def normalize_database_url(url: str, root: Path = PROJECT_ROOT) -> str:
    """
    Make a configured URL usable by SQLAlchemy

    - postgres://... -> postgresql://...
    - sqlite:///relative.db -> sqlite:////<root>/relative.db
    In-memory and absolute SQLite URLs pass through.
    """
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]

    sqlite_prefix = "sqlite:///"
    if not url.startswith(sqlite_prefix) or url.startswith(sqlite_prefix + "/"):
        return url

    path = url[len(sqlite_prefix):]
    if path in ("", ":memory:"):
        return url
    return f"{sqlite_prefix}{root / path.removeprefix('./')}"


def engine_options(url: str) -> Dict[str, Any]:
    """Connection options per backend; SQLite has no pool sizing"""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}, "echo": False}
    return {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20, "echo": False}


DATABASE_URL = normalize_database_url(os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL))

engine = create_engine(DATABASE_URL, **engine_options(DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    FastAPI dependency yielding a session per request

        @router.get("/endpoint")
        def endpoint(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables that do not exist yet"""
    # models register themselves on the metadata at import
    import stockflow.models  # noqa: F401
    from stockflow.database.base import Base

    Base.metadata.create_all(bind=engine)
