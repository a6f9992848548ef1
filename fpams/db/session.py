# fpams/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from fpams.core.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # sync routes run in a threadpool
        return {"connect_args": {"check_same_thread": False}}
    # validators hold row locks briefly; drop dead connections before use
    return {"pool_pre_ping": True}


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """One session per request, closed when the response is done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
