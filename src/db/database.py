import logging
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from config.settings import settings
from src.db.models import Base

logger = logging.getLogger(__name__)

# SQLite needs check_same_thread disabled when sessions cross FastAPI's threadpool
_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

# Configure the database engine
engine = create_engine(settings.database_url, echo=settings.database_echo, connect_args=_connect_args)

# Create a configured "Session" class
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def init_db() -> None:
    """Creates any missing tables."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured.")


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency providing a database session per request."""
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Error in get_db during yield: {e}", exc_info=True)
        db.rollback()
        raise
    finally:
        db.close()
