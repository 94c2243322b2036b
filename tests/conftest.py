import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from services.suitability_engine.definitions import CATEGORIES
from services.suitability_engine.models import Question
from src.db.models import Base

# Use in-memory SQLite for testing; StaticPool keeps one connection so every
# session sees the same database.
TEST_DATABASE_URL = "sqlite://"


def make_question(qid, category="skills", weights=None, text=None):
    return Question(id=qid, text=text or f"Question {qid}?", category=category, weights=weights or {})


@pytest.fixture
def make_catalog():
    """Builds a catalog with the given number of questions per category."""
    def _build(per_category):
        if isinstance(per_category, int):
            per_category = {category: per_category for category in CATEGORIES}
        catalog = []
        for category in CATEGORIES:
            for i in range(per_category.get(category, 0)):
                catalog.append(make_question(f"{category}-{i:02d}", category, {"A": 1.0}))
        return catalog
    return _build


@pytest.fixture
def test_engine():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(bind=test_engine, autoflush=False, autocommit=False)


@pytest.fixture
def db_session(session_factory):
    """Provides a clean database session for each test function."""
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
