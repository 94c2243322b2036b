import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    MetaData,
    Column,
    String,
    Text,
    DateTime,
    JSON,
)
from sqlalchemy.orm import declarative_base

# Define naming conventions for constraints and indexes
# https://alembic.sqlalchemy.org/en/latest/naming.html
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)
Base = declarative_base(metadata=metadata)


class QuestionRow(Base):
    __tablename__ = "questions"

    id = Column(String(64), primary_key=True)
    text = Column(Text, nullable=False)
    category = Column(String(32), nullable=False)
    business_weights = Column(JSON, nullable=True)  # {business type: weight}


class AssessmentResultRow(Base):
    __tablename__ = "assessment_results"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    session_id = Column(String(64), unique=True, nullable=False)
    top_business_types = Column(JSON, nullable=False)  # [{business_type, score}]
    category_scores = Column(JSON, nullable=False)
    all_business_scores = Column(JSON, nullable=False)
    answers = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
