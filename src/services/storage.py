import logging
from collections import Counter
from typing import List, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from services.suitability_engine.loader import load_catalog_data
from services.suitability_engine.models import (
    AssessmentResultRecord,
    AssessmentStatistics,
    BusinessTypeStat,
    Question,
)
from services.suitability_engine.scorer import round_half_up
from src.db.models import AssessmentResultRow, QuestionRow

logger = logging.getLogger(__name__)

IMPORT_BATCH_SIZE = 100


# --- Question catalog ---

def fetch_question_catalog(db: Session) -> List[Question]:
    """Returns the full question catalog ordered by id."""
    rows = db.execute(select(QuestionRow).order_by(QuestionRow.id)).scalars().all()
    # Rows with an unknown category or blank text are skipped by the loader
    return load_catalog_data([
        {"id": row.id, "text": row.text, "category": row.category, "weights": row.business_weights}
        for row in rows
    ])


def count_questions(db: Session) -> int:
    return db.execute(select(func.count()).select_from(QuestionRow)).scalar_one()


def replace_question_catalog(db: Session, questions: Sequence[Question], batch_size: int = IMPORT_BATCH_SIZE) -> int:
    """
    Replaces every stored question with the given ones.

    Inserts in batches and commits once; on failure nothing is changed.
    Returns the number of questions stored.
    """
    try:
        db.execute(delete(QuestionRow))
        for start in range(0, len(questions), batch_size):
            batch = questions[start:start + batch_size]
            db.add_all(
                QuestionRow(id=q.id, text=q.text, category=q.category, business_weights=dict(q.weights))
                for q in batch
            )
            db.flush()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to replace question catalog: {e}")
        raise
    logger.info(f"Stored {len(questions)} questions.")
    return len(questions)


# --- Assessment results ---

def _record_from_row(row: AssessmentResultRow) -> AssessmentResultRecord:
    return AssessmentResultRecord(
        id=row.id,
        session_id=row.session_id,
        top_business_types=row.top_business_types,
        category_scores=row.category_scores,
        all_business_scores=row.all_business_scores,
        answers=row.answers,
        created_at=row.created_at,
    )


def save_assessment_result(db: Session, record: AssessmentResultRecord) -> bool:
    """
    Stores a result unless one already exists for the session.

    Returns True when a row was written, False when the session already had one.
    """
    existing = db.execute(
        select(AssessmentResultRow.id).where(AssessmentResultRow.session_id == record.session_id)
    ).first()
    if existing:
        logger.info(f"Assessment result already exists for session {record.session_id}, skipping save")
        return False

    row = AssessmentResultRow(
        session_id=record.session_id,
        top_business_types=[item.model_dump() for item in record.top_business_types],
        category_scores=dict(record.category_scores),
        all_business_scores=dict(record.all_business_scores),
        answers=dict(record.answers),
    )
    try:
        db.add(row)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error saving assessment result for session {record.session_id}: {e}")
        raise
    logger.info(f"Assessment result saved successfully for session: {record.session_id}")
    return True


def get_assessment_result_by_session_id(db: Session, session_id: str) -> Optional[AssessmentResultRecord]:
    row = db.execute(
        select(AssessmentResultRow).where(AssessmentResultRow.session_id == session_id)
    ).scalar_one_or_none()
    if row is None:
        return None
    return _record_from_row(row)


def get_assessment_statistics(db: Session) -> AssessmentStatistics:
    """
    Counts how often each business type was ranked first.

    Falls back to empty statistics if the query fails.
    """
    try:
        rankings = db.execute(select(AssessmentResultRow.top_business_types)).scalars().all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching assessment statistics: {e}")
        return AssessmentStatistics()

    total = len(rankings)
    leaders = Counter(
        ranking[0]["business_type"] for ranking in rankings
        if ranking and isinstance(ranking[0], dict) and ranking[0].get("business_type")
    )
    stats = [
        BusinessTypeStat(
            business_type=business_type,
            count=count,
            percentage=round_half_up(count / total * 100),
        )
        for business_type, count in sorted(leaders.items(), key=lambda item: (-item[1], item[0]))
    ]
    return AssessmentStatistics(total_assessments=total, business_type_stats=stats)
