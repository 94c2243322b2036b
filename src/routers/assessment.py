from fastapi import APIRouter, HTTPException, Depends, Query, Response, status
from typing import List
import logging

from sqlalchemy.orm import Session

from config.settings import AppSettings, get_settings
from services.suitability_engine.engine import SuitabilityEngine
from services.suitability_engine.importer import ImportFormatError, parse_question_rows, summarize_raw_data
from services.suitability_engine.models import (
    AssessmentDraft,
    AssessmentResultRecord,
    AssessmentStatistics,
    IncompleteAssessmentError,
    InvalidSubmissionError,
    Question,
)
from src.db.database import get_db
from src.schemas.assessment import (
    AnswerRequest,
    AssessmentState,
    ImportPreview,
    ImportRequest,
    ImportResponse,
    StartAssessmentRequest,
)
from src.services import storage
from src.services.drafts import DraftStore, get_draft_store

router = APIRouter()
logger = logging.getLogger(__name__)


def get_suitability_engine(db: Session = Depends(get_db)) -> SuitabilityEngine:
    """Engine over the catalog as currently stored."""
    return SuitabilityEngine(storage.fetch_question_catalog(db))


def _state(engine: SuitabilityEngine, draft: AssessmentDraft) -> AssessmentState:
    return AssessmentState(
        draft=draft,
        questions=engine.questions_for(draft),
        progress=engine.progress(draft),
        complete=engine.is_complete(draft),
    )


def _load_draft(drafts: DraftStore, session_id: str) -> AssessmentDraft:
    draft = drafts.load(session_id)
    if draft is None:
        raise HTTPException(status_code=404, detail=f"No assessment in progress for session {session_id}")
    return draft


def _save_draft(drafts: DraftStore, draft: AssessmentDraft) -> None:
    if not drafts.save(draft):
        raise HTTPException(status_code=503, detail="Draft storage unavailable")


@router.post("/assessments", response_model=AssessmentState, status_code=status.HTTP_201_CREATED)
def start_assessment(
    request: StartAssessmentRequest,
    engine: SuitabilityEngine = Depends(get_suitability_engine),
    drafts: DraftStore = Depends(get_draft_store),
    settings: AppSettings = Depends(get_settings),
):
    """Samples a question set for a new session and stores its draft."""
    question_count = request.question_count or settings.question_count
    draft = engine.start_assessment(question_count=question_count)
    _save_draft(drafts, draft)
    return _state(engine, draft)


@router.get("/assessments/{session_id}", response_model=AssessmentState)
def get_assessment(
    session_id: str,
    engine: SuitabilityEngine = Depends(get_suitability_engine),
    drafts: DraftStore = Depends(get_draft_store),
):
    return _state(engine, _load_draft(drafts, session_id))


@router.put("/assessments/{session_id}/answers", response_model=AssessmentState)
def answer_question(
    session_id: str,
    request: AnswerRequest,
    engine: SuitabilityEngine = Depends(get_suitability_engine),
    drafts: DraftStore = Depends(get_draft_store),
):
    draft = _load_draft(drafts, session_id)
    try:
        draft = engine.record_answer(draft, request.question_id, request.score)
    except InvalidSubmissionError as e:
        logger.error(f"Invalid submission: {e}", extra={"session_id": session_id})
        raise HTTPException(status_code=400, detail=str(e))
    _save_draft(drafts, draft)
    return _state(engine, draft)


@router.post("/assessments/{session_id}/back", response_model=AssessmentState)
def previous_question(
    session_id: str,
    engine: SuitabilityEngine = Depends(get_suitability_engine),
    drafts: DraftStore = Depends(get_draft_store),
):
    draft = engine.go_back(_load_draft(drafts, session_id))
    _save_draft(drafts, draft)
    return _state(engine, draft)


@router.delete("/assessments/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def restart_assessment(session_id: str, drafts: DraftStore = Depends(get_draft_store)):
    """Discards the draft; the next POST /assessments starts over."""
    drafts.delete(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/assessments/{session_id}/complete", response_model=AssessmentResultRecord)
def complete_assessment(
    session_id: str,
    allow_partial: bool = Query(False),
    db: Session = Depends(get_db),
    engine: SuitabilityEngine = Depends(get_suitability_engine),
    drafts: DraftStore = Depends(get_draft_store),
    settings: AppSettings = Depends(get_settings),
):
    """
    Scores the session's draft against its stored question ids, saves the
    result record and clears the draft.
    """
    existing = storage.get_assessment_result_by_session_id(db, session_id)
    if existing is not None:
        return existing

    draft = _load_draft(drafts, session_id)
    try:
        record = engine.build_result_record(draft, top_n=settings.top_n, allow_partial=allow_partial)
        storage.save_assessment_result(db, record)
    except IncompleteAssessmentError as e:
        logger.error(f"Incomplete assessment: {e}", extra={"session_id": session_id})
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception(f"Unexpected error completing assessment {session_id}: {e}", extra={"session_id": session_id})
        raise HTTPException(status_code=500, detail="Internal Server Error")

    drafts.delete(session_id)
    return storage.get_assessment_result_by_session_id(db, session_id) or record


@router.get("/results/{session_id}", response_model=AssessmentResultRecord)
def get_result(session_id: str, db: Session = Depends(get_db)):
    record = storage.get_assessment_result_by_session_id(db, session_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"No result for session {session_id}")
    return record


@router.get("/statistics", response_model=AssessmentStatistics)
def get_statistics(db: Session = Depends(get_db)):
    return storage.get_assessment_statistics(db)


@router.get("/questions", response_model=List[Question])
def list_questions(db: Session = Depends(get_db)):
    return storage.fetch_question_catalog(db)


@router.post("/questions/import/preview", response_model=ImportPreview)
def preview_import(request: ImportRequest):
    """Counts usable rows and flags unknown business types without touching the catalog."""
    try:
        return ImportPreview(**summarize_raw_data(request.raw_data, is_csv=request.is_csv))
    except ImportFormatError as e:
        logger.error(f"Import preview rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/questions/import", response_model=ImportResponse)
def import_questions(request: ImportRequest, db: Session = Depends(get_db)):
    """Replaces the catalog with the questions parsed from a TSV/CSV sheet."""
    try:
        report = parse_question_rows(request.raw_data, is_csv=request.is_csv)
    except ImportFormatError as e:
        logger.error(f"Import rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    try:
        imported = storage.replace_question_catalog(db, report.questions)
    except Exception as e:
        logger.exception(f"Import error: {e}")
        raise HTTPException(status_code=500, detail="Failed to store imported questions")

    return ImportResponse(
        success=True,
        message=f"Successfully imported {imported} questions",
        imported=imported,
        skipped=report.skipped,
    )
