from typing import List, Optional
from pydantic import BaseModel, Field

from services.suitability_engine.definitions import MAX_LIKERT, MIN_LIKERT
from services.suitability_engine.models import AssessmentDraft, Question

class StartAssessmentRequest(BaseModel):
    question_count: Optional[int] = Field(default=None, ge=1)

class AnswerRequest(BaseModel):
    question_id: str
    score: int = Field(..., ge=MIN_LIKERT, le=MAX_LIKERT)

class AssessmentState(BaseModel):
    draft: AssessmentDraft
    questions: List[Question]
    progress: float
    complete: bool

class ImportRequest(BaseModel):
    raw_data: str
    is_csv: bool = False

class ImportResponse(BaseModel):
    success: bool
    message: str
    imported: int
    skipped: int = 0

class ImportPreview(BaseModel):
    processed: int
    skipped: int
    total: int
    unknown_business_types: List[str] = []
