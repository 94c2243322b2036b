import math
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Category = Literal["skills", "preferences", "readiness", "motivation"]


def coerce_weight(value: Any) -> float:
    """Returns a usable weight: 0.0 for anything that is not a finite, non-negative number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if math.isnan(value) or math.isinf(value) or value < 0:
        return 0.0
    return float(value)


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)
    category: Category
    weights: Dict[str, float] = Field(default_factory=dict)  # business type -> 0..1

    @field_validator("weights", mode="before")
    @classmethod
    def _coerce_weights(cls, value: Any) -> Dict[str, float]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError("weights must be a mapping of business type to number")
        return {str(k): coerce_weight(v) for k, v in value.items()}


class ScoreResult(BaseModel):
    business_scores: Dict[str, int] = Field(default_factory=dict)
    category_averages: Dict[str, int] = Field(default_factory=dict)


class RankedBusiness(BaseModel):
    business_type: str
    score: int


class AssessmentDraft(BaseModel):
    """In-progress assessment state. Transitions return a new draft."""
    session_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    question_ids: List[str] = Field(default_factory=list)
    answers: Dict[str, int] = Field(default_factory=dict)
    current_index: int = 0
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AssessmentResultRecord(BaseModel):
    id: Optional[str] = None
    session_id: str
    top_business_types: List[RankedBusiness]
    category_scores: Dict[str, int]
    all_business_scores: Dict[str, int]
    answers: Dict[str, int]
    created_at: Optional[datetime] = None


class BusinessTypeStat(BaseModel):
    business_type: str
    count: int
    percentage: int


class AssessmentStatistics(BaseModel):
    total_assessments: int = 0
    business_type_stats: List[BusinessTypeStat] = Field(default_factory=list)


# Custom Error Classes
class IncompleteAssessmentError(ValueError):
    """Custom exception for completing an assessment with unanswered questions."""
    pass

class InvalidSubmissionError(ValueError):
    """Custom exception for invalid answer data (unknown question, out-of-range score)."""
    pass
