import logging
import random
from typing import List, Optional, Sequence

from .definitions import DEFAULT_QUESTION_COUNT, DEFAULT_TOP_N, MAX_LIKERT, MIN_LIKERT
from .loader import load_catalog_from_file
from .models import (
    AssessmentDraft,
    AssessmentResultRecord,
    IncompleteAssessmentError,
    InvalidSubmissionError,
    Question,
    RankedBusiness,
    ScoreResult,
)
from .sampler import question_ids, sample_questions, select_by_ids
from .scorer import compute_scores, top_n_businesses

logger = logging.getLogger(__name__)


class SuitabilityEngine:
    """
    Runs assessments against a question catalog.

    The engine holds only the catalog. Assessment state lives in
    AssessmentDraft values that callers pass in and get back.
    """
    def __init__(self, catalog: Sequence[Question]):
        self.catalog = list(catalog)

    @classmethod
    def from_file(cls, config_path: str = "assets/questions.yml") -> "SuitabilityEngine":
        """Builds an engine from a YAML question catalog."""
        return cls(load_catalog_from_file(config_path))

    def start_assessment(
        self,
        session_id: Optional[str] = None,
        question_count: int = DEFAULT_QUESTION_COUNT,
        rng: Optional[random.Random] = None,
    ) -> AssessmentDraft:
        """Samples the questions for a new assessment and returns its draft."""
        selected = sample_questions(self.catalog, question_count, rng=rng)
        draft = AssessmentDraft(question_ids=question_ids(selected))
        if session_id:
            draft = draft.model_copy(update={"session_id": session_id})
        logger.info(f"Started assessment {draft.session_id} with {len(selected)} questions.")
        return draft

    def questions_for(self, draft: AssessmentDraft) -> List[Question]:
        """The draft's questions, rebuilt from its stored id list (never re-sampled)."""
        return select_by_ids(self.catalog, draft.question_ids)

    def record_answer(self, draft: AssessmentDraft, question_id: str, score: int) -> AssessmentDraft:
        """
        Returns a new draft with the answer recorded.

        Raises:
            InvalidSubmissionError: If the question is not part of the draft
                or the score is outside the Likert range.
        """
        if question_id not in draft.question_ids:
            raise InvalidSubmissionError(f"Question '{question_id}' is not part of assessment {draft.session_id}")
        if isinstance(score, bool) or not isinstance(score, int) or not MIN_LIKERT <= score <= MAX_LIKERT:
            raise InvalidSubmissionError(
                f"Invalid score {score!r} for question '{question_id}'. Expected {MIN_LIKERT}-{MAX_LIKERT}."
            )

        answers = dict(draft.answers)
        answers[question_id] = score
        position = draft.question_ids.index(question_id)
        next_index = min(max(draft.current_index, position + 1), len(draft.question_ids))
        return draft.model_copy(update={"answers": answers, "current_index": next_index})

    def go_back(self, draft: AssessmentDraft) -> AssessmentDraft:
        return draft.model_copy(update={"current_index": max(draft.current_index - 1, 0)})

    def unanswered(self, draft: AssessmentDraft) -> List[str]:
        return [qid for qid in draft.question_ids if qid not in draft.answers]

    def is_complete(self, draft: AssessmentDraft) -> bool:
        return bool(draft.question_ids) and not self.unanswered(draft)

    def progress(self, draft: AssessmentDraft) -> float:
        """Fraction of the draft's questions answered (0.0 - 1.0)."""
        if not draft.question_ids:
            return 0.0
        answered = sum(1 for qid in draft.question_ids if qid in draft.answers)
        return answered / len(draft.question_ids)

    def score(self, draft: AssessmentDraft) -> ScoreResult:
        return compute_scores(self.questions_for(draft), draft.answers)

    def build_result_record(
        self,
        draft: AssessmentDraft,
        top_n: int = DEFAULT_TOP_N,
        allow_partial: bool = True,
    ) -> AssessmentResultRecord:
        """
        Scores the draft and shapes the result for storage.

        Raises:
            IncompleteAssessmentError: If allow_partial is False and some of the
                draft's questions are unanswered.
        """
        if not allow_partial:
            missing = self.unanswered(draft)
            if missing:
                raise IncompleteAssessmentError(f"Missing answers for questions: {sorted(missing)}")

        scores = self.score(draft)
        top = top_n_businesses(scores.business_scores, top_n)
        return AssessmentResultRecord(
            session_id=draft.session_id,
            top_business_types=[RankedBusiness(business_type=bt, score=s) for bt, s in top],
            category_scores=scores.category_averages,
            all_business_scores=scores.business_scores,
            answers=dict(draft.answers),
        )
