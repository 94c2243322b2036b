# services/suitability_engine/scorer.py
# Turns answered questions into business suitability and category scores.

import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .definitions import CATEGORIES, MAX_LIKERT, MIN_LIKERT, DEFAULT_TOP_N
from .models import Question, ScoreResult, coerce_weight

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Rounds to the nearest integer, .5 going up (12.5 -> 13)."""
    return int(math.floor(value + 0.5))


def _answer_value(answers: Mapping[str, Any], question_id: str) -> Optional[int]:
    """Returns the Likert value for a question, or None if it counts as unanswered."""
    if question_id not in answers:
        return None
    value = answers[question_id]
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value != int(value) or not MIN_LIKERT <= value <= MAX_LIKERT:
        logger.debug(f"Ignoring out-of-range answer {value!r} for question '{question_id}'.")
        return None
    return int(value)


def compute_scores(questions: Sequence[Question], answers: Mapping[str, Any]) -> ScoreResult:
    """
    Aggregates answers into 0-100 business and category scores.

    Each answered question adds its Likert value to its category and
    `value * weight` to every business type it weights, against a maximum of
    `MAX_LIKERT * weight`. Unanswered questions contribute nothing.

    Args:
        questions: The questions presented in the assessment.
        answers: Question id -> Likert value (1-5). Missing ids are unanswered.

    Returns:
        A ScoreResult. Business types not weighted by any answered question
        are absent; every category is present (0 when it has no answers).
    """
    category_totals = {category: [0, 0] for category in CATEGORIES}  # [sum, count]
    business_totals: Dict[str, List[float]] = {}  # [weighted sum, weighted max]

    for question in questions:
        score = _answer_value(answers, question.id)
        if score is None:
            continue

        if question.category in category_totals:
            category_totals[question.category][0] += score
            category_totals[question.category][1] += 1

        for business_type, raw_weight in question.weights.items():
            weight = coerce_weight(raw_weight)
            totals = business_totals.setdefault(business_type, [0.0, 0.0])
            totals[0] += score * weight
            totals[1] += MAX_LIKERT * weight

    business_scores = {
        business_type: round_half_up(weighted_sum / weighted_max * 100) if weighted_max > 0 else 0
        for business_type, (weighted_sum, weighted_max) in business_totals.items()
    }
    category_averages = {
        category: round_half_up(total / (count * MAX_LIKERT) * 100) if count > 0 else 0
        for category, (total, count) in category_totals.items()
    }
    return ScoreResult(business_scores=business_scores, category_averages=category_averages)


def top_n_businesses(business_scores: Mapping[str, int], n: int = DEFAULT_TOP_N) -> List[Tuple[str, int]]:
    """Highest scores first; equal scores ordered by business type name."""
    if n <= 0:
        return []
    ranked = sorted(business_scores.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:n]
