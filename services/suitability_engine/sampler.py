"""
Question selection for an assessment.

Picks a bounded, category-balanced, randomly ordered subset of the catalog
and converts selections to and from the id list stored in a draft.
"""
import logging
import random
from typing import Dict, List, Optional, Sequence

from .definitions import CATEGORIES
from .models import Question

logger = logging.getLogger(__name__)


def category_quotas(target_count: int) -> Dict[str, int]:
    """
    Splits target_count across the categories as evenly as possible.

    The first `target_count % 4` categories (in CATEGORIES order) get one
    extra pick.
    """
    if target_count <= 0:
        return {category: 0 for category in CATEGORIES}
    per_category, remainder = divmod(target_count, len(CATEGORIES))
    return {
        category: per_category + (1 if index < remainder else 0)
        for index, category in enumerate(CATEGORIES)
    }


def sample_questions(
    catalog: Sequence[Question],
    target_count: int,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """
    Selects up to target_count questions from the catalog.

    Args:
        catalog: All available questions.
        target_count: Desired number of questions.
        rng: Source of randomness providing `sample` and `shuffle`.
             A fresh unseeded random.Random is used when omitted.

    Returns:
        The whole catalog (in its original order) if it is not larger than
        target_count, otherwise a shuffled list holding at most each
        category's quota of questions. Categories with fewer questions than
        their quota contribute all of them; the shortfall is not made up.
    """
    if target_count <= 0:
        return []
    if len(catalog) <= target_count:
        return list(catalog)

    rng = rng or random.Random()

    by_category: Dict[str, List[Question]] = {category: [] for category in CATEGORIES}
    for question in catalog:
        if question.category in by_category:
            by_category[question.category].append(question)

    selected: List[Question] = []
    for category, quota in category_quotas(target_count).items():
        pool = by_category[category]
        take = min(quota, len(pool))
        if take < quota:
            logger.debug(f"Category '{category}' has {len(pool)} questions, quota {quota}; under-filling.")
        if take:
            selected.extend(rng.sample(pool, take))

    rng.shuffle(selected)
    logger.debug(f"Selected {len(selected)} of {len(catalog)} questions (target {target_count}).")
    return selected


def question_ids(questions: Sequence[Question]) -> List[str]:
    """Serializes a selection to the id list stored with a draft."""
    return [q.id for q in questions]


def select_by_ids(catalog: Sequence[Question], ids: Sequence[str]) -> List[Question]:
    """
    Rebuilds a stored selection from the catalog, in id-list order.

    Ids no longer present in the catalog are skipped.
    """
    lookup = {q.id: q for q in catalog}
    selected = []
    for question_id in ids:
        question = lookup.get(question_id)
        if question is None:
            logger.warning(f"Question '{question_id}' not found in catalog; skipping.")
            continue
        selected.append(question)
    return selected
