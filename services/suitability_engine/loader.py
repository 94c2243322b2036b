import logging
from typing import Any, Dict, List, Union

import yaml
from pydantic import ValidationError

from services.suitability_engine.models import Question

logger = logging.getLogger(__name__)


class CatalogValidationError(ValueError):
    """Custom exception for catalog errors not covered by per-question validation."""
    pass


def load_catalog_data(data: Union[Dict[str, Any], List[Any]]) -> List[Question]:
    """
    Validates raw catalog data into Question models.

    Accepts either a mapping with a `questions` list or a bare list of
    question records. Malformed records (missing id/text, unknown category,
    non-mapping weights) are skipped with a warning; duplicate ids are an error.
    """
    if isinstance(data, dict):
        records = data.get("questions")
    else:
        records = data
    if not isinstance(records, list):
        raise CatalogValidationError("Catalog must contain a list of questions.")

    questions: List[Question] = []
    seen_ids = set()
    for index, record in enumerate(records):
        try:
            question = Question.model_validate(record)
        except ValidationError as e:
            logger.warning(f"Skipping malformed catalog entry #{index}: {e.error_count()} validation error(s)")
            continue

        if question.id in seen_ids:
            raise CatalogValidationError(f"Duplicate question ID found: {question.id}")
        seen_ids.add(question.id)
        questions.append(question)

    logger.info(f"Loaded {len(questions)} questions ({len(records) - len(questions)} skipped).")
    return questions


def load_catalog_from_file(file_path: str) -> List[Question]:
    """
    Loads a question catalog from a YAML file, validates it,
    and returns the list of questions.
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise CatalogValidationError(f"File not found: {file_path}")
    except yaml.YAMLError as e:
        raise CatalogValidationError(f"Error parsing YAML file {file_path}: {e}")

    if data is None:
        raise CatalogValidationError(f"YAML file is empty or invalid: {file_path}")

    return load_catalog_data(data)
