"""
Question sheet importer.

Parses tab- or comma-separated question sheets (business, domain, key
attributes, question text) into catalog questions with business weights.
"""
import csv
import logging
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from .definitions import (
    BUSINESS_NAME_ALIASES,
    BUSINESS_TYPES,
    CSV_HEADER_MARKERS,
    DOMAIN_TO_CATEGORY,
    RELATED_BUSINESS_RULES,
)
from .models import Question

logger = logging.getLogger(__name__)

EXPECTED_FIELDS = 4


class ImportFormatError(ValueError):
    """Custom exception for import payloads that cannot be parsed at all."""
    pass


class ImportReport(BaseModel):
    questions: List[Question] = Field(default_factory=list)
    skipped: int = 0

    @property
    def imported(self) -> int:
        return len(self.questions)


def standardize_business_name(business: str) -> str:
    return BUSINESS_NAME_ALIASES.get(business, business)


def weights_for_business(primary_business: str, key_attributes: str) -> Dict[str, float]:
    """Primary business at full weight plus related businesses matched by keyword rules."""
    weights = {primary_business: 1.0}
    attributes = key_attributes.lower()
    for keywords, related in RELATED_BUSINESS_RULES.get(primary_business, []):
        if any(keyword in attributes for keyword in keywords):
            weights.update(related)
    return weights


def generate_question_id(index: int) -> str:
    return f"q{index + 1:03d}"


def _split_rows(raw_data: str, is_csv: bool) -> List[List[str]]:
    lines = [line.strip() for line in raw_data.strip().splitlines() if line.strip()]
    if is_csv:
        if lines and any(marker in lines[0] for marker in CSV_HEADER_MARKERS):
            logger.info(f"Skipping header row: {lines[0]}")
            lines = lines[1:]
        return [[part.strip().strip("\"'") for part in row] for row in csv.reader(lines)]
    return [line.split("\t") for line in lines]


def parse_question_rows(raw_data: str, is_csv: bool = False) -> ImportReport:
    """
    Converts a question sheet into catalog questions.

    Rows with the wrong number of fields, blank business/domain/question
    text, or an unknown domain are skipped. Accepted rows get sequential
    ids (q001, q002, ...).

    Raises:
        ImportFormatError: If raw_data is not a non-empty string.
    """
    if not isinstance(raw_data, str) or not raw_data.strip():
        raise ImportFormatError("raw_data must be a string containing the question data")

    report = ImportReport()
    for line_number, parts in enumerate(_split_rows(raw_data, is_csv)):
        if len(parts) != EXPECTED_FIELDS:
            logger.debug(f"Skipping line {line_number}: wrong number of parts ({len(parts)})")
            report.skipped += 1
            continue

        business, domain, key_attributes, question_text = (part.strip() for part in parts)
        if not business or not domain or not question_text:
            report.skipped += 1
            continue

        category = DOMAIN_TO_CATEGORY.get(domain)
        if not category:
            logger.warning(f"Unknown domain: {domain}")
            report.skipped += 1
            continue

        standard_business = standardize_business_name(business)
        report.questions.append(Question(
            id=generate_question_id(report.imported),
            text=question_text,
            category=category,
            weights=weights_for_business(standard_business, key_attributes),
        ))

    logger.info(f"Processed {report.imported} questions, skipped {report.skipped} rows")
    return report


def summarize_raw_data(raw_data: str, is_csv: bool = False) -> Dict[str, Any]:
    """
    Previews a question sheet without building questions.

    Counts rows with four non-blank fields as processed and the rest as
    skipped, and lists business names (after alias standardization) that
    are not among the known business types.

    Raises:
        ImportFormatError: If raw_data is not a non-empty string.
    """
    if not isinstance(raw_data, str) or not raw_data.strip():
        raise ImportFormatError("raw_data must be a string containing the question data")

    rows = _split_rows(raw_data, is_csv)
    processed = 0
    unknown = set()
    for parts in rows:
        if len(parts) != EXPECTED_FIELDS or not all(part.strip() for part in parts):
            continue
        processed += 1
        business = standardize_business_name(parts[0].strip())
        if business not in BUSINESS_TYPES:
            unknown.add(business)

    return {
        "processed": processed,
        "skipped": len(rows) - processed,
        "total": len(rows),
        "unknown_business_types": sorted(unknown),
    }
