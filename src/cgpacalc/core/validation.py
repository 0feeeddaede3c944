from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from cgpacalc.core.grades import MAX_CREDITS, MIN_CREDITS, credits_in_range, is_known_grade, parse_credits
from cgpacalc.core.models import ErrorKind, GPAError, GPAWarning, SubjectRecord


logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "No subjects found. Please add subjects before calculating."
MISSING_FIELD_MESSAGE = "Missing data in subjects"
INVALID_CREDITS_MESSAGE = "Invalid credits"
NO_VALID_DATA_MESSAGE = "No valid data to calculate GPA."


def _is_blank(value: Optional[str]) -> bool:
    # whitespace counts as present; the credit/grade checks reject it
    return not value


def _missing_field_message(subject: SubjectRecord, strict_grades: bool) -> Optional[str]:
    no_credits = _is_blank(subject.credits)
    no_grade = _is_blank(subject.grade)
    if no_credits and no_grade:
        return "Missing credits and grade"
    if no_credits:
        return "Missing credits"
    if no_grade:
        return "Missing grade"
    if strict_grades and not is_known_grade(subject.grade):
        return f"Unrecognized grade '{subject.grade}'"
    return None


def find_missing_fields(subjects: Sequence[SubjectRecord], strict_grades: bool = True) -> List[GPAWarning]:
    warnings: List[GPAWarning] = []
    for idx, subject in enumerate(subjects, start=1):
        message = _missing_field_message(subject, strict_grades)
        if message:
            warnings.append(GPAWarning(idx, message))
    return warnings


def find_invalid_credits(parsed: Sequence[Optional[float]]) -> List[GPAWarning]:
    warnings: List[GPAWarning] = []
    for idx, credits in enumerate(parsed, start=1):
        if credits is None:
            warnings.append(GPAWarning(idx, "Credits must be a number"))
        elif not credits_in_range(credits):
            warnings.append(GPAWarning(idx, f"Credits must be between {MIN_CREDITS:g} and {MAX_CREDITS:g}"))
    return warnings


def validate_subjects(
    subjects: Sequence[SubjectRecord],
    strict_grades: bool = True,
) -> Tuple[List[float], Optional[GPAError]]:
    """
    Runs the structural checks over the whole batch.

    Returns the parsed credit values (one per subject, in order) and the
    first triggered error, if any. Error priority: empty input, missing
    fields, invalid credits. The zero-credit check needs scored rows and is
    done by the aggregation step.
    """
    if not subjects:
        return [], GPAError(ErrorKind.EMPTY_INPUT, EMPTY_INPUT_MESSAGE)

    missing = find_missing_fields(subjects, strict_grades)
    parsed = [parse_credits(s.credits) for s in subjects]
    invalid = find_invalid_credits(parsed)

    if missing:
        logger.info("Rejected batch: %d subject(s) with missing data", len(missing))
        return [], GPAError(ErrorKind.MISSING_FIELD, MISSING_FIELD_MESSAGE, tuple(missing))
    if invalid:
        logger.info("Rejected batch: %d subject(s) with invalid credits", len(invalid))
        return [], GPAError(ErrorKind.INVALID_CREDITS, INVALID_CREDITS_MESSAGE, tuple(invalid))

    return [c for c in parsed if c is not None], None


def no_valid_data_error() -> GPAError:
    return GPAError(ErrorKind.NO_VALID_DATA, NO_VALID_DATA_MESSAGE)
