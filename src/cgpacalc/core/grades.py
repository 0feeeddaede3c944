import math
import re
from typing import Dict, Optional


MIN_CREDITS = 0.0
MAX_CREDITS = 6.0

# plain ASCII decimal, no digit separators
_CREDITS_PATTERN = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")

GRADE_POINTS: Dict[str, int] = {
    "O": 10,
    "A+": 9,
    "A": 8,
    "B+": 7,
    "B": 6,
    "C+": 5,
    "C": 4,
}


def normalize_grade(grade: Optional[str]) -> str:
    return (grade or "").strip().upper()


def to_grade_point(grade: Optional[str]) -> Optional[int]:
    """
    Case-insensitive lookup on the fixed grade table.
    Returns None for blank or unsupported symbols.
    """
    return GRADE_POINTS.get(normalize_grade(grade))


def is_known_grade(grade: Optional[str]) -> bool:
    return to_grade_point(grade) is not None


def parse_credits(raw: Optional[str]) -> Optional[float]:
    """
    raw: credit load as typed or read from a spreadsheet cell.
    Returns the finite float value, or None when the text is not a number.
    """
    text = (raw or "").strip()
    if not _CREDITS_PATTERN.fullmatch(text):
        return None
    value = float(text)
    # "1e999" overflows to inf
    if not math.isfinite(value):
        return None
    return value


def credits_in_range(credits: float) -> bool:
    return MIN_CREDITS <= credits <= MAX_CREDITS


def counts_toward_total(credits: float, grade_point: Optional[int]) -> bool:
    return grade_point is not None and MIN_CREDITS < credits <= MAX_CREDITS


def format_gpa(total_score: float, total_credits: float) -> Optional[str]:
    if total_credits <= 0:
        return None
    return f"{total_score / total_credits:.3f}"
