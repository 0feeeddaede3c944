from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


@dataclass
class SubjectRecord:
    number: int
    code: str = ""
    semester: str = ""
    name: str = ""
    credits: str = ""
    grade: str = ""


@dataclass(frozen=True)
class ResultRow:
    index: int
    subject_code: str
    semester: str
    name: str
    credits: float
    grade: str
    score: float
    grade_point: Optional[int] = None
    counted: bool = False


@dataclass(frozen=True)
class SemesterResult:
    semester: str
    total_credits: float
    total_score: float
    gpa: Optional[str]
    rows: Tuple[ResultRow, ...] = ()


@dataclass(frozen=True)
class SemesterGPA:
    semester: str
    gpa: str


@dataclass(frozen=True)
class TrendPoint:
    semester: str
    cgpa: Optional[str]


@dataclass(frozen=True)
class GPAResults:
    rows: Tuple[ResultRow, ...]
    total_credits: float
    total_score: float
    gpa: str
    semester_results: Tuple[SemesterResult, ...]
    grade_distribution: Dict[str, int]
    max_semester_gpa: Optional[SemesterGPA]
    min_semester_gpa: Optional[SemesterGPA]
    cgpa_trend: Tuple[TrendPoint, ...]


class ErrorKind(str, Enum):
    EMPTY_INPUT = "empty_input"
    MISSING_FIELD = "missing_field"
    INVALID_CREDITS = "invalid_credits"
    NO_VALID_DATA = "no_valid_data"


@dataclass(frozen=True)
class GPAWarning:
    subject_index: int
    message: str


@dataclass(frozen=True)
class GPAError:
    kind: ErrorKind
    message: str
    warnings: Tuple[GPAWarning, ...] = field(default_factory=tuple)

    @property
    def subject_indices(self) -> Tuple[int, ...]:
        return tuple(w.subject_index for w in self.warnings)


@dataclass(frozen=True)
class CalculationOutcome:
    results: Optional[GPAResults] = None
    error: Optional[GPAError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.results is not None
