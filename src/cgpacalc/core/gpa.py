from __future__ import annotations

from collections import OrderedDict
import logging
import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from cgpacalc.config.settings import TREND_ORDERS, settings
from cgpacalc.core.grades import GRADE_POINTS, counts_toward_total, format_gpa, normalize_grade, to_grade_point
from cgpacalc.core.models import (
    CalculationOutcome,
    GPAResults,
    ResultRow,
    SemesterGPA,
    SemesterResult,
    SubjectRecord,
    TrendPoint,
)
from cgpacalc.core.validation import no_valid_data_error, validate_subjects


logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"(\d+)")


def score_rows(subjects: Sequence[SubjectRecord], credits: Sequence[float]) -> List[ResultRow]:
    """
    subjects: validated records
    credits: credit values parsed by the validator, aligned with subjects
    """
    rows: List[ResultRow] = []
    for idx, (subj, cred) in enumerate(zip(subjects, credits), start=1):
        point = to_grade_point(subj.grade)
        score = cred * point if point is not None else 0.0
        if point is not None:
            grade = normalize_grade(subj.grade)
        else:
            grade = (subj.grade or "").strip() or "-"
        rows.append(
            ResultRow(
                index=idx,
                subject_code=(subj.code or "").strip() or "-",
                semester=subj.semester or "-",
                name=(subj.name or "").strip() or f"Subject {idx}",
                credits=cred,
                grade=grade,
                score=score,
                grade_point=point,
                counted=counts_toward_total(cred, point),
            )
        )
    return rows


def total_of(rows: Iterable[ResultRow], counted_only: bool = True) -> Tuple[float, float]:
    total_credits = 0.0
    total_score = 0.0
    for row in rows:
        if row.counted or not counted_only:
            total_credits += row.credits
            total_score += row.score
    return total_credits, total_score


def group_by_semester(rows: Iterable[ResultRow]) -> "OrderedDict[str, List[ResultRow]]":
    groups: "OrderedDict[str, List[ResultRow]]" = OrderedDict()
    for row in rows:
        groups.setdefault(row.semester, []).append(row)
    return groups


def aggregate_semesters(rows: Iterable[ResultRow]) -> List[SemesterResult]:
    results: List[SemesterResult] = []
    for semester, sem_rows in group_by_semester(rows).items():
        # whole group, zero-scored unknown grades included
        credits, score = total_of(sem_rows, counted_only=False)
        results.append(
            SemesterResult(
                semester=semester,
                total_credits=credits,
                total_score=score,
                gpa=format_gpa(score, credits),
                rows=tuple(sem_rows),
            )
        )
    return results


def natural_key(label: str) -> Tuple[list, str]:
    parts = _DIGITS.split(label)
    return [int(p) if i % 2 else p.lower() for i, p in enumerate(parts)], label


def sort_semesters(labels: Iterable[str], order: str = "lexical") -> List[str]:
    if order not in TREND_ORDERS:
        raise ValueError(f"Unsupported trend order: {order}")
    if order == "natural":
        return sorted(labels, key=natural_key)
    return sorted(labels)


def build_cgpa_trend(semester_results: Sequence[SemesterResult], order: str = "lexical") -> List[TrendPoint]:
    by_semester = {s.semester: s for s in semester_results}
    trend: List[TrendPoint] = []
    running_credits = 0.0
    running_score = 0.0
    for semester in sort_semesters(by_semester, order):
        running_credits += by_semester[semester].total_credits
        running_score += by_semester[semester].total_score
        trend.append(TrendPoint(semester, format_gpa(running_score, running_credits)))
    return trend


def grade_distribution(rows: Iterable[ResultRow]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for row in rows:
        counts[row.grade] = counts.get(row.grade, 0) + 1
    return counts


def semester_extrema(
    semester_results: Sequence[SemesterResult],
) -> Tuple[Optional[SemesterGPA], Optional[SemesterGPA]]:
    # max()/min() keep the first of equal keys, so ties go to the earliest semester
    graded = [s for s in semester_results if s.gpa is not None]
    if not graded:
        return None, None
    best = max(graded, key=lambda s: float(s.gpa))
    worst = min(graded, key=lambda s: float(s.gpa))
    return SemesterGPA(best.semester, best.gpa), SemesterGPA(worst.semester, worst.gpa)


def calculate_gpa(
    subjects: Sequence[SubjectRecord],
    *,
    strict_grades: Optional[bool] = None,
    trend_order: Optional[str] = None,
) -> CalculationOutcome:
    """
    Runs validation, scoring, semester aggregation and trend building.

    Never raises for bad input; a rejected batch comes back as
    CalculationOutcome(error=...). Options default to the configured settings.
    """
    strict = settings.strict_grades if strict_grades is None else strict_grades
    order = trend_order or settings.trend_order

    credits, error = validate_subjects(subjects, strict_grades=strict)
    if error is not None:
        return CalculationOutcome(error=error)

    rows = score_rows(subjects, credits)
    total_credits, total_score = total_of(rows)
    if total_credits == 0:
        logger.info("Rejected batch: no credits accepted out of %d subject(s)", len(rows))
        return CalculationOutcome(error=no_valid_data_error())

    semester_results = aggregate_semesters(rows)
    best, worst = semester_extrema(semester_results)
    results = GPAResults(
        rows=tuple(rows),
        total_credits=total_credits,
        total_score=total_score,
        gpa=format_gpa(total_score, total_credits),
        semester_results=tuple(semester_results),
        grade_distribution=grade_distribution(rows),
        max_semester_gpa=best,
        min_semester_gpa=worst,
        cgpa_trend=tuple(build_cgpa_trend(semester_results, order)),
    )
    logger.debug(
        "GPA %s over %d subject(s), %d semester(s)",
        results.gpa,
        len(rows),
        len(semester_results),
    )
    return CalculationOutcome(results=results)


def grade_scale() -> Dict[str, int]:
    return dict(GRADE_POINTS)
