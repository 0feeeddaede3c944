from dataclasses import asdict
import logging
from typing import Any, Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from cgpacalc.config.settings import settings
from cgpacalc.core.gpa import calculate_gpa, grade_scale
from cgpacalc.core.models import CalculationOutcome, SubjectRecord
from cgpacalc.services.import_service import ImportServiceError, records_from_rows


logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="CGPA Calculator API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class SubjectPayload(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    number: Optional[int] = None
    code: str = ""
    semester: str = ""
    name: str = ""
    credits: str = ""
    grade: str = ""


class CalculatePayload(BaseModel):
    subjects: List[SubjectPayload] = Field(default_factory=list)
    trend_order: Optional[Literal["lexical", "natural"]] = None
    strict_grades: Optional[bool] = None


class ImportPayload(BaseModel):
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    trend_order: Optional[Literal["lexical", "natural"]] = None
    strict_grades: Optional[bool] = None


def _to_records(subjects: List[SubjectPayload]) -> List[SubjectRecord]:
    return [
        SubjectRecord(
            number=s.number if s.number is not None else idx,
            code=s.code,
            semester=s.semester,
            name=s.name,
            credits=s.credits,
            grade=s.grade,
        )
        for idx, s in enumerate(subjects, start=1)
    ]


def _import(rows: List[Dict[str, Any]]) -> List[SubjectRecord]:
    try:
        return records_from_rows(rows)
    except ImportServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


def _results_or_error(outcome: CalculationOutcome) -> Dict:
    if outcome.error is not None:
        raise HTTPException(
            status_code=422,
            detail={
                "kind": outcome.error.kind.value,
                "message": outcome.error.message,
                "warnings": [asdict(w) for w in outcome.error.warnings],
            },
        )
    return asdict(outcome.results)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/grade-scale")
def get_grade_scale() -> Dict[str, int]:
    return grade_scale()


@app.post("/gpa")
def calculate(payload: CalculatePayload) -> Dict:
    outcome = calculate_gpa(
        _to_records(payload.subjects),
        strict_grades=payload.strict_grades,
        trend_order=payload.trend_order,
    )
    return _results_or_error(outcome)


@app.post("/import")
def import_rows(payload: ImportPayload) -> Dict:
    return {"subjects": [asdict(s) for s in _import(payload.rows)]}


@app.post("/import/gpa")
def import_and_calculate(payload: ImportPayload) -> Dict:
    subjects = _import(payload.rows)
    outcome = calculate_gpa(
        subjects,
        strict_grades=payload.strict_grades,
        trend_order=payload.trend_order,
    )
    return _results_or_error(outcome)
