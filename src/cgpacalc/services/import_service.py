import logging
import math
from typing import Any, Dict, Iterable, List, Mapping

from cgpacalc.core.models import SubjectRecord


logger = logging.getLogger(__name__)

COLUMNS = ("semester", "subjectcode", "subjectname", "credits", "grade")


class ImportServiceError(Exception):
    pass


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def normalize_row(row: Mapping[str, Any]) -> Dict[str, str]:
    out = {str(key).strip().lower(): _cell(value) for key, value in row.items()}
    # allow singular "credit"
    if "credit" in out and "credits" not in out:
        out["credits"] = out.pop("credit")
    return out


def records_from_rows(rows: Iterable[Mapping[str, Any]]) -> List[SubjectRecord]:
    """
    Maps spreadsheet rows (header -> cell value) onto SubjectRecords.

    Rows without credits are skipped; grade is optional here and is left for
    the GPA validator to report.
    """
    normalized = [normalize_row(row) for row in rows]
    if normalized and not any("credits" in row for row in normalized):
        raise ImportServiceError(f"Missing column: credits. Expected: {', '.join(COLUMNS)}.")

    subjects: List[SubjectRecord] = []
    for idx, row in enumerate(normalized):
        credits = row.get("credits", "")
        if not credits:
            # +2: header occupies the first spreadsheet row
            logger.warning("Row %d: missing credits, skipping", idx + 2)
            continue
        subjects.append(
            SubjectRecord(
                number=idx + 1,
                code=row.get("subjectcode", ""),
                semester=row.get("semester", ""),
                name=row.get("subjectname", ""),
                credits=credits,
                grade=row.get("grade", ""),
            )
        )

    if not subjects:
        raise ImportServiceError("No valid data found (credits are required).")
    logger.info("Imported %d subject(s) from %d row(s)", len(subjects), len(normalized))
    return subjects
