"""
services/grade_ingestion.py

Grade Ingestion Service.

- `save_batch`: filters a submitted entry sheet and replaces the grades of
  every student in it for the term / year, all inside one transaction
  (replace-by-student: subjects missing from the batch are wiped as well).
- `save_single`: upserts one (student, subject, term, year) score and commits
  on its own; concurrent calls are last-write-wins.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from config.academic import DEFAULT_TERM, current_year
from services.exceptions import IngestionError, NotFoundError
from services.grade_store import GradeStore

logger = logging.getLogger(__name__)

NO_VALID_GRADES = "No valid grades to save"


@dataclass(frozen=True)
class BatchResult:
    saved: int                  # entries that survived filtering and were written
    submitted: int
    message: str

    @property
    def is_empty(self) -> bool:
        return self.saved == 0


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool) or value == "":
        return None
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _as_score(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        score = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(score) or not 0 <= score <= 100:
        return None
    return score


def filter_entries(entries: Iterable[Any]) -> List[Dict[str, Any]]:
    """
    Keep entries with a student id, a subject id and a numeric score in
    [0, 100]; everything else is dropped without being reported.
    """
    valid = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        student_id = _as_int(entry.get("student_id"))
        subject_id = _as_int(entry.get("subject_id"))
        score = _as_score(entry.get("score"))
        if student_id is None or subject_id is None or score is None:
            continue
        valid.append({"student_id": student_id, "subject_id": subject_id, "score": score})
    return valid


class GradeIngestionService:
    def __init__(self, store: GradeStore):
        self.store = store

    def save_batch(self, class_level: str, term: str, year: int,
                   entries: List[Any]) -> BatchResult:
        valid = filter_entries(entries)
        if not valid:
            logger.warning("batch save class=%s term=%s year=%s: no valid grades", class_level, term, year)
            return BatchResult(saved=0, submitted=len(entries), message=NO_VALID_GRADES)

        rows = [dict(entry, term=term, year=year) for entry in valid]
        try:
            with self.store.transaction():
                removed = self.store.delete_grades_matching(term, year, (r["student_id"] for r in rows))
                self.store.bulk_insert_grades(rows)
        except Exception:
            logger.exception("batch save rolled back: class=%s term=%s year=%s", class_level, term, year)
            raise IngestionError("Error saving grades")

        logger.info(
            "batch save class=%s term=%s year=%s: replaced %d rows with %d",
            class_level, term, year, removed, len(rows),
        )
        return BatchResult(
            saved=len(rows),
            submitted=len(entries),
            message=f"{len(rows)} grades saved successfully",
        )

    def save_single(self, student_id: int, subject_id: int, score: float,
                    term: Optional[str] = None, year: Optional[int] = None):
        term = term or DEFAULT_TERM
        year = year or current_year()

        if self.store.get_student(student_id) is None:
            raise NotFoundError("Student not found")
        if self.store.get_subject(subject_id) is None:
            raise NotFoundError("Subject not found")

        grade, created = self.store.upsert_grade(student_id, subject_id, term, year, score)
        logger.debug("auto-save student=%s subject=%s term=%s year=%s created=%s",
                     student_id, subject_id, term, year, created)
        return grade, created
