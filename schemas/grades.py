from pydantic import BaseModel, Field
from typing import Any, List, Literal, Optional

from config.academic import MIN_YEAR, MAX_YEAR
from schemas.students import ClassLevel

Term = Literal["1", "2", "3"]

# ==========================================================
# [input] batch save from the grade entry sheet
# ==========================================================
class GradeBatch(BaseModel):
    class_level: ClassLevel
    term: Term
    year: int = Field(..., ge=MIN_YEAR, le=MAX_YEAR)
    # entries stay untyped: bad ones (non-objects included) are filtered out, not rejected
    grades: List[Any]


# ==========================================================
# [input] single-cell auto-save
# ==========================================================
class GradeSingle(BaseModel):
    student_id: int
    subject_id: int
    score: float = Field(..., ge=0, le=100)


# ==========================================================
# [output]
# ==========================================================
class Grade(BaseModel):
    id: int                                  # grade ID
    student_id: int                          # student ID
    subject_id: int                          # subject ID
    term: Term                               # term
    year: int                                # year
    score: float                             # 0 ~ 100

    class Config:
        from_attributes = True


class SubjectGrade(BaseModel):
    """A grade row annotated with its subject and derived letter / points."""
    grade_id: int
    subject_id: int
    subject_name: str
    score: float
    grade_letter: str
    grade_points: float


class StudentGradeSheet(BaseModel):
    student_id: int
    admission_no: str
    name: str
    class_level: ClassLevel
    term: Term
    year: int
    grades: List[SubjectGrade]
    average_score: float                     # 0 when no grades
    average_grade_letter: Optional[str] = None
