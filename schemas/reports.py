from pydantic import BaseModel
from typing import Dict, List, Optional

from schemas.grades import SubjectGrade


# ==========================================================
# [ranking]
# ==========================================================
class RankedStudent(BaseModel):
    id: int
    admission_no: str
    name: str
    class_level: str


class RankingEntry(BaseModel):
    rank: int                             # 1-based position, no shared ranks
    student: RankedStudent
    total_marks: float                    # unrounded sum of scores
    average_score: float                  # 2 decimals
    average_grade_points: float           # 2 decimals
    subject_count: int
    grades: List[SubjectGrade] = []


class ClassStats(BaseModel):
    total_students: int                   # every student in the class
    students_with_grades: int             # length of the ranking
    class_average: float                  # mean of ranked averages
    highest_score: float                  # 0 when nobody is ranked
    lowest_score: float


class RankingReport(BaseModel):
    class_level: str
    term: str
    year: int
    rankings: List[RankingEntry]
    class_stats: ClassStats


# ==========================================================
# [subject performance]
# ==========================================================
class SubjectStat(BaseModel):
    subject_id: int
    subject_name: str
    count: int                            # graded students
    average: float
    highest: float
    lowest: float
    distribution: Dict[str, int]          # {"A": n, "B": n, "C": n, "D": n, "F": n}


# ==========================================================
# [dashboard]
# ==========================================================
class ClassSummary(BaseModel):
    class_level: str
    class_name: str
    student_count: int
    subject_count: int
    total_grades: int
    average_score: float


class ClassGradeSheet(BaseModel):
    student_id: int
    admission_no: str
    name: str
    grades: List[SubjectGrade]
    average_score: Optional[float] = None
