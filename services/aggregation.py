"""
services/aggregation.py

Aggregation Engine: turns flat grade rows into per-student and per-class
summaries (averages, rankings, class statistics, subject statistics).

- The pure `build_*` functions work on rows already fetched by GradeStore.
- `AggregationEngine` fetches those rows for a class / term / year and calls
  them.
- Empty data is never an error: averages fall back to 0 and lists stay empty.
- Rounding (`round2`) is applied to reported averages only.
"""

from collections import OrderedDict
from typing import Dict, Iterable, List, Sequence

from config.academic import CLASS_LEVELS, class_name
from schemas.grades import StudentGradeSheet, SubjectGrade
from schemas.reports import (
    ClassGradeSheet, ClassStats, ClassSummary, RankedStudent, RankingEntry,
    RankingReport, SubjectStat,
)
from services.grade_store import GradeRow, GradeStore
from services.grading import GRADE_LETTERS, grade_letter, grade_points, round2


# ==========================================================
# [1] pure helpers over GradeRow lists
# ==========================================================
def mean_score(rows: Sequence[GradeRow]) -> float:
    """Unrounded mean of the scores; 0 when there are none."""
    if not rows:
        return 0
    return sum(r.score for r in rows) / len(rows)


def annotate(row: GradeRow) -> SubjectGrade:
    return SubjectGrade(
        grade_id=row.grade_id,
        subject_id=row.subject_id,
        subject_name=row.subject_name,
        score=row.score,
        grade_letter=grade_letter(row.score),
        grade_points=grade_points(row.score),
    )


def group_by(rows: Iterable[GradeRow], attr: str) -> Dict[int, List[GradeRow]]:
    grouped: Dict[int, List[GradeRow]] = OrderedDict()
    for row in rows:
        grouped.setdefault(getattr(row, attr), []).append(row)
    return grouped


def build_rankings(students, rows: Iterable[GradeRow]) -> List[RankingEntry]:
    """
    Rank `students` (already in name-ascending order) by average score.

    Students without grades are left out. The sort is stable, so equal
    averages keep the incoming name order, and ranks are strictly sequential.
    """
    by_student = group_by(rows, "student_id")

    entries = []
    for student in students:
        grades = by_student.get(student.id)
        if not grades:
            continue
        total_marks = sum(g.score for g in grades)
        total_points = sum(grade_points(g.score) for g in grades)
        entries.append({
            "student": RankedStudent(
                id=student.id,
                admission_no=student.admission_no,
                name=student.name,
                class_level=student.class_level,
            ),
            "total_marks": total_marks,
            "average_score": round2(total_marks / len(grades)),
            "average_grade_points": round2(total_points / len(grades)),
            "subject_count": len(grades),
            "grades": [annotate(g) for g in grades],
        })

    ranked = sorted(entries, key=lambda e: e["average_score"], reverse=True)
    return [RankingEntry(rank=idx, **entry) for idx, entry in enumerate(ranked, start=1)]


def build_class_stats(total_students: int, rankings: List[RankingEntry]) -> ClassStats:
    if not rankings:
        return ClassStats(
            total_students=total_students,
            students_with_grades=0,
            class_average=0,
            highest_score=0,
            lowest_score=0,
        )
    averages = [r.average_score for r in rankings]
    return ClassStats(
        total_students=total_students,
        students_with_grades=len(rankings),
        class_average=round2(sum(averages) / len(averages)),
        highest_score=rankings[0].average_score,
        lowest_score=rankings[-1].average_score,
    )


def grade_distribution(scores: Iterable[float]) -> Dict[str, int]:
    distribution = {letter: 0 for letter in GRADE_LETTERS}
    for score in scores:
        distribution[grade_letter(score)] += 1
    return distribution


def build_subject_stats(subjects, rows: Iterable[GradeRow]) -> List[SubjectStat]:
    """One entry per subject that has at least one grade, in subject order."""
    by_subject = group_by(rows, "subject_id")

    stats = []
    for subject in subjects:
        grades = by_subject.get(subject.id)
        if not grades:
            continue
        scores = [g.score for g in grades]
        stats.append(SubjectStat(
            subject_id=subject.id,
            subject_name=subject.name,
            count=len(scores),
            average=round2(sum(scores) / len(scores)),
            highest=max(scores),
            lowest=min(scores),
            distribution=grade_distribution(scores),
        ))
    return stats


# ==========================================================
# [2] engine bound to a store
# ==========================================================
class AggregationEngine:
    def __init__(self, store: GradeStore):
        self.store = store

    def student_average(self, student_id: int, term: str, year: int) -> float:
        return mean_score(self.store.find_grades_by_student_term_year(student_id, term, year))

    def class_average(self, class_level: str, term: str, year: int) -> float:
        return mean_score(self.store.find_grades_by_class_term_year(class_level, term, year))

    def ranking(self, class_level: str, term: str, year: int) -> RankingReport:
        students = self.store.list_students(class_level)
        rows = self.store.find_grades_by_class_term_year(class_level, term, year)
        rankings = build_rankings(students, rows)
        return RankingReport(
            class_level=class_level,
            term=term,
            year=year,
            rankings=rankings,
            class_stats=build_class_stats(len(students), rankings),
        )

    def subject_statistics(self, class_level: str, term: str, year: int) -> List[SubjectStat]:
        subjects = self.store.list_subjects(class_level)
        rows = self.store.find_grades_by_class_term_year(class_level, term, year)
        return build_subject_stats(subjects, rows)

    def dashboard(self, term: str, year: int) -> List[ClassSummary]:
        summaries = []
        for level in CLASS_LEVELS:
            rows = self.store.find_grades_by_class_term_year(level, term, year)
            summaries.append(ClassSummary(
                class_level=level,
                class_name=class_name(level),
                student_count=self.store.count_students(level),
                subject_count=self.store.count_subjects(level),
                total_grades=len(rows),
                average_score=round2(mean_score(rows)),
            ))
        return summaries

    def student_grade_sheet(self, student, term: str, year: int) -> StudentGradeSheet:
        rows = self.store.find_grades_by_student_term_year(student.id, term, year)
        average = round2(mean_score(rows))
        return StudentGradeSheet(
            student_id=student.id,
            admission_no=student.admission_no,
            name=student.name,
            class_level=student.class_level,
            term=term,
            year=year,
            grades=[annotate(r) for r in rows],
            average_score=average,
            average_grade_letter=grade_letter(average) if rows else None,
        )

    def class_grade_sheet(self, class_level: str, term: str, year: int) -> List[ClassGradeSheet]:
        """Grades of the class grouped by student; students without grades are skipped."""
        by_student = group_by(self.store.find_grades_by_class_term_year(class_level, term, year), "student_id")
        sheets = []
        for student in self.store.list_students(class_level):
            rows = by_student.get(student.id)
            if not rows:
                continue
            sheets.append(ClassGradeSheet(
                student_id=student.id,
                admission_no=student.admission_no,
                name=student.name,
                grades=[annotate(r) for r in rows],
                average_score=round2(mean_score(rows)),
            ))
        return sheets
