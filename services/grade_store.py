"""
services/grade_store.py

Persistence Store: every query the grading core needs, written as explicit
id-based joins over the students / subjects / grades tables.

- Callers above this layer (aggregation, ingestion, routers) never walk ORM
  relationships; they get model rows or flat `GradeRow` tuples.
- Multi-statement writes go through `transaction()`, which commits on success
  and rolls back on any exception.
"""

import logging
from contextlib import contextmanager
from typing import Iterable, List, NamedTuple, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.grades import Grade as GradeModel
from models.students import Student as StudentModel
from models.subjects import Subject as SubjectModel
from services.exceptions import ConflictError

logger = logging.getLogger(__name__)


class GradeRow(NamedTuple):
    """A grade with its subject resolved, as consumed by the aggregation engine."""
    grade_id: int
    student_id: int
    subject_id: int
    subject_name: str
    term: str
    year: int
    score: float


class GradeStore:
    def __init__(self, db: Session):
        self.db = db

    # ==========================================================
    # [transaction] scoped begin / commit / rollback
    # ==========================================================
    @contextmanager
    def transaction(self):
        try:
            yield self.db
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def _commit_or_conflict(self, message: str):
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(message)

    # ==========================================================
    # [students]
    # ==========================================================
    def list_students(self, class_level: Optional[str] = None) -> List[StudentModel]:
        query = self.db.query(StudentModel)
        if class_level:
            return query.filter(StudentModel.class_level == class_level).order_by(StudentModel.name.asc()).all()
        return query.order_by(StudentModel.class_level.asc(), StudentModel.name.asc()).all()

    def count_students(self, class_level: str) -> int:
        return self.db.query(StudentModel).filter(StudentModel.class_level == class_level).count()

    def get_student(self, student_id: int) -> Optional[StudentModel]:
        return self.db.query(StudentModel).filter(StudentModel.id == student_id).first()

    def find_student_by_admission_no(self, admission_no: str, exclude_id: Optional[int] = None) -> Optional[StudentModel]:
        query = self.db.query(StudentModel).filter(StudentModel.admission_no == admission_no)
        if exclude_id is not None:
            query = query.filter(StudentModel.id != exclude_id)
        return query.first()

    def create_student(self, **fields) -> StudentModel:
        student = StudentModel(**fields)
        self.db.add(student)
        self._commit_or_conflict("Admission number already exists")
        self.db.refresh(student)
        return student

    def update_student(self, student: StudentModel, **fields) -> StudentModel:
        for key, value in fields.items():
            setattr(student, key, value)
        self._commit_or_conflict("Admission number already exists")
        self.db.refresh(student)
        return student

    def delete_student(self, student: StudentModel) -> int:
        """Delete the student and its grades together; returns the number of grades removed."""
        with self.transaction():
            removed = (
                self.db.query(GradeModel)
                .filter(GradeModel.student_id == student.id)
                .delete(synchronize_session=False)
            )
            self.db.delete(student)
        return removed

    # ==========================================================
    # [subjects]
    # ==========================================================
    def list_subjects(self, class_level: Optional[str] = None) -> List[SubjectModel]:
        query = self.db.query(SubjectModel)
        if class_level:
            return query.filter(SubjectModel.class_level == class_level).order_by(SubjectModel.name.asc()).all()
        return query.order_by(SubjectModel.class_level.asc(), SubjectModel.name.asc()).all()

    def count_subjects(self, class_level: str) -> int:
        return self.db.query(SubjectModel).filter(SubjectModel.class_level == class_level).count()

    def get_subject(self, subject_id: int) -> Optional[SubjectModel]:
        return self.db.query(SubjectModel).filter(SubjectModel.id == subject_id).first()

    def find_subject_by_name_and_class(self, name: str, class_level: str,
                                       exclude_id: Optional[int] = None) -> Optional[SubjectModel]:
        # exact match: no case folding or whitespace normalisation
        query = self.db.query(SubjectModel).filter(
            SubjectModel.name == name,
            SubjectModel.class_level == class_level,
        )
        if exclude_id is not None:
            query = query.filter(SubjectModel.id != exclude_id)
        return query.first()

    def create_subject(self, **fields) -> SubjectModel:
        subject = SubjectModel(**fields)
        self.db.add(subject)
        self._commit_or_conflict("Subject already exists for this class level")
        self.db.refresh(subject)
        return subject

    def update_subject(self, subject: SubjectModel, **fields) -> SubjectModel:
        for key, value in fields.items():
            setattr(subject, key, value)
        self._commit_or_conflict("Subject already exists for this class level")
        self.db.refresh(subject)
        return subject

    def delete_subject(self, subject: SubjectModel) -> int:
        with self.transaction():
            removed = (
                self.db.query(GradeModel)
                .filter(GradeModel.subject_id == subject.id)
                .delete(synchronize_session=False)
            )
            self.db.delete(subject)
        return removed

    # ==========================================================
    # [grades] reads
    # ==========================================================
    def _grade_rows_query(self):
        return (
            self.db.query(
                GradeModel.id,
                GradeModel.student_id,
                GradeModel.subject_id,
                SubjectModel.name,
                GradeModel.term,
                GradeModel.year,
                GradeModel.score,
            )
            .join(SubjectModel, SubjectModel.id == GradeModel.subject_id)
        )

    @staticmethod
    def _to_rows(records) -> List[GradeRow]:
        return [
            GradeRow(r[0], r[1], r[2], r[3], r[4], r[5], float(r[6]))
            for r in records
        ]

    def find_grades_by_student_term_year(self, student_id: int, term: str, year: int) -> List[GradeRow]:
        records = (
            self._grade_rows_query()
            .filter(
                GradeModel.student_id == student_id,
                GradeModel.term == term,
                GradeModel.year == year,
            )
            .order_by(SubjectModel.name.asc())
            .all()
        )
        return self._to_rows(records)

    def find_grades_by_class_term_year(self, class_level: str, term: str, year: int) -> List[GradeRow]:
        records = (
            self._grade_rows_query()
            .join(StudentModel, StudentModel.id == GradeModel.student_id)
            .filter(
                StudentModel.class_level == class_level,
                GradeModel.term == term,
                GradeModel.year == year,
            )
            .order_by(GradeModel.student_id.asc(), SubjectModel.name.asc())
            .all()
        )
        return self._to_rows(records)

    def get_grade(self, student_id: int, subject_id: int, term: str, year: int) -> Optional[GradeModel]:
        return (
            self.db.query(GradeModel)
            .filter(
                GradeModel.student_id == student_id,
                GradeModel.subject_id == subject_id,
                GradeModel.term == term,
                GradeModel.year == year,
            )
            .first()
        )

    # ==========================================================
    # [grades] writes (call inside transaction())
    # ==========================================================
    def delete_grades_matching(self, term: str, year: int, student_ids: Iterable[int]) -> int:
        ids = sorted(set(student_ids))
        if not ids:
            return 0
        return (
            self.db.query(GradeModel)
            .filter(
                GradeModel.term == term,
                GradeModel.year == year,
                GradeModel.student_id.in_(ids),
            )
            .delete(synchronize_session=False)
        )

    def bulk_insert_grades(self, rows: List[dict]) -> int:
        self.db.add_all([GradeModel(**row) for row in rows])
        self.db.flush()
        return len(rows)

    # ==========================================================
    # [grades] single-row upsert (own commit)
    # ==========================================================
    def upsert_grade(self, student_id: int, subject_id: int, term: str, year: int,
                     score: float) -> Tuple[GradeModel, bool]:
        grade = self.get_grade(student_id, subject_id, term, year)
        created = grade is None
        if created:
            grade = GradeModel(student_id=student_id, subject_id=subject_id, term=term, year=year, score=score)
            self.db.add(grade)
        else:
            grade.score = score

        try:
            self.db.commit()
        except IntegrityError:
            # another request created the row first: overwrite its score
            self.db.rollback()
            logger.info("upsert race on student=%s subject=%s, updating existing row", student_id, subject_id)
            grade = self.get_grade(student_id, subject_id, term, year)
            if grade is None:
                raise
            grade.score = score
            self.db.commit()
            created = False

        self.db.refresh(grade)
        return grade, created
