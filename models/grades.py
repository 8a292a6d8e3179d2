from sqlalchemy import (
    Column, Integer, Numeric, Enum, DateTime, ForeignKey, Index, UniqueConstraint, func
)
from database.db import Base
from config.academic import TERMS

class Grade(Base):
    __tablename__ = "grades"  # one score per student / subject / term / year
    __table_args__ = (
        UniqueConstraint("student_id", "subject_id", "term", "year", name="uq_grade_student_subject_period"),
        Index("ix_grades_student_period", "student_id", "term", "year"),
        Index("ix_grades_subject_period", "subject_id", "term", "year"),
    )

    id = Column(Integer, primary_key=True, index=True)                             # grade ID (Primary Key)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)        # students.id
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)        # subjects.id
    term = Column(Enum(*TERMS, name="term"), nullable=False)                       # "1" / "2" / "3"
    year = Column(Integer, nullable=False)                                         # 2020 ~ 2030
    score = Column(Numeric(5, 2, asdecimal=False), nullable=False)                 # 0 ~ 100, two decimals
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
