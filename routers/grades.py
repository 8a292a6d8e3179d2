from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from config.academic import MIN_YEAR, MAX_YEAR, class_name
from dependencies.services import get_engine, get_ingestion, get_store
from schemas.grades import Grade, GradeBatch, GradeSingle, Term
from schemas.students import ClassLevel
from services.aggregation import AggregationEngine
from services.exceptions import NotFoundError
from services.grade_ingestion import GradeIngestionService
from services.grade_store import GradeStore

router = APIRouter(prefix="/grades", tags=["grades"])

Year = Annotated[int, Query(ge=MIN_YEAR, le=MAX_YEAR)]


# ==========================================================
# [1] grade entry sheet
# ==========================================================

# ✅ [READ] students x subjects for a class, with the scores already saved
@router.get("/entry")
def get_entry_sheet(class_level: ClassLevel, term: Term, year: Year,
                    store: GradeStore = Depends(get_store)):
    students = store.list_students(class_level)
    subjects = store.list_subjects(class_level)
    existing = store.find_grades_by_class_term_year(class_level, term, year)

    # "studentId-subjectId" -> score
    grade_map = {f"{g.student_id}-{g.subject_id}": g.score for g in existing}

    body = {
        "success": True,
        "data": {
            "title": f"Grade Entry - {class_name(class_level)}",
            "class_level": class_level,
            "term": term,
            "year": year,
            "students": [{"id": s.id, "admission_no": s.admission_no, "name": s.name} for s in students],
            "subjects": [{"id": s.id, "name": s.name} for s in subjects],
            "grade_map": grade_map,
        },
    }
    if not students:
        body["warning"] = "No students found for this class"
    elif not subjects:
        body["warning"] = "No subjects found for this class"
    return body


# ✅ [SAVE] replace the grades of every student in the batch
@router.post("/save")
def save_grades(batch: GradeBatch, ingestion: GradeIngestionService = Depends(get_ingestion)):
    result = ingestion.save_batch(batch.class_level, batch.term, batch.year, batch.grades)
    data = {
        "class_level": batch.class_level,
        "term": batch.term,
        "year": batch.year,
        "saved": result.saved,
        "submitted": result.submitted,
    }
    if result.is_empty:
        return {"success": False, "data": data, "warning": result.message}
    return {"success": True, "data": data, "message": result.message}


# ✅ [AUTO-SAVE] one cell at a time (term / year from the query, default term 1 / this year)
@router.post("/save-single")
def save_single_grade(payload: GradeSingle,
                      term: Optional[Term] = None,
                      year: Optional[int] = Query(None, ge=MIN_YEAR, le=MAX_YEAR),
                      ingestion: GradeIngestionService = Depends(get_ingestion)):
    grade, created = ingestion.save_single(payload.student_id, payload.subject_id, payload.score, term, year)
    return {
        "success": True,
        "data": {**Grade.model_validate(grade).model_dump(), "created": created},
        "message": "Grade saved successfully"
    }


# ==========================================================
# [2] grade views
# ==========================================================

# ✅ [READ] one student's grades for a term
@router.get("/student/{student_id}")
def get_student_grades(student_id: int, term: Term, year: Year,
                       store: GradeStore = Depends(get_store),
                       engine: AggregationEngine = Depends(get_engine)):
    student = store.get_student(student_id)
    if student is None:
        raise NotFoundError("Student not found")
    sheet = engine.student_grade_sheet(student, term, year)
    return {"success": True, "data": sheet.model_dump()}


# ✅ [READ] a class's grades for a term, grouped by student
@router.get("/class")
def get_class_grades(class_level: ClassLevel, term: Term, year: Year,
                     engine: AggregationEngine = Depends(get_engine)):
    sheets = engine.class_grade_sheet(class_level, term, year)
    return {
        "success": True,
        "data": {
            "class_level": class_level,
            "term": term,
            "year": year,
            "students": [s.model_dump() for s in sheets],
        },
    }
