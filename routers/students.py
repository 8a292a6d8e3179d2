import logging
from typing import Optional

from fastapi import APIRouter, Depends

from dependencies.services import get_store
from schemas.students import ClassLevel, Student, StudentCreate
from services.exceptions import ConflictError, NotFoundError
from services.grade_store import GradeStore
from config.academic import class_name

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/students", tags=["students"])


def _student_out(s):
    return {**Student.model_validate(s).model_dump(), "class_name": class_name(s.class_level)}


def _get_or_404(store: GradeStore, student_id: int):
    student = store.get_student(student_id)
    if student is None:
        raise NotFoundError("Student not found")
    return student


# ==========================================================
# [1] CRUD
# ==========================================================

# ✅ [CREATE] add a student
@router.post("/", status_code=201)
def create_student(student: StudentCreate, store: GradeStore = Depends(get_store)):
    if store.find_student_by_admission_no(student.admission_no):
        raise ConflictError("Admission number already exists")

    db_student = store.create_student(**student.model_dump())
    logger.info("student created: id=%s admission_no=%s", db_student.id, db_student.admission_no)
    return {
        "success": True,
        "data": _student_out(db_student),
        "message": "Student added successfully"
    }


# ✅ [READ] all students, optionally one class (ordered by class, then name)
@router.get("/")
def read_students(class_level: Optional[ClassLevel] = None, store: GradeStore = Depends(get_store)):
    records = store.list_students(class_level)
    return {
        "success": True,
        "data": [_student_out(r) for r in records],
        "message": f"{len(records)} students"
    }


# ==========================================================
# [2] static lookups
# ==========================================================

# ✅ [READ] by admission number
@router.get("/admission/{admission_no}")
def read_student_by_admission_no(admission_no: str, store: GradeStore = Depends(get_store)):
    student = store.find_student_by_admission_no(admission_no)
    if student is None:
        raise NotFoundError("Student not found")
    return {"success": True, "data": _student_out(student)}


# ==========================================================
# [3] dynamic routes (detail / update / delete)
# ==========================================================

# ✅ [READ] one student
@router.get("/{student_id}")
def read_student(student_id: int, store: GradeStore = Depends(get_store)):
    return {"success": True, "data": _student_out(_get_or_404(store, student_id))}


# ✅ [UPDATE] edit a student in place
@router.put("/{student_id}")
def update_student(student_id: int, updated: StudentCreate, store: GradeStore = Depends(get_store)):
    student = _get_or_404(store, student_id)
    if store.find_student_by_admission_no(updated.admission_no, exclude_id=student_id):
        raise ConflictError("Admission number already exists")

    student = store.update_student(student, **updated.model_dump())
    return {
        "success": True,
        "data": _student_out(student),
        "message": "Student updated successfully"
    }


# ✅ [DELETE] remove a student together with its grades
@router.delete("/{student_id}")
def delete_student(student_id: int, store: GradeStore = Depends(get_store)):
    student = _get_or_404(store, student_id)
    removed = store.delete_student(student)
    logger.info("student deleted: id=%s (grades removed: %d)", student_id, removed)
    return {
        "success": True,
        "data": {"student_id": student_id, "grades_removed": removed},
        "message": "Student deleted successfully"
    }
