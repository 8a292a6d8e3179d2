from typing import Optional

from fastapi import APIRouter, Depends

from dependencies.services import get_store
from schemas.students import ClassLevel
from schemas.subjects import Subject, SubjectCreate
from services.exceptions import ConflictError, NotFoundError
from services.grade_store import GradeStore
from config.academic import class_name

router = APIRouter(prefix="/subjects", tags=["subjects"])


def _subject_out(s):
    return {**Subject.model_validate(s).model_dump(), "class_name": class_name(s.class_level)}


def _get_or_404(store: GradeStore, subject_id: int):
    subject = store.get_subject(subject_id)
    if subject is None:
        raise NotFoundError("Subject not found")
    return subject


# ✅ [CREATE] add a subject to a class level
@router.post("/", status_code=201)
def create_subject(subject: SubjectCreate, store: GradeStore = Depends(get_store)):
    if store.find_subject_by_name_and_class(subject.name, subject.class_level):
        raise ConflictError("Subject already exists for this class level")

    db_subject = store.create_subject(**subject.model_dump())
    return {
        "success": True,
        "data": _subject_out(db_subject),
        "message": "Subject added successfully"
    }


# ✅ [READ] all subjects, optionally one class
@router.get("/")
def read_subjects(class_level: Optional[ClassLevel] = None, store: GradeStore = Depends(get_store)):
    records = store.list_subjects(class_level)
    return {
        "success": True,
        "data": [_subject_out(r) for r in records],
        "message": f"{len(records)} subjects"
    }


# ✅ [READ] one subject
@router.get("/{subject_id}")
def read_subject(subject_id: int, store: GradeStore = Depends(get_store)):
    return {"success": True, "data": _subject_out(_get_or_404(store, subject_id))}


# ✅ [UPDATE] rename / move a subject
@router.put("/{subject_id}")
def update_subject(subject_id: int, updated: SubjectCreate, store: GradeStore = Depends(get_store)):
    subject = _get_or_404(store, subject_id)
    if store.find_subject_by_name_and_class(updated.name, updated.class_level, exclude_id=subject_id):
        raise ConflictError("Subject already exists for this class level")

    subject = store.update_subject(subject, **updated.model_dump())
    return {
        "success": True,
        "data": _subject_out(subject),
        "message": "Subject updated successfully"
    }


# ✅ [DELETE] remove a subject together with its grades
@router.delete("/{subject_id}")
def delete_subject(subject_id: int, store: GradeStore = Depends(get_store)):
    subject = _get_or_404(store, subject_id)
    removed = store.delete_subject(subject)
    return {
        "success": True,
        "data": {"subject_id": subject_id, "grades_removed": removed},
        "message": "Subject deleted successfully"
    }
