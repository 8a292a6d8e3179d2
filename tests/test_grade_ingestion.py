import pytest
from sqlalchemy.exc import OperationalError

from models.grades import Grade as GradeModel
from services.exceptions import IngestionError, NotFoundError
from services.grade_ingestion import NO_VALID_GRADES, filter_entries


def _grades(db, student_id=None):
    query = db.query(GradeModel)
    if student_id is not None:
        query = query.filter(GradeModel.student_id == student_id)
    return sorted((g.student_id, g.subject_id, g.term, g.year, g.score) for g in query.all())


# ==========================================================
# filtering
# ==========================================================

def test_filter_entries_drops_invalid_entries():
    entries = [
        {"student_id": 1, "subject_id": 2, "score": 88},
        {"student_id": "3", "subject_id": "4", "score": "71.5"},
        {"student_id": 1, "subject_id": 3, "score": ""},
        {"student_id": 1, "subject_id": 3, "score": "abc"},
        {"student_id": 1, "subject_id": 3, "score": 100.01},
        {"student_id": 1, "subject_id": 3, "score": -1},
        {"student_id": None, "subject_id": 3, "score": 50},
        {"student_id": 1, "score": 50},
        {"student_id": 1, "subject_id": 3, "score": None},
        {"student_id": 1, "subject_id": 3, "score": float("nan")},
        {"student_id": 1, "subject_id": 3, "score": True},
        "not-a-dict",
    ]

    assert filter_entries(entries) == [
        {"student_id": 1, "subject_id": 2, "score": 88.0},
        {"student_id": 3, "subject_id": 4, "score": 71.5},
    ]


def test_filter_entries_keeps_boundaries():
    entries = [
        {"student_id": 1, "subject_id": 1, "score": 0},
        {"student_id": 1, "subject_id": 2, "score": "100"},
    ]
    assert [e["score"] for e in filter_entries(entries)] == [0.0, 100.0]


# ==========================================================
# batch save
# ==========================================================

def test_no_valid_entries_is_a_warning_without_mutation(db, ingestion, make_student, make_subject, add_grade):
    student = make_student("Ann")
    math = make_subject("Math")
    add_grade(student, math, 60)

    result = ingestion.save_batch("8", "1", 2024, [{"student_id": student.id, "subject_id": math.id, "score": ""}])

    assert result.is_empty
    assert result.saved == 0
    assert result.submitted == 1
    assert result.message == NO_VALID_GRADES
    assert _grades(db) == [(student.id, math.id, "1", 2024, 60.0)]


def test_batch_save_reports_surviving_count(db, ingestion, make_student, make_subject):
    student = make_student("Ann")
    math = make_subject("Math")
    eng = make_subject("English")

    result = ingestion.save_batch("8", "1", 2024, [
        {"student_id": student.id, "subject_id": math.id, "score": "90"},
        {"student_id": student.id, "subject_id": eng.id, "score": 75},
        {"student_id": student.id, "subject_id": eng.id, "score": 175},
    ])

    assert result.saved == 2
    assert result.submitted == 3
    assert result.message == "2 grades saved successfully"
    assert _grades(db) == [
        (student.id, math.id, "1", 2024, 90.0),
        (student.id, eng.id, "1", 2024, 75.0),
    ]


def test_batch_save_is_idempotent(db, ingestion, make_student, make_subject):
    a = make_student("Ann")
    b = make_student("Bob")
    math = make_subject("Math")
    batch = [
        {"student_id": a.id, "subject_id": math.id, "score": 81},
        {"student_id": b.id, "subject_id": math.id, "score": 62.5},
    ]

    ingestion.save_batch("8", "2", 2025, batch)
    first = _grades(db)
    ingestion.save_batch("8", "2", 2025, batch)

    assert _grades(db) == first
    assert len(first) == 2


def test_batch_save_replaces_by_student(db, ingestion, make_student, make_subject, add_grade):
    student = make_student("Ann")
    math = make_subject("Math")
    eng = make_subject("English")
    add_grade(student, math, 50)
    add_grade(student, eng, 65)

    ingestion.save_batch("8", "1", 2024, [{"student_id": student.id, "subject_id": math.id, "score": 90}])

    assert _grades(db, student.id) == [(student.id, math.id, "1", 2024, 90.0)]


def test_batch_save_leaves_other_students_and_periods_alone(db, ingestion, make_student, make_subject, add_grade):
    ann = make_student("Ann")
    bob = make_student("Bob")
    math = make_subject("Math")
    add_grade(bob, math, 55)
    add_grade(ann, math, 40, term="2")

    ingestion.save_batch("8", "1", 2024, [{"student_id": ann.id, "subject_id": math.id, "score": 70}])

    assert _grades(db) == sorted([
        (ann.id, math.id, "1", 2024, 70.0),
        (ann.id, math.id, "2", 2024, 40.0),
        (bob.id, math.id, "1", 2024, 55.0),
    ])


def test_batch_save_rolls_back_when_insert_fails(db, store, ingestion, make_student, make_subject,
                                                 add_grade, monkeypatch):
    student = make_student("Ann")
    math = make_subject("Math")
    eng = make_subject("English")
    add_grade(student, math, 50)
    add_grade(student, eng, 65)
    before = _grades(db)

    def _failing_insert(rows):
        raise OperationalError("INSERT INTO grades", {}, Exception("disk I/O error"))

    monkeypatch.setattr(store, "bulk_insert_grades", _failing_insert)

    with pytest.raises(IngestionError) as exc_info:
        ingestion.save_batch("8", "1", 2024, [{"student_id": student.id, "subject_id": math.id, "score": 99}])

    assert exc_info.value.message == "Error saving grades"
    assert "disk" not in str(exc_info.value)
    assert _grades(db) == before


def test_batch_with_duplicate_pairs_fails_atomically(db, ingestion, make_student, make_subject, add_grade):
    student = make_student("Ann")
    math = make_subject("Math")
    add_grade(student, math, 50)

    with pytest.raises(IngestionError):
        ingestion.save_batch("8", "1", 2024, [
            {"student_id": student.id, "subject_id": math.id, "score": 60},
            {"student_id": student.id, "subject_id": math.id, "score": 70},
        ])

    assert _grades(db) == [(student.id, math.id, "1", 2024, 50.0)]


# ==========================================================
# single-field auto-save
# ==========================================================

def test_save_single_creates_then_updates(db, ingestion, make_student, make_subject):
    student = make_student("Ann")
    math = make_subject("Math")

    grade, created = ingestion.save_single(student.id, math.id, 55, term="2", year=2023)
    assert created is True
    grade_id = grade.id

    grade, created = ingestion.save_single(student.id, math.id, 77.25, term="2", year=2023)
    assert created is False
    assert grade.id == grade_id
    assert _grades(db) == [(student.id, math.id, "2", 2023, 77.25)]


def test_save_single_defaults_to_term_one_this_year(ingestion, make_student, make_subject, monkeypatch):
    import services.grade_ingestion as module

    monkeypatch.setattr(module, "current_year", lambda: 2026)
    student = make_student("Ann")
    math = make_subject("Math")

    grade, _ = ingestion.save_single(student.id, math.id, 80)

    assert grade.term == "1"
    assert grade.year == 2026


def test_save_single_unknown_student_or_subject(ingestion, make_student, make_subject):
    student = make_student("Ann")
    math = make_subject("Math")

    with pytest.raises(NotFoundError, match="Student not found"):
        ingestion.save_single(9999, math.id, 50, term="1", year=2024)
    with pytest.raises(NotFoundError, match="Subject not found"):
        ingestion.save_single(student.id, 9999, 50, term="1", year=2024)
