import random

import pytest

from scripts.import_grades import import_grades
from scripts.seed import SAMPLE_NAMES, SAMPLE_SUBJECTS, seed
from services.exceptions import ValidationError


def test_seed_fills_every_class(db, store, aggregation, monkeypatch):
    monkeypatch.setattr("scripts.seed.current_year", lambda: 2026)

    summary = seed(db, rng=random.Random(0))

    expected_grades = 2 * sum(len(SAMPLE_NAMES[c]) * len(SAMPLE_SUBJECTS[c]) for c in SAMPLE_NAMES)
    assert summary == {"students": 30, "subjects": 29, "grades": expected_grades}
    assert store.count_students("8") == 10
    report = aggregation.ranking("9", "3", 2025)
    assert report.class_stats.students_with_grades == 10
    assert all(r.subject_count == 12 for r in report.rankings)


def test_import_grades_from_csv(db, store, make_student, make_subject, add_grade, tmp_path):
    kate = make_student("Kate White", admission_no="JS8-001")
    liam = make_student("Liam Harris", admission_no="JS8-002")
    math = make_subject("Mathematics")
    eng = make_subject("English Language")
    add_grade(kate, eng, 10)

    csv_path = tmp_path / "grades.csv"
    csv_path.write_text(
        "admission_no,subject,class_level,term,year,score\n"
        "JS8-001,Mathematics,8,1,2024,77\n"
        "JS8-002,Mathematics,8,1,2024,64.5\n"
        "JS8-002,English Language,8,2,2024,abc\n"
        "JS8-999,Mathematics,8,1,2024,50\n"
        "JS8-001,Drama,8,1,2024,50\n",
        encoding="utf-8",
    )

    summary = import_grades(db, str(csv_path))

    assert summary == {"batches": 2, "saved": 2, "skipped": 2}
    kate_rows = store.find_grades_by_student_term_year(kate.id, "1", 2024)
    # replace-by-student: the English grade not in the file is gone
    assert [(r.subject_name, r.score) for r in kate_rows] == [("Mathematics", 77)]
    assert [r.score for r in store.find_grades_by_student_term_year(liam.id, "1", 2024)] == [64.5]


def test_import_grades_rejects_bad_period_before_saving(db, store, make_student, make_subject, tmp_path):
    kate = make_student("Kate White", admission_no="JS8-001")
    make_subject("Mathematics")

    csv_path = tmp_path / "grades.csv"
    csv_path.write_text(
        "admission_no,subject,class_level,term,year,score\n"
        "JS8-001,Mathematics,8,1,2024,77\n"
        "JS8-001,Mathematics,8,1,twenty,80\n",
        encoding="utf-8",
    )

    with pytest.raises(ValidationError, match="line 3: invalid year"):
        import_grades(db, str(csv_path))

    assert store.find_grades_by_student_term_year(kate.id, "1", 2024) == []


def test_import_grades_rejects_unknown_term(db, make_student, make_subject, tmp_path):
    make_student("Kate White", admission_no="JS8-001")
    make_subject("Mathematics")

    csv_path = tmp_path / "grades.csv"
    csv_path.write_text(
        "admission_no,subject,class_level,term,year,score\n"
        "JS8-001,Mathematics,8,4,2024,77\n",
        encoding="utf-8",
    )

    with pytest.raises(ValidationError, match="invalid term"):
        import_grades(db, str(csv_path))
