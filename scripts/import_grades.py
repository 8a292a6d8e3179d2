"""
Import grades from a CSV file through the batch save path.

CSV columns: admission_no, subject, class_level, term, year, score
Rows are grouped per (class_level, term, year) and each group is saved as one
batch, so a student's existing grades for that term are replaced.

    python -m scripts.import_grades data/grades.csv
"""
import csv
import sys
from collections import defaultdict

from sqlalchemy.orm import Session

from config.academic import MIN_YEAR, MAX_YEAR, TERMS
from database.db import SessionLocal
from services.exceptions import GradingError, ValidationError
from services.grade_ingestion import GradeIngestionService
from services.grade_store import GradeStore

CSV_PATH = "data/grades.csv"  # default path


def _period(row, line_no):
    """(term, year) of a CSV row; a bad period aborts the whole import"""
    term = row["term"].strip()
    if term not in TERMS:
        raise ValidationError(f"line {line_no}: invalid term {term!r}")
    try:
        year = int(row["year"].strip())
    except ValueError:
        raise ValidationError(f"line {line_no}: invalid year {row['year']!r}")
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ValidationError(f"line {line_no}: year {year} outside {MIN_YEAR}-{MAX_YEAR}")
    return term, year


def read_batches(store: GradeStore, rows):
    """(class_level, term, year) -> entries; rows with unknown students / subjects are skipped"""
    subjects = {(s.name, s.class_level): s.id for s in store.list_subjects()}
    batches = defaultdict(list)
    skipped = 0
    for line_no, row in enumerate(rows, start=2):
        term, year = _period(row, line_no)
        student = store.find_student_by_admission_no(row["admission_no"].strip())
        subject_id = subjects.get((row["subject"].strip(), row["class_level"].strip()))
        if student is None or subject_id is None:
            skipped += 1
            continue
        key = (row["class_level"].strip(), term, year)
        batches[key].append({"student_id": student.id, "subject_id": subject_id, "score": row["score"]})
    return batches, skipped


def import_grades(db: Session, csv_path: str) -> dict:
    store = GradeStore(db)
    ingestion = GradeIngestionService(store)

    with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
        batches, skipped = read_batches(store, csv.DictReader(csvfile))

    saved = 0
    for (class_level, term, year), entries in batches.items():
        saved += ingestion.save_batch(class_level, term, year, entries).saved
    return {"batches": len(batches), "saved": saved, "skipped": skipped}


def main():
    path = sys.argv[1] if len(sys.argv) > 1 else CSV_PATH
    db: Session = SessionLocal()
    try:
        summary = import_grades(db, path)
    except GradingError as e:
        print(f"❌ grades CSV not imported: {e.message}")
        sys.exit(1)
    finally:
        db.close()
    print(f"✅ grades CSV -> DB: {summary['saved']} saved in {summary['batches']} batches, {summary['skipped']} rows skipped")


if __name__ == "__main__":
    main()
