import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.db import Base, get_db
from models import grades, students, subjects  # noqa: F401  (register tables)
from services.aggregation import AggregationEngine
from services.grade_ingestion import GradeIngestionService
from services.grade_store import GradeStore


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return GradeStore(db)


@pytest.fixture
def aggregation(store):
    return AggregationEngine(store)


@pytest.fixture
def ingestion(store):
    return GradeIngestionService(store)


@pytest.fixture
def make_student(store):
    counter = {"n": 0}

    def _make(name, class_level="8", admission_no=None):
        counter["n"] += 1
        return store.create_student(
            admission_no=admission_no or f"ADM-{counter['n']:03d}",
            name=name,
            class_level=class_level,
        )

    return _make


@pytest.fixture
def make_subject(store):
    def _make(name, class_level="8"):
        return store.create_subject(name=name, class_level=class_level)

    return _make


@pytest.fixture
def add_grade(store):
    """Insert one grade row directly (bypasses the ingestion filters)."""
    def _add(student, subject, score, term="1", year=2024):
        with store.transaction():
            store.bulk_insert_grades([{
                "student_id": student.id,
                "subject_id": subject.id,
                "term": term,
                "year": year,
                "score": score,
            }])

    return _add


@pytest.fixture
def client(session_factory):
    from main import app

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
