from fastapi import Depends
from sqlalchemy.orm import Session

from database.db import get_db
from services.aggregation import AggregationEngine
from services.grade_ingestion import GradeIngestionService
from services.grade_store import GradeStore


# ✅ one GradeStore per request, wrapping the request's session
def get_store(db: Session = Depends(get_db)) -> GradeStore:
    return GradeStore(db)


def get_engine(store: GradeStore = Depends(get_store)) -> AggregationEngine:
    return AggregationEngine(store)


def get_ingestion(store: GradeStore = Depends(get_store)) -> GradeIngestionService:
    return GradeIngestionService(store)
