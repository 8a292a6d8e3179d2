from typing import Optional

from fastapi import APIRouter, Depends, Query

from config.academic import DEFAULT_TERM, MIN_YEAR, MAX_YEAR, current_year
from dependencies.services import get_engine
from schemas.grades import Term
from services.aggregation import AggregationEngine

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


# ✅ [DASHBOARD] student / subject / grade counts and average per class level
@router.get("/")
def get_dashboard(term: Optional[Term] = None,
                  year: Optional[int] = Query(None, ge=MIN_YEAR, le=MAX_YEAR),
                  engine: AggregationEngine = Depends(get_engine)):
    term = term or DEFAULT_TERM
    year = year or current_year()
    summaries = engine.dashboard(term, year)
    return {
        "success": True,
        "data": {
            "term": term,
            "year": year,
            "classes": {f"grade{s.class_level}": s.model_dump() for s in summaries},
        },
    }
