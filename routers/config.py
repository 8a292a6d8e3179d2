from fastapi import APIRouter

from config.academic import CLASS_LEVELS, DEFAULT_TERM, MIN_YEAR, MAX_YEAR, TERMS, class_name, current_year

router = APIRouter(prefix="/config", tags=["config"])


# ✅ [READ] options for the class / term / year selectors
@router.get("/academic")
def get_academic_config():
    year = current_year()
    return {
        "success": True,
        "data": {
            "class_levels": [{"value": c, "label": class_name(c)} for c in CLASS_LEVELS],
            "terms": list(TERMS),
            "current_term": DEFAULT_TERM,
            "current_year": year,
            "year_range": [MIN_YEAR, MAX_YEAR],
        },
        "message": f"Term {DEFAULT_TERM}, {year}"
    }
