from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, Response

from config.academic import MIN_YEAR, MAX_YEAR, class_name
from config.settings import settings
from dependencies.services import get_engine
from schemas.grades import Term
from schemas.students import ClassLevel
from services.aggregation import AggregationEngine
from services.excel_service import ExcelService
from services.pdf_service import PDFService
from services.report_assembler import ranking_context, ranking_filename

router = APIRouter(prefix="/reports", tags=["reports"])

pdf_service = PDFService()
excel_service = ExcelService()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
Year = Annotated[int, Query(ge=MIN_YEAR, le=MAX_YEAR)]


def _attachment(filename: str):
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


# ==========================================================
# [1] ranking
# ==========================================================

# ✅ [RANKING] class ranking + class statistics
@router.get("/ranking")
def get_ranking(class_level: ClassLevel, term: Term, year: Year,
                engine: AggregationEngine = Depends(get_engine)):
    report = engine.ranking(class_level, term, year)
    body = {
        "success": True,
        "data": {"title": f"Ranking Report - {class_name(class_level)}", **report.model_dump()},
    }
    if report.class_stats.total_students == 0:
        body["warning"] = "No students found for this class"
    return body


# ✅ [HTML] printable ranking page
@router.get("/ranking/html", response_class=HTMLResponse)
def get_ranking_html(class_level: ClassLevel, term: Term, year: Year,
                     engine: AggregationEngine = Depends(get_engine)):
    report = engine.ranking(class_level, term, year)
    return HTMLResponse(pdf_service.render_ranking_html(ranking_context(report, settings.SCHOOL_NAME)))


# ✅ [EXCEL] ranking workbook download
@router.get("/ranking/excel")
def export_ranking_excel(class_level: ClassLevel, term: Term, year: Year,
                         engine: AggregationEngine = Depends(get_engine)):
    report = engine.ranking(class_level, term, year)
    content = excel_service.build_ranking_workbook(report)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers=_attachment(ranking_filename(class_level, term, year, "xlsx")),
    )


# ✅ [PDF] ranking PDF download
@router.get("/ranking/pdf")
def export_ranking_pdf(class_level: ClassLevel, term: Term, year: Year,
                       engine: AggregationEngine = Depends(get_engine)):
    report = engine.ranking(class_level, term, year)
    content = pdf_service.generate_ranking_pdf(ranking_context(report, settings.SCHOOL_NAME))
    return Response(
        content=content,
        media_type="application/pdf",
        headers=_attachment(ranking_filename(class_level, term, year, "pdf")),
    )


# ==========================================================
# [2] subject performance
# ==========================================================

# ✅ [SUBJECTS] per-subject average / high / low / letter distribution
@router.get("/subjects")
def get_subject_performance(class_level: ClassLevel, term: Term, year: Year,
                            engine: AggregationEngine = Depends(get_engine)):
    stats = engine.subject_statistics(class_level, term, year)
    return {
        "success": True,
        "data": {
            "title": f"Subject Performance - {class_name(class_level)}",
            "class_level": class_level,
            "term": term,
            "year": year,
            "subjects": [s.model_dump() for s in stats],
        },
    }
