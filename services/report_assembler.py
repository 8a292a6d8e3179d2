"""
services/report_assembler.py

Report Data Assembler: shapes a RankingReport into the plain rows / template
context consumed by the Excel writer, the PDF writer and the HTML page.
Numbers arrive already rounded by the aggregation engine.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from config.academic import class_name
from schemas.reports import RankingReport
from services.grading import grade_letter, performance_level

RANKING_COLUMNS = [
    "Rank",
    "Student Name",
    "Admission Number",
    "Total Marks",
    "Average Score",
    "Grade Points",
    "Subject Count",
    "Grade",
]


def ranking_rows(report: RankingReport) -> List[Dict[str, Any]]:
    return [
        {
            "Rank": r.rank,
            "Student Name": r.student.name,
            "Admission Number": r.student.admission_no,
            "Total Marks": r.total_marks,
            "Average Score": r.average_score,
            "Grade Points": r.average_grade_points,
            "Subject Count": r.subject_count,
            "Grade": grade_letter(r.average_score),
        }
        for r in report.rankings
    ]


def ranking_title(report: RankingReport) -> str:
    return f"{class_name(report.class_level)} Ranking Report - Term {report.term}, {report.year}"


def ranking_filename(class_level: str, term: str, year: int, ext: str) -> str:
    return f"ranking_grade_{class_level}_term_{term}_{year}.{ext}"


def ranking_context(report: RankingReport, school_name: str,
                    generated_at: Optional[datetime] = None) -> Dict[str, Any]:
    """Context for templates/ranking_report.html."""
    generated_at = generated_at or datetime.now()
    stats = report.class_stats
    return {
        "school_name": school_name,
        "title": f"{class_name(report.class_level)} Ranking Report",
        "subtitle": f"Term {report.term}, Academic Year {report.year}",
        "class_level": report.class_level,
        "term": report.term,
        "year": report.year,
        "generated_date": generated_at.strftime("%Y-%m-%d"),
        "generated_at": generated_at.strftime("%Y-%m-%d %H:%M"),
        "stats": stats.model_dump(),
        "has_rankings": bool(report.rankings),
        "columns": RANKING_COLUMNS,
        "rows": ranking_rows(report),
        "performance_level": performance_level(stats.class_average),
    }
