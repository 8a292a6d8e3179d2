import logging
from datetime import datetime
from io import BytesIO
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from schemas.reports import RankingReport
from services.report_assembler import RANKING_COLUMNS, ranking_rows, ranking_title

# column widths in characters, same order as RANKING_COLUMNS
COLUMN_WIDTHS = [8, 25, 15, 12, 15, 12, 12, 8]

HEADER_ROW = 4


class ExcelService:
    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def build_ranking_workbook(self, report: RankingReport,
                               generated_at: Optional[datetime] = None) -> bytes:
        """
        Ranking sheet layout:
        title / generated-on / blank, header on row 4, one row per ranked
        student, then a summary statistics block.
        """
        generated_at = generated_at or datetime.now()
        wb = Workbook()
        ws = wb.active
        ws.title = "Ranking Report"

        ws["A1"] = ranking_title(report)
        ws["A1"].font = Font(bold=True, size=14)
        ws["A2"] = f"Generated on: {generated_at.strftime('%Y-%m-%d')}"
        ws["A2"].font = Font(size=10, italic=True)

        thin = Side(style="thin")
        border = Border(left=thin, right=thin, top=thin, bottom=thin)
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="667EEA", end_color="667EEA", fill_type="solid")

        for col, title in enumerate(RANKING_COLUMNS, 1):
            cell = ws.cell(row=HEADER_ROW, column=col, value=title)
            cell.font = header_font
            cell.fill = header_fill
            cell.border = border
            cell.alignment = Alignment(horizontal="center")

        rows = ranking_rows(report)
        row_num = HEADER_ROW + 1
        for row in rows:
            for col, key in enumerate(RANKING_COLUMNS, 1):
                cell = ws.cell(row=row_num, column=col, value=row[key])
                cell.border = border
            row_num += 1

        # summary block after one blank row
        stats = report.class_stats
        summary_row = row_num + 1
        ws.cell(row=summary_row, column=1, value="Summary Statistics:").font = Font(bold=True, size=12)
        summary = [
            ("Total Students:", stats.total_students),
            ("Students Ranked:", stats.students_with_grades),
            ("Class Average:", f"{stats.class_average:.2f}%"),
            ("Highest Score:", f"{stats.highest_score}%" if rows else "N/A"),
            ("Lowest Score:", f"{stats.lowest_score}%" if rows else "N/A"),
        ]
        for offset, (label, value) in enumerate(summary, 1):
            ws.cell(row=summary_row + offset, column=1, value=label)
            ws.cell(row=summary_row + offset, column=2, value=value)

        for col_idx, width in enumerate(COLUMN_WIDTHS, 1):
            ws.column_dimensions[get_column_letter(col_idx)].width = width

        buffer = BytesIO()
        wb.save(buffer)
        self.logger.info("built ranking workbook for class %s term %s %s (%d rows)",
                         report.class_level, report.term, report.year, len(rows))
        return buffer.getvalue()
