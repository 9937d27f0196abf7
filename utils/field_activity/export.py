# utils/field_activity/export.py
"""
Formatted Excel Export for Field Activity

Creates an Excel workbook with:
- Summary sheet (leader, filters in effect)
- Top salesmen ranking
- Activity log (the filtered/sorted table as shown)

Uses openpyxl for formatting capabilities.
"""

import logging
from datetime import datetime
from io import BytesIO
from typing import List, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from .constants import EXCEL_STYLES
from .models import ActivityLog, QueryState, SalesAnalysis

logger = logging.getLogger(__name__)


class ActivityExport:
    """
    Excel report generator for the field activity dashboard.

    Usage:
        exporter = ActivityExport()
        excel_bytes = exporter.create_report(analysis, visible_logs, state)

        st.download_button(
            label="Download Report",
            data=excel_bytes,
            file_name="field_activity.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
    """

    def __init__(self):
        self.wb = None
        self._init_styles()

    def _init_styles(self):
        """Initialize reusable styles."""
        self.header_fill = PatternFill(
            start_color=EXCEL_STYLES['header_fill_color'],
            end_color=EXCEL_STYLES['header_fill_color'],
            fill_type='solid'
        )
        self.header_font = Font(bold=True, color=EXCEL_STYLES['header_font_color'], size=11)
        self.title_font = Font(bold=True, size=16)
        self.label_font = Font(bold=True)
        self.center_align = Alignment(horizontal='center', vertical='center')

    # =========================================================================
    # MAIN EXPORT METHOD
    # =========================================================================

    def create_report(
        self,
        analysis: SalesAnalysis,
        logs: Sequence[ActivityLog],
        state: QueryState
    ) -> BytesIO:
        """
        Create the workbook.

        Args:
            analysis: Leader and top ten from the full snapshot
            logs: The activity rows currently shown (already filtered/sorted)
            state: Filters in effect, written to the summary sheet

        Returns:
            BytesIO containing the Excel file
        """
        self.wb = Workbook()

        self._create_summary_sheet(analysis, state, len(logs))
        self._create_ranking_sheet(analysis)
        self._create_activity_sheet(logs)

        output = BytesIO()
        self.wb.save(output)
        output.seek(0)

        logger.info(f"Excel report created ({len(logs)} activity rows)")
        return output

    # =========================================================================
    # SHEETS
    # =========================================================================

    def _create_summary_sheet(self, analysis: SalesAnalysis, state: QueryState, row_count: int):
        ws = self.wb.active
        ws.title = "Summary"

        ws.cell(row=1, column=1, value="Field Sales Activity Report").font = self.title_font

        rows = [
            ("Generated:", datetime.now().strftime('%Y-%m-%d %H:%M')),
            ("Special Sales Leader:", analysis.leader.email),
            ("Leader Special Sales:", analysis.leader.special_sales),
            ("Leader Overall Sales:", analysis.leader.overall_sales),
            ("Search:", state.search_term or "(none)"),
            ("Activity Filter:", state.filter_activity),
            ("Sorted By:", f"{state.sort_column} {state.sort_direction}"),
            ("Rows Exported:", row_count),
        ]

        for offset, (label, value) in enumerate(rows, start=3):
            ws.cell(row=offset, column=1, value=label).font = self.label_font
            ws.cell(row=offset, column=2, value=value)

        ws.column_dimensions['A'].width = 24
        ws.column_dimensions['B'].width = 40

    def _create_ranking_sheet(self, analysis: SalesAnalysis):
        ws = self.wb.create_sheet("Top Salesmen")
        headers = ["Rank", "Salesman", "Overall Sales", "Special Sales"]
        self._write_header(ws, headers)

        for rank, summary in enumerate(analysis.top_ten, start=1):
            ws.append([rank, summary.email, summary.overall_sales, summary.special_sales])

        self._autosize(ws, headers)

    def _create_activity_sheet(self, logs: Sequence[ActivityLog]):
        ws = self.wb.create_sheet("Activity Log")
        headers = ["Salesman", "Activities", "Logged At"]
        self._write_header(ws, headers)

        for row, log in enumerate(logs, start=2):
            ws.cell(row=row, column=1, value=log.user_email)
            ws.cell(row=row, column=2, value=", ".join(log.activity_types))
            if log.logged_at is not None:
                # Excel has no timezone support
                cell = ws.cell(row=row, column=3, value=log.logged_at.replace(tzinfo=None))
                cell.number_format = EXCEL_STYLES['datetime_format']

        self._autosize(ws, headers)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _write_header(self, ws, headers: List[str]):
        ws.append(headers)
        for col in range(1, len(headers) + 1):
            cell = ws.cell(row=1, column=col)
            cell.fill = self.header_fill
            cell.font = self.header_font
            cell.alignment = self.center_align
        ws.freeze_panes = 'A2'

    @staticmethod
    def _autosize(ws, headers: List[str]):
        for col, header in enumerate(headers, start=1):
            values = [len(str(c.value)) for c in ws[get_column_letter(col)] if c.value is not None]
            width = max(values + [len(header)])
            ws.column_dimensions[get_column_letter(col)].width = min(width + 2, 60)
