"""
Daily census PDF export.

The census is first turned into a layout-neutral ReportDocument (title lines,
header, rows of text) and then rendered to an A4 PDF with reportlab.
"""
import io
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional, Union

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

REPORT_TITLE = "Daily Patient Report"

# (header, attribute)
REPORT_COLUMNS = [
    ("MRN", "mrn"),
    ("Patient Name", "patient_name"),
    ("Specialty", "specialty"),
    ("Status", "patient_status"),
    ("Diagnosis", "diagnosis"),
]


@dataclass
class ReportDocument:
    title: str
    subtitles: List[str] = field(default_factory=list)
    header: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)


def _cell(value) -> str:
    return "" if value is None else str(value)


def build_census_document(
    patients: Iterable,
    report_date: Union[date, str],
    specialty: Optional[str] = None,
) -> ReportDocument:
    """Pure transformation of the filtered census into a document model."""
    day = report_date.isoformat() if isinstance(report_date, date) else str(report_date)
    subtitles = [f"Date: {day}"]
    if specialty:
        subtitles.append(f"Specialty: {specialty}")
    return ReportDocument(
        title=REPORT_TITLE,
        subtitles=subtitles,
        header=[header for header, _ in REPORT_COLUMNS],
        rows=[[_cell(getattr(p, attr, None)) for _, attr in REPORT_COLUMNS] for p in patients],
    )


def report_filename(report_date: Union[date, str], specialty: Optional[str] = None) -> str:
    day = report_date.isoformat() if isinstance(report_date, date) else str(report_date)
    suffix = f"_{specialty}" if specialty else ""
    return f"daily_report_{day}{suffix}.pdf"


class CensusReportGenerator:
    PAGE_MARGIN = 1.05 * cm  # ~30pt

    def __init__(self):
        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            "CensusTitle", parent=styles["Title"], fontSize=24, leading=28, spaceAfter=20,
        )
        self.subtitle_style = ParagraphStyle(
            "CensusSubtitle", parent=styles["Normal"], fontSize=18, leading=22, spaceAfter=10,
        )
        self.cell_style = ParagraphStyle(
            "CensusCell", parent=styles["Normal"], fontSize=10, leading=12, alignment=1,
        )

    def render(self, document: ReportDocument) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=self.PAGE_MARGIN,
            rightMargin=self.PAGE_MARGIN,
            topMargin=self.PAGE_MARGIN,
            bottomMargin=self.PAGE_MARGIN,
            title=document.title,
            invariant=1,
        )
        elements = [Paragraph(_escape(document.title), self.title_style)]
        for line in document.subtitles:
            elements.append(Paragraph(_escape(line), self.subtitle_style))
        elements.append(Spacer(1, 0.3 * cm))

        data = [[Paragraph(_escape(text), self.cell_style) for text in document.header]]
        for row in document.rows:
            data.append([Paragraph(_escape(text), self.cell_style) for text in row])

        col_width = doc.width / max(len(document.header), 1)
        table = Table(data, colWidths=[col_width] * len(document.header), repeatRows=1)
        table.setStyle(TableStyle([
            ("GRID", (0, 0), (-1, -1), 1, colors.black),
            ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("TOPPADDING", (0, 0), (-1, -1), 5),
        ]))
        elements.append(table)

        doc.build(elements)
        return buffer.getvalue()

    def generate(
        self,
        patients: Iterable,
        report_date: Union[date, str],
        specialty: Optional[str] = None,
    ) -> bytes:
        return self.render(build_census_document(patients, report_date, specialty))


def _escape(text: str) -> str:
    # Paragraph parses a mini-markup; "Immunology & Allergy" must not break it
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


report_generator = CensusReportGenerator()
