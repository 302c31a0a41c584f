"""PDF report of the ranked candidates, rendered with reportlab."""
from __future__ import annotations

import io
from datetime import date
from typing import List, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm, mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .candidate import NOT_SPECIFIED, Candidate
from .exports import ExportFile, dated_file_name
from .ranking import round_percent

INDIGO = colors.HexColor("#4f46e5")
GRAY_TEXT = colors.HexColor("#4b5563")
MUTED_TEXT = colors.HexColor("#6b7280")
ROW_SHADE = colors.HexColor("#f3f4f6")
RULE = colors.HexColor("#e5e7eb")
FOOTER_TEXT = colors.HexColor("#9ca3af")

SKILLS_PREVIEW_LENGTH = 18
FOOTER_LABEL = "Generated by CV Profile Ranker"


class _NumberedCanvas(canvas.Canvas):
    """Canvas that defers page output so each footer can show the page total."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states: List[dict] = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total_pages = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total_pages)
            super().showPage()
        super().save()

    def _draw_footer(self, total_pages: int) -> None:
        self.saveState()
        self.setFont("Helvetica", 8)
        self.setFillColor(FOOTER_TEXT)
        self.drawString(
            14 * mm,
            12 * mm,
            f"Page {self._pageNumber} of {total_pages} | {FOOTER_LABEL}",
        )
        self.restoreState()


def _styles() -> dict:
    sample = getSampleStyleSheet()
    return {
        "title": ParagraphStyle("RankerTitle", parent=sample["Heading1"], fontSize=16, textColor=GRAY_TEXT),
        "date": ParagraphStyle("RankerDate", parent=sample["Normal"], fontSize=10, textColor=MUTED_TEXT),
        "heading": ParagraphStyle(
            "RankerHeading", parent=sample["Heading2"], fontSize=14, textColor=INDIGO, spaceBefore=12
        ),
        "label": ParagraphStyle(
            "RankerLabel", parent=sample["Normal"], fontSize=10, textColor=INDIGO, spaceBefore=6
        ),
        "body": ParagraphStyle("RankerBody", parent=sample["Normal"], fontSize=10, textColor=GRAY_TEXT),
        "cell": ParagraphStyle("RankerCell", parent=sample["Normal"], fontSize=8, textColor=GRAY_TEXT),
        "header_cell": ParagraphStyle(
            "RankerHeaderCell", parent=sample["Normal"], fontSize=8, textColor=colors.white,
            fontName="Helvetica-Bold",
        ),
    }


def _skills_preview(candidate: Candidate, required_skills: Sequence[str]) -> str:
    skills = ", ".join(skill for skill in candidate.matched_skills if skill in required_skills)
    if not skills:
        return "N/A"
    if len(skills) > SKILLS_PREVIEW_LENGTH:
        return skills[:SKILLS_PREVIEW_LENGTH] + "..."
    return skills


def _ranking_table(candidates: Sequence[Candidate], required_skills: Sequence[str], styles: dict) -> Table:
    headers = ["Ranking", "Name", "Score", "Experience", "Suggested Role", "Seniority"]
    widths = [1.6 * cm, 4.4 * cm, 1.6 * cm, 2.0 * cm, 4.0 * cm, 2.4 * cm]
    if required_skills:
        headers.append("Skills")
        widths = [1.5 * cm, 3.6 * cm, 1.5 * cm, 1.9 * cm, 3.4 * cm, 2.2 * cm, 3.0 * cm]

    cell = styles["cell"]
    data = [[Paragraph(escape(header), styles["header_cell"]) for header in headers]]
    for index, candidate in enumerate(candidates, start=1):
        row = [
            Paragraph(str(index), cell),
            Paragraph(escape(candidate.name), cell),
            Paragraph(f"{round_percent(candidate.score)}%", cell),
            Paragraph(f"{candidate.experience:g} years", cell),
            Paragraph(escape(candidate.suggested_role), cell),
            Paragraph(escape(candidate.seniority or NOT_SPECIFIED), cell),
        ]
        if required_skills:
            row.append(Paragraph(escape(_skills_preview(candidate, required_skills)), cell))
        data.append(row)

    commands = [
        ("BACKGROUND", (0, 0), (-1, 0), INDIGO),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
    ]
    for row_index in range(1, len(data)):
        if row_index % 2 == 1:
            commands.append(("BACKGROUND", (0, row_index), (-1, row_index), ROW_SHADE))

    table = Table(data, colWidths=widths, repeatRows=1)
    table.setStyle(TableStyle(commands))
    return table


def _candidate_details(index: int, candidate: Candidate, styles: dict) -> list:
    body = styles["body"]
    label = styles["label"]
    flowables: list = [
        Table([[""]], colWidths=[18 * cm], rowHeights=[2], style=[("LINEABOVE", (0, 0), (-1, 0), 0.5, RULE)]),
        Paragraph(escape(f"{index}. {candidate.name}"), styles["heading"]),
        Paragraph(
            escape(
                f"Score: {round_percent(candidate.score)}% | Suggested Role: {candidate.suggested_role} | "
                f"Seniority: {candidate.seniority or NOT_SPECIFIED}"
            ),
            body,
        ),
        Paragraph(
            escape(f"Experience: {candidate.experience:g} years | Education: {candidate.education}"),
            body,
        ),
    ]

    sections = [
        ("Experience Summary:", candidate.experience_summary),
        ("Education and Certifications:", candidate.education_summary),
        ("Highlighted Skills:", ", ".join(candidate.matched_skills)),
        ("Other Skills:", candidate.other_skills),
    ]
    for title, text in sections:
        if not text:
            continue
        flowables.append(Paragraph(escape(title), label))
        flowables.append(Paragraph(escape(text), body))

    flowables.append(Spacer(1, 0.4 * cm))
    return flowables


def build_pdf_report(
    candidates: Sequence[Candidate],
    required_skills: Sequence[str] = (),
    *,
    today: date | None = None,
) -> bytes:
    """Render the ranking table followed by a details section per candidate."""

    today = today or date.today()
    styles = _styles()
    buffer = io.BytesIO()
    document = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=15 * mm,
        bottomMargin=20 * mm,
        title="IT Candidate Evaluation",
    )

    story: list = [
        Paragraph("IT Candidate Evaluation", styles["title"]),
        Paragraph(f"Date: {today.strftime('%d/%m/%Y')}", styles["date"]),
        Spacer(1, 0.5 * cm),
        _ranking_table(candidates, required_skills, styles),
        Spacer(1, 0.5 * cm),
        Paragraph("Candidate Details", styles["heading"]),
    ]
    for index, candidate in enumerate(candidates, start=1):
        story.extend(_candidate_details(index, candidate, styles))

    document.build(story, canvasmaker=_NumberedCanvas)
    return buffer.getvalue()


def export_pdf(
    candidates: Sequence[Candidate],
    required_skills: Sequence[str] = (),
    *,
    today: date | None = None,
) -> ExportFile:
    return ExportFile(
        file_name=dated_file_name("candidates_evaluation", "pdf", today=today),
        data=build_pdf_report(candidates, required_skills, today=today),
        mime_type="application/pdf",
    )
