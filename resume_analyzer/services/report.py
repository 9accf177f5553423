"""
Report Synthesizer: renders analysis results into a paginated PDF
"""
from datetime import datetime, timezone
from io import BytesIO
from typing import BinaryIO, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer

from resume_analyzer.models.models import ReportPayload
from resume_analyzer.utils.exceptions import ExceptionContext, RenderFailure
from resume_analyzer.utils.logging_config import PerformanceMonitor, get_logger

logger = get_logger(__name__)

REPORT_TITLE = "AI Resume Analysis Report"
INTERVIEW_HEADING = "Interview Preparation"

PRESENT_COLOR = "#2e7d32"
ABSENT_COLOR = "#c62828"
# ZapfDingbats glyphs: "4" is a check mark, "8" a cross
PRESENT_MARK = f'<font name="ZapfDingbats" color="{PRESENT_COLOR}">4</font>'
ABSENT_MARK = f'<font name="ZapfDingbats" color="{ABSENT_COLOR}">8</font>'


def _styles():
    styles = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            'ReportTitle',
            parent=styles['Heading1'],
            fontName='Helvetica-Bold',
            fontSize=20,
            leading=26,
            spaceAfter=4,
            textColor=HexColor("#1a1a1a"),
        ),
        "meta": ParagraphStyle(
            'ReportMeta',
            parent=styles['Normal'],
            fontName='Helvetica',
            fontSize=9,
            textColor=HexColor("#555555"),
            spaceAfter=12,
        ),
        "h2": ParagraphStyle(
            'ReportH2',
            parent=styles['Heading2'],
            fontName='Helvetica-Bold',
            fontSize=14,
            leading=18,
            spaceBefore=14,
            spaceAfter=6,
            keepWithNext=True,
        ),
        "body": ParagraphStyle(
            'ReportBody',
            parent=styles['Normal'],
            fontName='Helvetica',
            fontSize=11,
            leading=15,
            spaceAfter=2,
        ),
    }


def _skill_lines(skills: List[str], style, marker: str = "", strength=None) -> list:
    if not skills:
        return [Paragraph("<i>None</i>", style)]
    lines = []
    for skill in skills:
        label = escape(skill)
        if strength and skill in strength:
            label = f"{label} ({strength[skill]})"
        lines.append(Paragraph(f"{marker} {label}" if marker else f"&bull; {label}", style))
    return lines


def build_story(payload: ReportPayload, generated_at: datetime) -> list:
    s = _styles()
    story = [
        Paragraph(REPORT_TITLE, s["title"]),
        Paragraph(f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')} UTC", s["meta"]),
    ]

    if payload.ats_score is not None or payload.fit_score is not None:
        story.append(Paragraph("Scores", s["h2"]))
        if payload.ats_score is not None:
            story.append(Paragraph(f"ATS Score: <b>{payload.ats_score}</b>/100", s["body"]))
        if payload.fit_score is not None:
            story.append(Paragraph(f"Fit Score: <b>{payload.fit_score}</b>%", s["body"]))

    if payload.skills is not None:
        story.append(Paragraph("Skills Found", s["h2"]))
        story += _skill_lines(payload.skills, s["body"], strength=payload.skill_strength)

    if payload.matching_skills is not None:
        story.append(Paragraph("Matching Skills", s["h2"]))
        story += _skill_lines(payload.matching_skills, s["body"], marker=PRESENT_MARK)

    if payload.missing_skills is not None:
        story.append(Paragraph("Missing Skills", s["h2"]))
        story += _skill_lines(payload.missing_skills, s["body"], marker=ABSENT_MARK)

    if payload.interview_prep:
        story.append(PageBreak())
        story.append(Paragraph(INTERVIEW_HEADING, s["h2"]))
        for line in payload.interview_prep.splitlines():
            if line.strip():
                story.append(Paragraph(escape(line), s["body"]))
            else:
                story.append(Spacer(1, 6))

    return story


def render_report(payload: ReportPayload, sink: BinaryIO, generated_at: Optional[datetime] = None) -> None:
    """Write the PDF report for payload into sink."""
    generated_at = generated_at or datetime.now(timezone.utc)
    with ExceptionContext("report rendering", logger=logger, wrap_as=RenderFailure):
        with PerformanceMonitor("Rendering PDF report", logger, threshold_ms=2000):
            doc = SimpleDocTemplate(
                sink,
                pagesize=A4,
                leftMargin=0.75 * inch,
                rightMargin=0.75 * inch,
                topMargin=0.75 * inch,
                bottomMargin=0.75 * inch,
                title=REPORT_TITLE,
                invariant=1,
            )
            doc.build(build_story(payload, generated_at))


def render_report_bytes(payload: ReportPayload, generated_at: Optional[datetime] = None) -> bytes:
    buffer = BytesIO()
    render_report(payload, buffer, generated_at=generated_at)
    return buffer.getvalue()
