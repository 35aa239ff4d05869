"""PDF rendering of a weekly summary."""
from datetime import date
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from wellpulse.schemas.report import WeeklySummary

RED_HEX = "#DC3545"
AMBER_HEX = "#FFC107"
GREEN_HEX = "#28A745"


def _styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(name="ReportTitle", fontSize=20, leading=24, spaceAfter=4))
    styles.add(ParagraphStyle(name="Meta", fontSize=11, leading=14, textColor=colors.HexColor("#666666")))
    styles.add(ParagraphStyle(name="Section", fontSize=14, leading=18, spaceBefore=12, spaceAfter=6))
    return styles


def pdf_filename(summary: WeeklySummary) -> str:
    return f"weekly-{summary.domain}-{summary.week_ending.replace('-', '')}.pdf"


def render_summary_pdf(summary: WeeklySummary) -> bytes:
    """Render the summary to PDF bytes; nothing but the summary is consulted."""
    styles = _styles()
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=17 * mm,
        rightMargin=17 * mm,
        topMargin=17 * mm,
        bottomMargin=17 * mm,
        title=f"Weekly Wellbeing Summary - {summary.domain}",
    )

    week_ending = date.fromisoformat(summary.week_ending)
    flow = [
        Paragraph("Weekly Wellbeing Summary", styles["ReportTitle"]),
        Paragraph(f"Domain: {escape(summary.domain)}", styles["Meta"]),
        Paragraph(f"Week Ending: {week_ending.strftime('%B')} {week_ending.day}, {week_ending.year}", styles["Meta"]),
        Spacer(1, 6 * mm),
        Paragraph("Totals", styles["Section"]),
    ]

    totals = Table(
        [
            ["Total Submissions", str(summary.total)],
            ["Red (Concern)", str(summary.red)],
            ["Amber (Caution)", str(summary.amber)],
            ["Green (Good)", str(summary.green)],
        ],
        colWidths=[70 * mm, 30 * mm],
    )
    totals.setStyle(TableStyle([
        ("TEXTCOLOR", (0, 1), (-1, 1), colors.HexColor(RED_HEX)),
        ("TEXTCOLOR", (0, 2), (-1, 2), colors.HexColor(AMBER_HEX)),
        ("TEXTCOLOR", (0, 3), (-1, 3), colors.HexColor(GREEN_HEX)),
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("LINEBELOW", (0, 0), (-1, 0), 0.5, colors.grey),
    ]))
    flow.append(totals)

    flow.append(Paragraph("Top Themes", styles["Section"]))
    if summary.themes:
        for theme in summary.themes:
            flow.append(Paragraph(f"&bull; {escape(theme.topic)}: {theme.count}", styles["BodyText"]))
    else:
        flow.append(Paragraph("No recurring theme extracted this week.", styles["BodyText"]))

    flow.append(Paragraph("Notes", styles["Section"]))
    flow.append(Paragraph("&bull; This report is anonymized and contains no personal data.", styles["BodyText"]))
    flow.append(Paragraph("&bull; Auto-sent weekly to employer wellbeing lead.", styles["BodyText"]))

    doc.build(flow)
    return buffer.getvalue()
