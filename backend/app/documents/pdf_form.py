"""
pdf_form.py - PDF rendering of a completed penalty form.

The PDF is a record-keeping copy of the submission. It consumes a
PenaltyRecord whose amounts were already resolved; nothing is recomputed here.
All user-entered text is escaped before it reaches reportlab markup.
"""

import logging
from decimal import Decimal
from io import BytesIO
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import (
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from app.catalog.models import Breach
from app.penalty import escalation_multiplier
from app.services.records import PenaltyRecord

from .base import DocumentGenerator, RenderContext

logger = logging.getLogger(__name__)

DEFAULT_FONT = "Helvetica"
DEFAULT_BOLD_FONT = "Helvetica-Bold"
CUSTOM_FONT_NAME = "PenaltyFormFont"

OCCURRENCE_NOTES = {
    1: "First occurrence: base fine",
    2: "Second occurrence within 12 months: written warning, base fine kept",
    3: "Third occurrence within 12 months: base fine increased by 50%",
}
REPEATED_OCCURRENCE_NOTE = "Fourth or later occurrence within 12 months: base fine doubled"


def format_amount(amount: Decimal, currency: str) -> str:
    return f"{amount:,.2f} {currency}"


def _text(value: str | None, default: str = "-") -> str:
    """Escape user text for Paragraph markup, keeping line breaks."""
    if not value:
        return default
    return escape(value).replace("\n", "<br/>")


class PdfFormGenerator(DocumentGenerator):
    """
    Renders a PenaltyRecord to a single A4 document.

    Structure:
    1. Title and issue date
    2. Reporter (name, unit, breach date)
    3. Breach (code, description, regulation article)
    4. Penalty (occurrence escalation or fixed tier, final amount)
    5. Context information and evidence materials
    6. Signature lines
    """

    media_type = "application/pdf"

    def __init__(self, font_path: str | None = None) -> None:
        self.font_name = DEFAULT_FONT
        self.bold_font_name = DEFAULT_BOLD_FONT
        if font_path:
            self._register_font(font_path)

    def _register_font(self, font_path: str) -> None:
        path = Path(font_path)
        if not path.exists():
            raise FileNotFoundError(f"PDF font not found: {path}")
        if CUSTOM_FONT_NAME not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(TTFont(CUSTOM_FONT_NAME, str(path)))
            logger.info("Registered PDF font %s from %s", CUSTOM_FONT_NAME, path)
        # A single TTF covers both weights
        self.font_name = CUSTOM_FONT_NAME
        self.bold_font_name = CUSTOM_FONT_NAME

    def generate(self, record: PenaltyRecord, context: RenderContext) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            topMargin=0.75 * inch,
            bottomMargin=0.75 * inch,
            title=context.title,
            author=record.reporter_name,
        )

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            "FormTitle",
            parent=styles["Title"],
            fontName=self.bold_font_name,
            fontSize=18,
            textColor=colors.HexColor("#1a1a1a"),
            spaceAfter=6,
        )
        heading_style = ParagraphStyle(
            "FormHeading",
            parent=styles["Heading2"],
            fontName=self.bold_font_name,
            fontSize=12,
            textColor=colors.HexColor("#2a2a2a"),
            spaceBefore=12,
            spaceAfter=6,
        )
        body_style = ParagraphStyle(
            "FormBody",
            parent=styles["BodyText"],
            fontName=self.font_name,
            fontSize=10,
            leading=13,
        )
        amount_style = ParagraphStyle(
            "FormAmount",
            parent=body_style,
            fontName=self.bold_font_name,
            fontSize=12,
        )

        story = []

        # === 1. TITLE ===
        story.append(Paragraph(escape(context.title), title_style))
        story.append(Paragraph(f"Issued on {escape(context.today)}", body_style))
        story.append(Spacer(1, 0.2 * inch))

        # === 2. REPORTER ===
        story.append(Paragraph("Reporter", heading_style))
        story.append(self._key_value_table([
            ("First name", _text(record.first_name)),
            ("Last name", _text(record.last_name)),
            ("Unit", _text(record.unit)),
            ("Breach date", record.breach_date.strftime(context.date_format) if record.breach_date else "-"),
        ], body_style))

        # === 3. BREACH ===
        story.append(Paragraph("Breach", heading_style))
        breach_rows = [
            ("Code", _text(record.breach.code)),
            ("Description", _text(record.breach.description)),
        ]
        if isinstance(record.breach, Breach):
            breach_rows.append(("Regulation article", _text(record.breach.regulation_reference)))
            breach_rows.append(("Base amount", format_amount(record.breach.base_amount, context.currency)))
        story.append(self._key_value_table(breach_rows, body_style))

        # === 4. PENALTY ===
        story.append(Paragraph("Penalty", heading_style))
        penalty_rows = []
        if record.occurrence_count is not None:
            multiplier = escalation_multiplier(record.occurrence_count)
            penalty_rows.append(("Occurrences (12 months)", str(record.occurrence_count)))
            penalty_rows.append((
                "Escalation",
                OCCURRENCE_NOTES.get(record.occurrence_count, REPEATED_OCCURRENCE_NOTE)
                + f" (x{multiplier.normalize()})",
            ))
        if record.penalty_tier is not None:
            penalty_rows.append(("Penalty tier", _text(record.penalty_tier.code)))
            penalty_rows.append(("Tier description", _text(record.penalty_tier.description)))
        if penalty_rows:
            story.append(self._key_value_table(penalty_rows, body_style))
            story.append(Spacer(1, 0.1 * inch))
        story.append(Paragraph(
            f"Amount due: {format_amount(record.calculated_penalty, context.currency)}",
            amount_style,
        ))

        # === 5. CONTEXT AND EVIDENCE ===
        story.append(Paragraph("Context information", heading_style))
        story.append(Paragraph(_text(record.context_information), body_style))

        story.append(Paragraph("Evidence materials", heading_style))
        if record.evidence_materials:
            for item in record.evidence_materials:
                story.append(Paragraph(_text(item), body_style, bulletText="•"))
        else:
            story.append(Paragraph("None provided", body_style))

        # === 6. SIGNATURES ===
        story.append(Spacer(1, 0.5 * inch))
        signature_table = Table(
            [
                ["Reporter", "Administrator"],
                ["", ""],
                ["______________________", "______________________"],
            ],
            colWidths=[3 * inch, 3 * inch],
            rowHeights=[None, 0.4 * inch, None],
        )
        signature_table.setStyle(TableStyle([
            ("FONTNAME", (0, 0), (-1, 0), self.bold_font_name),
            ("FONTNAME", (0, 1), (-1, -1), self.font_name),
            ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ]))
        story.append(signature_table)

        doc.build(story)

        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes

    def _key_value_table(self, rows: list[tuple[str, str]], body_style: ParagraphStyle) -> Table:
        # Values wrapped in Paragraphs so long descriptions break across lines
        data = [[label, Paragraph(value, body_style)] for label, value in rows]
        table = Table(data, colWidths=[1.9 * inch, 4.4 * inch])
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (0, -1), colors.HexColor("#e8e8e8")),
            ("FONTNAME", (0, 0), (0, -1), self.bold_font_name),
            ("FONTSIZE", (0, 0), (0, -1), 9),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("LEFTPADDING", (0, 0), (-1, -1), 6),
            ("RIGHTPADDING", (0, 0), (-1, -1), 6),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ]))
        return table
