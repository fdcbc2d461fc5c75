"""Single parameterized PDF renderer built on reportlab platypus.

Layout: header band (brand emblem, title and case reference, optional logo),
metadata block, divider, then the line-classified body. The footer is drawn
after layout by a canvas that buffers every page, so "Page i of N" always
reflects the final page count.
"""

import functools
import random
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from io import BytesIO
from typing import Any, ClassVar
from xml.sax.saxutils import escape

from reportlab.graphics.shapes import Drawing, Group
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    Flowable,
    HRFlowable,
    Image,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from app.branding.models import GeneratedBrand
from app.catalog.models import ServiceDefinition
from app.logging.logger import GenerationStep, Log
from app.rendering.content import DocumentContent
from app.rendering.exceptions import RenderError
from app.rendering.layout import LineKind, TableBlock, TextLine, build_blocks
from app.rendering.metadata import extract_metadata, metadata_lines
from app.rendering.models import RenderedPdf
from app.rendering.text_cleaner import clean_generated_text, extract_title
from app.sanitization.models import SanitizedInputs

DISCLAIMER = "Internet Streets Entertainment - Not a Real Document."

_TEXT = colors.HexColor("#000000")
_TEXT_SECONDARY = colors.HexColor("#3c3c3c")
_BORDER = colors.HexColor("#aaaaaa")
_DIVIDER = colors.HexColor("#cccccc")
_TABLE_HEADER = colors.HexColor("#efefef")
_ZEBRA = colors.HexColor("#f8f8f8")
_FOOTER = colors.HexColor("#555555")

_EMBLEM_SIZE = 60.0
_LOGO_SIZE = 60.0


def generate_case_reference(prefix: str, now: datetime, rng: random.Random | None = None) -> str:
    """Return a reference like 26-0417-PAY (two-digit year, random 4 digits, prefix)."""
    rng = rng or random.Random()
    return f"{now:%y}-{rng.randint(0, 9999):04d}-{prefix}"


class _FooterState:
    """Shared between the renderer and its canvas to report the page count."""

    def __init__(self, disclaimer: str, generated_label: str) -> None:
        self.disclaimer = disclaimer
        self.generated_label = generated_label
        self.page_count = 0


class _FooterCanvas(canvas.Canvas):
    """Defers page emission until save() so each footer knows the total."""

    def __init__(self, *args: Any, footer: _FooterState, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._footer = footer
        self._saved_page_states: list[dict[str, Any]] = []

    def showPage(self) -> None:
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self) -> None:
        total = len(self._saved_page_states)
        self._footer.page_count = total
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total: int) -> None:
        width, _ = self._pagesize
        y = 12 * mm
        self.saveState()
        self.setFont("Helvetica", 8)
        self.setFillColor(_FOOTER)
        self.drawString(20 * mm, y, self._footer.generated_label)
        self.drawCentredString(width / 2, y, self._footer.disclaimer)
        self.drawRightString(width - 20 * mm, y, f"Page {self._pageNumber} of {total}")
        self.restoreState()


class PdfRenderer:
    """Renders cleaned document content into a paginated, branded PDF."""

    STYLES: ClassVar[dict[str, ParagraphStyle]] = {
        "title": ParagraphStyle("title", fontName="Helvetica-Bold", fontSize=12, leading=15,
                                textColor=_TEXT),
        "kicker": ParagraphStyle("kicker", fontName="Helvetica-Bold", fontSize=8, leading=10,
                                 textColor=_TEXT_SECONDARY),
        "case_ref": ParagraphStyle("case_ref", fontName="Helvetica", fontSize=9, leading=11,
                                   textColor=_TEXT_SECONDARY, spaceBefore=4),
        "meta": ParagraphStyle("meta", fontName="Helvetica", fontSize=9, leading=12,
                               textColor=_TEXT_SECONDARY),
        LineKind.DOCUMENT_HEADER.value: ParagraphStyle(
            "document_header", fontName="Helvetica-Bold", fontSize=12, leading=15,
            textColor=_TEXT, spaceAfter=8, keepWithNext=1),
        LineKind.SECTION_HEADER.value: ParagraphStyle(
            "section_header", fontName="Helvetica-Bold", fontSize=10, leading=12,
            textColor=_TEXT, spaceBefore=10, spaceAfter=2, keepWithNext=1),
        LineKind.LIST_ITEM.value: ParagraphStyle(
            "list_item", fontName="Helvetica", fontSize=10, leading=12,
            textColor=_TEXT_SECONDARY, leftIndent=15, spaceAfter=2),
        LineKind.FIELD_LABEL.value: ParagraphStyle(
            "field_label", fontName="Helvetica", fontSize=10, leading=12,
            textColor=_TEXT, spaceAfter=2),
        LineKind.PLAIN.value: ParagraphStyle(
            "plain", fontName="Helvetica", fontSize=10, leading=12,
            textColor=_TEXT, spaceAfter=2),
        "cell_header": ParagraphStyle("cell_header", fontName="Helvetica-Bold", fontSize=9,
                                      leading=11, textColor=_TEXT),
        "cell": ParagraphStyle("cell", fontName="Helvetica", fontSize=9, leading=11,
                               textColor=_TEXT_SECONDARY),
    }

    def __init__(
        self,
        *,
        document_headers: Iterable[str] = (),
        disclaimer: str = DISCLAIMER,
        clock: Callable[[], datetime] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._document_headers = tuple(document_headers)
        self._disclaimer = disclaimer
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._rng = rng or random.Random()

    def render(
        self,
        service: ServiceDefinition,
        content: DocumentContent,
        brand: GeneratedBrand | None = None,
        sanitized_inputs: SanitizedInputs | None = None,
        logo_bytes: bytes | None = None,
        trace_id: str | None = None,
    ) -> RenderedPdf:
        """Lay out and write the PDF.

        A logo that cannot be decoded is skipped with a warning.

        Raises:
            RenderError: on any other layout or write failure.
        """
        now = self._clock()
        case_reference = generate_case_reference(service.case_prefix, now, self._rng)
        try:
            text = clean_generated_text(content.to_text(), today=now.date())
            extracted_title, body = extract_title(text)
            title = content.title or extracted_title or service.display_name
            if content.title:
                body = text
            metadata = extract_metadata(text, sanitized_inputs)

            story: list[Flowable] = [
                self._header(service, title, case_reference, brand, logo_bytes, trace_id),
                Spacer(1, 8),
            ]
            meta = metadata_lines(metadata)
            for label, value in meta:
                story.append(Paragraph(f"{escape(label)}: {escape(value)}", self.STYLES["meta"]))
            if meta:
                story.append(Spacer(1, 8))
            story.append(HRFlowable(width="100%", thickness=0.5, color=_DIVIDER, spaceAfter=10))
            story.extend(self._body(body))

            footer = _FooterState(
                disclaimer=self._disclaimer,
                generated_label=f"Generated {now:%d/%m/%Y %H:%M:%S}",
            )
            buffer = BytesIO()
            doc = SimpleDocTemplate(
                buffer,
                pagesize=A4,
                leftMargin=20 * mm,
                rightMargin=20 * mm,
                topMargin=20 * mm,
                bottomMargin=25 * mm,
                title=title,
                author=brand.display_text if brand else service.default_organization,
            )
            doc.build(story, canvasmaker=functools.partial(_FooterCanvas, footer=footer))
        except Exception as exc:
            raise RenderError(f"Failed to render {service.slug} document: {exc}") from exc

        pdf = RenderedPdf(
            pdf_bytes=buffer.getvalue(),
            page_count=footer.page_count,
            title=title,
            case_reference=case_reference,
        )
        Log.info(
            f"PDF rendered: {pdf.page_count} pages, {pdf.size_bytes} bytes",
            trace_id=trace_id,
            service=service.slug,
            step=GenerationStep.PDF_RENDERED,
        )
        return pdf

    def _header(
        self,
        service: ServiceDefinition,
        title: str,
        case_reference: str,
        brand: GeneratedBrand | None,
        logo_bytes: bytes | None,
        trace_id: str | None,
    ) -> Table:
        middle: list[Flowable] = []
        if service.document_header:
            middle.append(Paragraph(escape(service.document_header), self.STYLES["kicker"]))
        middle.append(Paragraph(escape(title), self.STYLES["title"]))
        middle.append(Paragraph(f"CASE REF: {escape(case_reference)}", self.STYLES["case_ref"]))

        emblem: Flowable | str = self._emblem(brand) if brand else ""
        logo: Flowable | str = self._logo(logo_bytes, service.slug, trace_id) or ""

        available = A4[0] - 40 * mm
        side = _EMBLEM_SIZE + 6
        table = Table(
            [[emblem, middle, logo]],
            colWidths=[side, available - 2 * side, side],
        )
        table.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                    ("ALIGN", (2, 0), (2, 0), "RIGHT"),
                    ("LEFTPADDING", (0, 0), (0, 0), 0),
                    ("RIGHTPADDING", (2, 0), (2, 0), 0),
                ]
            )
        )
        return table

    @staticmethod
    def _emblem(brand: GeneratedBrand) -> Drawing:
        source = brand.vector_graphic
        factor = _EMBLEM_SIZE / max(source.width, source.height)
        group = Group(*source.contents)
        group.scale(factor, factor)
        emblem = Drawing(source.width * factor, source.height * factor)
        emblem.add(group)
        return emblem

    @staticmethod
    def _logo(logo_bytes: bytes | None, slug: str, trace_id: str | None) -> Image | None:
        if not logo_bytes:
            return None
        try:
            ImageReader(BytesIO(logo_bytes)).getSize()
        except Exception as exc:
            Log.warning(f"Logo for {slug} could not be decoded, skipping: {exc}", trace_id=trace_id)
            return None
        return Image(BytesIO(logo_bytes), width=_LOGO_SIZE, height=_LOGO_SIZE, kind="proportional")

    def _body(self, body: str) -> list[Flowable]:
        flowables: list[Flowable] = []
        for block in build_blocks(body, self._document_headers):
            if isinstance(block, TableBlock):
                flowables.append(self._table(block))
                flowables.append(Spacer(1, 10))
            elif block.kind is LineKind.BLANK:
                flowables.append(Spacer(1, 4))
            else:
                flowables.append(self._paragraph(block))
        return flowables

    def _paragraph(self, line: TextLine) -> Paragraph:
        style = self.STYLES[line.kind.value]
        if line.kind is LineKind.FIELD_LABEL:
            label, _, value = line.text.partition(":")
            markup = f"<b>{escape(label)}:</b> {escape(value.strip())}"
        else:
            markup = escape(line.text)
        return Paragraph(markup, style)

    def _table(self, block: TableBlock) -> Table:
        header_style = self.STYLES["cell_header"]
        cell_style = self.STYLES["cell"]
        data = [
            [Paragraph(escape(cell), header_style if index == 0 else cell_style) for cell in row]
            for index, row in enumerate(block.rows)
        ]
        available = A4[0] - 40 * mm
        width = available / max(block.column_count, 1)
        # repeatRows=1: continuation pages repeat the header and a split never
        # leaves the header alone at the bottom of a page.
        table = Table(data, colWidths=[width] * block.column_count, repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("GRID", (0, 0), (-1, -1), 0.5, _BORDER),
                    ("BACKGROUND", (0, 0), (-1, 0), _TABLE_HEADER),
                    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, _ZEBRA]),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("TOPPADDING", (0, 0), (-1, -1), 3),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
                ]
            )
        )
        return table
