import io
import random
from datetime import datetime, timezone

import pdfplumber
import pytest

from app.branding.brand import BrandGenerator
from app.catalog.models import ServiceCatalog, ServiceDefinition
from app.rendering.content import PlainTextDocument, StructuredDocument
from app.rendering.exceptions import RenderError
from app.rendering.renderer import DISCLAIMER, PdfRenderer, generate_case_reference
from app.sanitization.models import SanitizedInputs
from app.sanitization.sanitizer import Sanitizer

_NOW = datetime(2026, 3, 14, 9, 30, 5, tzinfo=timezone.utc)


def _renderer(catalog: ServiceCatalog) -> PdfRenderer:
    return PdfRenderer(
        document_headers=catalog.document_headers,
        clock=lambda: _NOW,
        rng=random.Random(7),
    )


def _payslip(catalog: ServiceCatalog) -> ServiceDefinition:
    service = catalog.get("payslip")
    assert service is not None
    return service


def _page_texts(pdf_bytes: bytes) -> list[str]:
    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        return [page.extract_text() or "" for page in pdf.pages]


class TestCaseReference:
    def test_format(self) -> None:
        reference = generate_case_reference("PAY", _NOW, random.Random(1))
        prefix, digits, suffix = reference.split("-")
        assert prefix == "26"
        assert len(digits) == 4 and digits.isdigit()
        assert suffix == "PAY"


class TestPdfRenderer:
    def test_multi_page_footer_matches_page_count(
        self, catalog: ServiceCatalog, long_payslip_text: str
    ) -> None:
        rendered = _renderer(catalog).render(
            _payslip(catalog), PlainTextDocument(text=long_payslip_text)
        )
        assert rendered.pdf_bytes.startswith(b"%PDF")
        assert rendered.page_count > 1
        pages = _page_texts(rendered.pdf_bytes)
        assert len(pages) == rendered.page_count
        for number, text in enumerate(pages, start=1):
            assert f"Page {number} of {rendered.page_count}" in text
            assert DISCLAIMER in text
            assert "Generated 14/03/2026 09:30:05" in text

    def test_header_metadata_and_date_injection(
        self, catalog: ServiceCatalog, sanitizer: Sanitizer, long_payslip_text: str
    ) -> None:
        brand = BrandGenerator(sanitizer).generate("payslip", "Acme Ltd")
        rendered = _renderer(catalog).render(
            _payslip(catalog),
            PlainTextDocument(text=long_payslip_text),
            brand=brand,
            sanitized_inputs=SanitizedInputs(values={"fullName": "Jane Doe"}),
        )
        first_page = _page_texts(rendered.pdf_bytes)[0]
        assert rendered.title == "MONTHLY PAYSLIP"
        assert f"CASE REF: {rendered.case_reference}" in first_page
        assert rendered.case_reference.endswith("-PAY")
        assert "STATEMENT OF EARNINGS" in first_page
        assert "Subject: Jane Doe" in first_page
        assert "14 March 2026" in first_page
        assert "Insert Current Date" not in first_page

    def test_table_cells_rendered(self, catalog: ServiceCatalog, long_payslip_text: str) -> None:
        rendered = _renderer(catalog).render(
            _payslip(catalog), PlainTextDocument(text=long_payslip_text)
        )
        text = "\n".join(_page_texts(rendered.pdf_bytes))
        assert "Overtime block 1" in text
        assert "|" not in text

    def test_structured_document(self, catalog: ServiceCatalog) -> None:
        service = catalog.get("nsa-surveillance")
        assert service is not None
        rendered = _renderer(catalog).render(
            service,
            StructuredDocument(
                structured={"threatLevel": "Mild", "observations": ["Ate toast"]},
                narrative="Analyst recommends a nap.",
                title="Surveillance Log",
            ),
        )
        text = _page_texts(rendered.pdf_bytes)[0]
        assert rendered.title == "Surveillance Log"
        assert rendered.page_count == 1
        assert "Threat Level: Mild" in text
        assert "Analyst recommends a nap." in text
        assert "Page 1 of 1" in text

    def test_valid_logo_is_embedded(
        self, catalog: ServiceCatalog, png_logo_bytes: bytes
    ) -> None:
        rendered = _renderer(catalog).render(
            _payslip(catalog),
            PlainTextDocument(text="A short payslip body."),
            logo_bytes=png_logo_bytes,
        )
        with pdfplumber.open(io.BytesIO(rendered.pdf_bytes)) as pdf:
            assert len(pdf.pages[0].images) == 1

    def test_undecodable_logo_is_skipped(self, catalog: ServiceCatalog) -> None:
        rendered = _renderer(catalog).render(
            _payslip(catalog),
            PlainTextDocument(text="A short payslip body."),
            logo_bytes=b"definitely not an image",
        )
        with pdfplumber.open(io.BytesIO(rendered.pdf_bytes)) as pdf:
            assert pdf.pages[0].images == []

    def test_layout_failure_raises_render_error(
        self, catalog: ServiceCatalog, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def explode(*_args: object, **_kwargs: object) -> None:
            raise ValueError("layout exploded")

        monkeypatch.setattr("app.rendering.renderer.SimpleDocTemplate.build", explode)
        with pytest.raises(RenderError, match="Failed to render payslip document: layout exploded"):
            _renderer(catalog).render(_payslip(catalog), PlainTextDocument(text="body"))
