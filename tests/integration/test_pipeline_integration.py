import asyncio
import io
from unittest.mock import MagicMock

import pdfplumber
import pytest

from app.processor.container import Container
from app.processor.events import PaymentConfirmedEvent
from app.storage.models import GenerationState, GenerationStatus

_SHORT = "Payslip unavailable."
_NSA_JSON = (
    "```json\n"
    '{"title": "Surveillance Log", '
    '"structured": {"Subject": "Jane Doe", "Most Used App": "TikTok", '
    '"Observations": ["Opened the fridge 14 times", "Watched cat videos"],}, '
    '"narrative": "Subject remains a dedicated snacker.",}\n'
    "```"
)


async def _run(container: Container, event: PaymentConfirmedEvent, timeout: float = 30.0) -> GenerationStatus:
    receipt = container.event_handler.handle(event)
    assert receipt.accepted is True
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        status = container.status_store.get(event.session_id)
        if status is not None and status.state.is_terminal:
            return status
        await asyncio.sleep(0.01)
    raise AssertionError(f"Pipeline for {event.session_id} did not finish")


def _pdf_pages(pdf_bytes: bytes) -> list[str]:
    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        return [page.extract_text() or "" for page in pdf.pages]


def _payslip_event(session_id: str, company: str = "Acme Ltd") -> PaymentConfirmedEvent:
    return PaymentConfirmedEvent(
        session_id=session_id,
        slug="payslip",
        inputs={"fullName": "Jane Doe", "companyName": company, "salary": "28000"},
        customer_email="jane@example.com",
    )


class TestPayslipPipeline:
    @pytest.mark.asyncio
    async def test_long_payslip_renders_multiple_pages(
        self, pipeline_factory: tuple, long_payslip_text: str
    ) -> None:
        factory, clients = pipeline_factory
        container = factory([long_payslip_text])

        status = await _run(container, _payslip_event("cs_int_1"))

        assert status.state is GenerationState.READY
        assert status.document_id is not None
        assert status.download_url is not None
        assert status.download_url.startswith(f"https://docs.example/documents/{status.document_id}?expires=")
        assert clients[0].create_completion.await_count == 1

        document = container.document_store.get(status.document_id)
        assert document.metadata.user_id == "jane@example.com"
        pages = _pdf_pages(document.pdf_bytes)
        assert len(pages) > 1
        for number, text in enumerate(pages, start=1):
            assert f"Page {number} of {len(pages)}" in text
        full_text = "\n".join(pages)
        assert "[Insert" not in full_text
        assert "MONTHLY PAYSLIP" in full_text

    @pytest.mark.asyncio
    async def test_blocked_company_never_reaches_provider_or_pdf(
        self, pipeline_factory: tuple, long_payslip_text: str
    ) -> None:
        factory, clients = pipeline_factory
        container = factory([long_payslip_text])

        status = await _run(container, _payslip_event("cs_int_2", company="MI5 Canteen Services"))

        assert status.state is GenerationState.READY
        prompt = clients[0].create_completion.await_args.kwargs["user_prompt"]
        assert "MI5" not in prompt
        assert "Department X" in prompt
        pdf_text = "\n".join(_pdf_pages(container.document_store.get(status.document_id).pdf_bytes))
        assert "MI5" not in pdf_text

    @pytest.mark.asyncio
    async def test_retry_recovers_from_short_response(
        self, pipeline_factory: tuple, long_payslip_text: str
    ) -> None:
        factory, clients = pipeline_factory
        container = factory([_SHORT, long_payslip_text])

        status = await _run(container, _payslip_event("cs_int_3"))

        assert status.state is GenerationState.READY
        client: MagicMock = clients[0]
        assert client.create_completion.await_count == 2
        first, second = client.create_completion.await_args_list
        assert second.kwargs["temperature"] < first.kwargs["temperature"]

    @pytest.mark.asyncio
    async def test_exhausted_retries_end_in_error(self, pipeline_factory: tuple) -> None:
        factory, clients = pipeline_factory
        container = factory([_SHORT, _SHORT, _SHORT])

        status = await _run(container, _payslip_event("cs_int_4"))

        assert status.state is GenerationState.ERROR
        assert status.error is not None
        assert f"Reference: {status.trace_id}" in status.error
        assert "You will not be charged again" in status.error
        assert clients[0].create_completion.await_count == 3
        assert len(container.document_store) == 0

    @pytest.mark.asyncio
    async def test_late_duplicate_does_not_regenerate(
        self, pipeline_factory: tuple, long_payslip_text: str
    ) -> None:
        factory, clients = pipeline_factory
        container = factory([long_payslip_text])
        event = _payslip_event("cs_int_5")

        await _run(container, event)
        receipt = container.event_handler.handle(event)

        assert receipt.duplicate is True
        assert clients[0].create_completion.await_count == 1
        assert container.status_store.get("cs_int_5").state is GenerationState.READY  # type: ignore[union-attr]


class TestStructuredPipeline:
    @pytest.mark.asyncio
    async def test_fenced_json_is_repaired_and_rendered(self, pipeline_factory: tuple) -> None:
        factory, clients = pipeline_factory
        container = factory([_NSA_JSON])

        status = await _run(
            container,
            PaymentConfirmedEvent(
                session_id="cs_int_6",
                slug="nsa-surveillance",
                inputs={"fullName": "Jane Doe", "city": "Manchester", "favouriteApp": "TikTok"},
            ),
        )

        assert status.state is GenerationState.READY
        assert clients[0].create_completion.await_args.kwargs["json_mode"] is True
        pdf_text = "\n".join(_pdf_pages(container.document_store.get(status.document_id).pdf_bytes))
        assert "Surveillance Log" in pdf_text
        assert "Opened the fridge 14 times" in pdf_text
        assert "dedicated snacker" in pdf_text
