import io
from datetime import datetime, timezone

import pytest
from PIL import Image

from app.catalog.loader import load_catalog
from app.catalog.models import ServiceCatalog
from app.sanitization.sanitizer import Sanitizer
from tests.fakes import FakeClock


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc))


@pytest.fixture()
def catalog() -> ServiceCatalog:
    return load_catalog()


@pytest.fixture()
def sanitizer() -> Sanitizer:
    return Sanitizer()


@pytest.fixture()
def png_logo_bytes() -> bytes:
    """Generate a small valid PNG image."""
    buf = io.BytesIO()
    Image.new("RGB", (16, 16), (30, 58, 138)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def long_payslip_text() -> str:
    """Plain-text payslip long enough to overflow a single A4 page."""
    lines = [
        "MONTHLY PAYSLIP",
        "",
        "EMPLOYEE DETAILS:",
        "Employee: Jane Doe",
        "Employer: Acme Ltd",
        "Pay Date: [Insert Current Date]",
        "",
        "PAYMENTS:",
        "Description | Hours | Rate | Amount",
        "--- | --- | --- | ---",
    ]
    lines.extend(f"Overtime block {i} | 2 | 15.00 | 30.00" for i in range(1, 41))
    lines.extend(["", "NOTES FROM PAYROLL:"])
    lines.extend(
        f"- Note {i}: the office biscuit levy has been reviewed and remains "
        "firmly in place for the foreseeable future."
        for i in range(1, 61)
    )
    return "\n".join(lines)
