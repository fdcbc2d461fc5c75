import pytest
from reportlab.graphics.shapes import Drawing

from app.branding.brand import BrandGenerator
from app.branding.models import OrganizationType
from app.sanitization.sanitizer import Sanitizer


@pytest.fixture()
def generator(sanitizer: Sanitizer) -> BrandGenerator:
    return BrandGenerator(
        sanitizer,
        default_names={"fbi-file": "Federal Records Bureau", "payslip": "Corporate Services Ltd"},
    )


class TestBrandGenerator:
    def test_blocked_organization_uses_generic_government_name(
        self, generator: BrandGenerator
    ) -> None:
        brand = generator.generate("payslip", "Federal Bureau of Investigation")
        assert brand.organization_type is OrganizationType.GOVERNMENT
        assert brand.display_text == "Department of Records"
        assert "Federal" not in brand.display_text
        assert brand.is_seal is True

    def test_upstream_sanitized_flag_forces_generic_name(self, generator: BrandGenerator) -> None:
        brand = generator.generate("payslip", "Department X", sanitized=True)
        assert brand.display_text == "Department of Records"

    def test_neutral_company_keeps_title_cased_name(self, generator: BrandGenerator) -> None:
        brand = generator.generate("payslip", "acme widgets ltd")
        assert brand.organization_type is OrganizationType.COMPANY
        assert brand.display_text == "Acme Widgets Ltd"
        assert brand.initials == "AW"
        assert brand.is_seal is False
        assert brand.vector_graphic.width == 200

    def test_missing_name_uses_service_default_for_type(self, generator: BrandGenerator) -> None:
        brand = generator.generate("fbi-file")
        assert brand.organization_type is OrganizationType.GOVERNMENT
        assert brand.display_text == "Department of Records"

    def test_unknown_service_falls_back(self, generator: BrandGenerator) -> None:
        brand = generator.generate("unknown")
        assert brand.organization_type is OrganizationType.COMPANY
        assert brand.display_text == "National Corporation"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Leeds University", OrganizationType.EDUCATIONAL),
            ("Northern Bank", OrganizationType.FINANCIAL),
            ("City Hospital", OrganizationType.MEDICAL),
            ("Royal Navy Stores", OrganizationType.MILITARY),
            ("Ministry of Silly Walks", OrganizationType.GOVERNMENT),
            ("Acme", OrganizationType.COMPANY),
        ],
    )
    def test_detect_type(self, name: str, expected: OrganizationType) -> None:
        assert BrandGenerator.detect_type(name) is expected

    def test_output_is_deterministic(self, generator: BrandGenerator) -> None:
        first = generator.generate("payslip", "City Hospital")
        second = generator.generate("payslip", "City Hospital")
        assert first == second
        assert first.color_scheme == BrandGenerator.COLOR_SCHEMES[OrganizationType.MEDICAL]

    def test_seal_is_square_drawing(self, generator: BrandGenerator) -> None:
        brand = generator.generate("payslip", "City Hospital")
        assert isinstance(brand.vector_graphic, Drawing)
        assert (brand.vector_graphic.width, brand.vector_graphic.height) == (120, 120)

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("Department of Records", "DO"), ("Acme", "AC"), ("", "XX")],
    )
    def test_initials(self, name: str, expected: str) -> None:
        assert BrandGenerator.initials(name) == expected
