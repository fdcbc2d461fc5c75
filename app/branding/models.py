from dataclasses import dataclass, field
from enum import Enum

from reportlab.graphics.shapes import Drawing


class OrganizationType(str, Enum):
    GOVERNMENT = "government"
    COMPANY = "company"
    EDUCATIONAL = "educational"
    FINANCIAL = "financial"
    MEDICAL = "medical"
    MILITARY = "military"


@dataclass(frozen=True)
class ColorScheme:
    """Hex colors used by the emblem and document accents."""

    primary: str
    secondary: str
    accent: str


@dataclass(frozen=True)
class GeneratedBrand:
    """Derived branding for one generated document."""

    display_text: str
    color_scheme: ColorScheme
    organization_type: OrganizationType
    initials: str
    vector_graphic: Drawing = field(compare=False, repr=False)

    @property
    def is_seal(self) -> bool:
        return self.organization_type in SEAL_TYPES


SEAL_TYPES = frozenset(
    {OrganizationType.GOVERNMENT, OrganizationType.MEDICAL, OrganizationType.MILITARY}
)
