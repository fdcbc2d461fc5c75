"""Deterministic organization branding: palette, display name and emblem."""

import math
from collections.abc import Mapping
from typing import ClassVar

from reportlab.graphics.shapes import Circle, Drawing, Group, Rect, String
from reportlab.lib.colors import Color, HexColor
from reportlab.pdfbase.pdfmetrics import stringWidth

from app.branding.models import SEAL_TYPES, ColorScheme, GeneratedBrand, OrganizationType
from app.sanitization.base import BaseSanitizer

_FONT = "Helvetica"
_FONT_BOLD = "Helvetica-Bold"


class BrandGenerator:
    """Builds a seal or logo for a service and optional organization name."""

    COLOR_SCHEMES: ClassVar[dict[OrganizationType, ColorScheme]] = {
        OrganizationType.GOVERNMENT: ColorScheme("#1e3a8a", "#dc2626", "#fbbf24"),
        OrganizationType.COMPANY: ColorScheme("#0f172a", "#3b82f6", "#10b981"),
        OrganizationType.EDUCATIONAL: ColorScheme("#7c3aed", "#1d4ed8", "#f59e0b"),
        OrganizationType.FINANCIAL: ColorScheme("#059669", "#0f172a", "#dc2626"),
        OrganizationType.MEDICAL: ColorScheme("#dc2626", "#1e40af", "#f59e0b"),
        OrganizationType.MILITARY: ColorScheme("#374151", "#dc2626", "#d97706"),
    }

    GENERIC_NAMES: ClassVar[dict[OrganizationType, str]] = {
        OrganizationType.GOVERNMENT: "Department of Records",
        OrganizationType.COMPANY: "National Corporation",
        OrganizationType.EDUCATIONAL: "National University",
        OrganizationType.FINANCIAL: "Financial Institution",
        OrganizationType.MEDICAL: "Healthcare Services",
        OrganizationType.MILITARY: "Defense Department",
    }

    TYPE_KEYWORDS: ClassVar[tuple[tuple[OrganizationType, tuple[str, ...]], ...]] = (
        (OrganizationType.GOVERNMENT, ("gov", "ministry", "department", "bureau")),
        (OrganizationType.EDUCATIONAL, ("university", "college", "school", "academy")),
        (OrganizationType.FINANCIAL, ("bank", "credit", "financial")),
        (OrganizationType.MEDICAL, ("hospital", "medical", "health", "clinic")),
        (OrganizationType.MILITARY, ("military", "defense", "army", "navy")),
    )

    FALLBACK_NAME: ClassVar[str] = "Official Services"

    def __init__(
        self,
        sanitizer: BaseSanitizer,
        default_names: Mapping[str, str] | None = None,
    ) -> None:
        self._sanitizer = sanitizer
        self._default_names = dict(default_names or {})

    def generate(
        self,
        service_slug: str,
        organization_name: str | None = None,
        sanitized: bool = False,
    ) -> GeneratedBrand:
        """Derive branding; identical inputs always give identical output.

        The generic per-type name replaces the organization name when none was
        supplied, when upstream sanitization flagged it, or when it still
        contains a blocked organization term.
        """
        name = (organization_name or "").strip()
        source = name or self._default_names.get(service_slug, self.FALLBACK_NAME)
        org_type = self.detect_type(source)
        use_generic = not name or sanitized or self._sanitizer.is_blocked_organization(name)
        display_text = self.GENERIC_NAMES[org_type] if use_generic else self._title_case(name)
        colors = self.COLOR_SCHEMES[org_type]
        initials = self.initials(display_text)

        if org_type in SEAL_TYPES:
            drawing = self._circular_seal(display_text, initials, colors)
        else:
            drawing = self._rectangular_logo(display_text, initials, colors)

        return GeneratedBrand(
            display_text=display_text,
            color_scheme=colors,
            organization_type=org_type,
            initials=initials,
            vector_graphic=drawing,
        )

    @classmethod
    def detect_type(cls, name: str) -> OrganizationType:
        lowered = name.lower()
        for org_type, keywords in cls.TYPE_KEYWORDS:
            if any(keyword in lowered for keyword in keywords):
                return org_type
        return OrganizationType.COMPANY

    @staticmethod
    def initials(name: str) -> str:
        words = name.split()
        if len(words) >= 2:
            return (words[0][0] + words[1][0]).upper()
        if len(words) == 1:
            return words[0][:2].upper()
        return "XX"

    @staticmethod
    def _title_case(name: str) -> str:
        return " ".join(word[:1].upper() + word[1:].lower() for word in name.split())

    def _circular_seal(self, text: str, initials: str, colors: ColorScheme) -> Drawing:
        primary = HexColor(colors.primary)
        secondary = HexColor(colors.secondary)
        accent = HexColor(colors.accent)

        drawing = Drawing(120, 120)
        drawing.add(Circle(60, 60, 55, fillColor=None, strokeColor=primary, strokeWidth=3))
        drawing.add(Circle(60, 60, 48, fillColor=primary, fillOpacity=0.05, strokeColor=None))
        drawing.add(Circle(60, 60, 35, fillColor=None, strokeColor=secondary, strokeWidth=2))
        drawing.add(Circle(60, 60, 25, fillColor=accent, fillOpacity=0.1, strokeColor=None))
        drawing.add(
            String(60, 54, initials, fontName=_FONT_BOLD, fontSize=16,
                   fillColor=primary, textAnchor="middle")
        )
        drawing.add(self._arc_text(text.upper(), secondary))
        for x, y in ((40, 75), (80, 75), (40, 45), (80, 45)):
            drawing.add(Circle(x, y, 1, fillColor=accent, fillOpacity=0.8, strokeColor=None))
        return drawing

    @staticmethod
    def _arc_text(text: str, color: Color) -> Group:
        """Lay characters along the upper arc of the seal ring."""
        group = Group()
        if not text:
            return group
        radius = 41
        span = min(170.0, 9.0 * len(text))
        step = span / max(len(text) - 1, 1)
        start = 90 + span / 2
        for index, char in enumerate(text):
            angle = start - step * index
            theta = math.radians(angle)
            glyph = Group(
                String(0, 0, char, fontName=_FONT_BOLD, fontSize=8,
                       fillColor=color, textAnchor="middle")
            )
            glyph.translate(60 + radius * math.cos(theta), 60 + radius * math.sin(theta))
            glyph.rotate(angle - 90)
            group.add(glyph)
        return group

    def _rectangular_logo(self, text: str, initials: str, colors: ColorScheme) -> Drawing:
        primary = HexColor(colors.primary)
        secondary = HexColor(colors.secondary)
        accent = HexColor(colors.accent)

        drawing = Drawing(200, 80)
        drawing.add(Rect(2, 2, 196, 76, rx=8, ry=8, fillColor=None,
                         strokeColor=primary, strokeWidth=2))
        drawing.add(Rect(4, 4, 192, 72, rx=6, ry=6, fillColor=primary,
                         fillOpacity=0.05, strokeColor=None))
        drawing.add(Circle(25, 40, 15, fillColor=primary, fillOpacity=0.1, strokeColor=None))
        drawing.add(Circle(25, 40, 12, fillColor=None, strokeColor=secondary, strokeWidth=2))
        drawing.add(
            String(25, 36, initials, fontName=_FONT_BOLD, fontSize=12,
                   fillColor=primary, textAnchor="middle")
        )
        font_size = 16.0
        width = stringWidth(text, _FONT_BOLD, font_size)
        if width > 110:
            font_size = max(7.0, font_size * 110 / width)
        drawing.add(String(55, 45, text, fontName=_FONT_BOLD, fontSize=font_size, fillColor=primary))
        drawing.add(
            String(55, 30, "Official Documentation", fontName=_FONT, fontSize=11,
                   fillColor=secondary)
        )
        for x, y, height, opacity in ((170, 15, 50, 0.6), (175, 30, 20, 0.4), (180, 25, 30, 0.4)):
            drawing.add(Rect(x, y, 2, height, fillColor=accent, fillOpacity=opacity, strokeColor=None))
        return drawing
