"""Blocklist-based sanitizer for organization and person names.

Matching is case-insensitive substring containment. Only the first matching
term is reported; the organization list is consulted before the public-figure
list.
"""

from app.catalog.models import FieldRole
from app.sanitization.base import BaseSanitizer
from app.sanitization.blocklists import Blocklists
from app.sanitization.models import SanitizeResult


class Sanitizer(BaseSanitizer):
    """Pure sanitizer over injected, read-only blocklists."""

    def __init__(self, blocklists: Blocklists | None = None) -> None:
        self._blocklists = blocklists or Blocklists()
        self._organizations = [(t, t.casefold()) for t in self._blocklists.organizations]
        self._figures = [(t, t.casefold()) for t in self._blocklists.public_figures]

    @property
    def blocklists(self) -> Blocklists:
        return self._blocklists

    def sanitize(self, value: str, role: FieldRole | None = None) -> SanitizeResult:
        if role is not FieldRole.PERSON:
            term = self._first_match(value, self._organizations)
            if term is not None:
                return SanitizeResult(
                    value=self._blocklists.organization_placeholder,
                    was_sanitized=True,
                    reason=f'Organization name "{value}" contains blocked term "{term}"',
                )
        if role is not FieldRole.ORGANIZATION:
            term = self._first_match(value, self._figures)
            if term is not None:
                return SanitizeResult(
                    value=self._blocklists.person_placeholder,
                    was_sanitized=True,
                    reason=f'Name "{value}" matches blocked public figure "{term}"',
                )
        return SanitizeResult(value=value)

    def is_blocked_organization(self, name: str) -> bool:
        return self._first_match(name, self._organizations) is not None

    @staticmethod
    def _first_match(value: str, terms: list[tuple[str, str]]) -> str | None:
        folded = value.casefold()
        for original, needle in terms:
            if needle in folded:
                return original
        return None
