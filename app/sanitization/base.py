from abc import ABC, abstractmethod

from app.catalog.models import FieldRole
from app.sanitization.models import SanitizeResult


class BaseSanitizer(ABC):
    """Contract for all sanitizer implementations."""

    @abstractmethod
    def sanitize(self, value: str, role: FieldRole | None = None) -> SanitizeResult:
        """Replace a blocked field value with a neutral placeholder.

        Args:
            value: Raw user-supplied field value.
            role: Semantic role of the field. Organization fields are checked
                  against the organization list, person fields against the
                  public-figure list, and unlabelled values against both.

        Returns:
            SanitizeResult with the (possibly replaced) value and the reason.
        """

    @abstractmethod
    def is_blocked_organization(self, name: str) -> bool:
        """Return True if the name contains any blocked organization term."""
