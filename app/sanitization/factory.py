from app.config.settings import Settings
from app.sanitization.base import BaseSanitizer
from app.sanitization.blocklists import Blocklists
from app.sanitization.sanitizer import Sanitizer


class SanitizerFactory:
    """Creates the configured sanitizer."""

    @classmethod
    def create(cls, settings: Settings) -> BaseSanitizer:
        """Create a sanitizer with the default blocklists plus any configured extras."""
        blocklists = Blocklists().extended(
            organizations=settings.extra_blocked_organizations,
            public_figures=settings.extra_blocked_public_figures,
        )
        return Sanitizer(blocklists)
