from unittest.mock import MagicMock

import pytest

from app.catalog.models import FieldRole
from app.sanitization.blocklists import (
    DEFAULT_BLOCKED_ORGANIZATIONS,
    DEFAULT_BLOCKED_PUBLIC_FIGURES,
    ORGANIZATION_PLACEHOLDER,
    PERSON_PLACEHOLDER,
    Blocklists,
)
from app.sanitization.factory import SanitizerFactory
from app.sanitization.sanitizer import Sanitizer


class TestSanitizeOrganizations:
    def test_neutral_value_passes_through(self, sanitizer: Sanitizer) -> None:
        result = sanitizer.sanitize("Acme Ltd", FieldRole.ORGANIZATION)
        assert result.value == "Acme Ltd"
        assert result.was_sanitized is False
        assert result.reason is None

    def test_blocked_organization_replaced(self, sanitizer: Sanitizer) -> None:
        result = sanitizer.sanitize("Federal Bureau of Investigation", FieldRole.ORGANIZATION)
        assert result.was_sanitized is True
        assert result.value == ORGANIZATION_PLACEHOLDER
        assert result.reason is not None
        assert "Federal Bureau" in result.reason

    @pytest.mark.parametrize("term", DEFAULT_BLOCKED_ORGANIZATIONS)
    def test_every_blocked_term_is_caught(self, sanitizer: Sanitizer, term: str) -> None:
        for candidate in (f"Acme {term}", f"Acme {term.lower()}", f"Acme {term.upper()}"):
            assert sanitizer.sanitize(candidate).was_sanitized is True, candidate

    def test_first_match_reported(self, sanitizer: Sanitizer) -> None:
        result = sanitizer.sanitize("FBI and CIA joint office")
        assert result.reason is not None
        assert '"FBI"' in result.reason
        assert "CIA" not in result.reason.split("term")[-1]

    def test_person_role_ignores_organization_list(self, sanitizer: Sanitizer) -> None:
        result = sanitizer.sanitize("Kirsty Smith", FieldRole.PERSON)
        assert result.was_sanitized is False


class TestSanitizePublicFigures:
    @pytest.mark.parametrize("name", DEFAULT_BLOCKED_PUBLIC_FIGURES)
    def test_public_figure_replaced(self, sanitizer: Sanitizer, name: str) -> None:
        result = sanitizer.sanitize(name.lower(), FieldRole.PERSON)
        assert result.was_sanitized is True
        assert result.value == PERSON_PLACEHOLDER

    def test_organization_role_ignores_public_figures(self, sanitizer: Sanitizer) -> None:
        result = sanitizer.sanitize("Bill Gates Plumbing", FieldRole.ORGANIZATION)
        assert result.was_sanitized is False


class TestSanitizeIdempotence:
    @pytest.mark.parametrize(
        "value",
        ["FBI", "Elon Musk", "Acme Ltd", "", "National Security Agency", "Jane Doe"],
    )
    def test_resanitizing_is_a_no_op(self, sanitizer: Sanitizer, value: str) -> None:
        once = sanitizer.sanitize(value)
        twice = sanitizer.sanitize(once.value)
        assert twice.value == once.value
        assert twice.was_sanitized is False

    def test_placeholders_are_not_blocked(self, sanitizer: Sanitizer) -> None:
        assert sanitizer.is_blocked_organization(ORGANIZATION_PLACEHOLDER) is False
        assert sanitizer.sanitize(PERSON_PLACEHOLDER).was_sanitized is False


class TestBlocklists:
    def test_extended_appends_terms(self) -> None:
        lists = Blocklists().extended(organizations=["Interpol"], public_figures=["Jane Famous"])
        assert lists.organizations[-1] == "Interpol"
        assert lists.public_figures[-1] == "Jane Famous"
        assert lists.organizations[: len(DEFAULT_BLOCKED_ORGANIZATIONS)] == DEFAULT_BLOCKED_ORGANIZATIONS

    def test_is_blocked_organization(self, sanitizer: Sanitizer) -> None:
        assert sanitizer.is_blocked_organization("hm revenue and customs") is True
        assert sanitizer.is_blocked_organization("Acme Ltd") is False


class TestSanitizerFactory:
    def test_includes_configured_extras(self) -> None:
        settings = MagicMock(
            extra_blocked_organizations=["Interpol"],
            extra_blocked_public_figures=[],
        )
        sanitizer = SanitizerFactory.create(settings)
        assert sanitizer.sanitize("Interpol Lyon").was_sanitized is True
        assert sanitizer.sanitize("FBI").was_sanitized is True
