from dataclasses import dataclass

DEFAULT_BLOCKED_ORGANIZATIONS: tuple[str, ...] = (
    "FBI",
    "CIA",
    "NSA",
    "MI5",
    "MI6",
    "GCHQ",
    "ASIS",
    "CSIS",
    "HMRC",
    "IRS",
    "NASA",
    "NHS",
    "DOD",
    "Government",
    "HM Government",
    "HM Revenue",
    "Internal Revenue",
    "Central Intelligence",
    "Federal Bureau",
    "National Security",
    "Department of Defense",
    "Ministry of Defence",
    "Treasury",
    "HM Treasury",
    "Revenue and Customs",
    "Tax Office",
)

DEFAULT_BLOCKED_PUBLIC_FIGURES: tuple[str, ...] = (
    "Elon Musk",
    "Jeff Bezos",
    "Bill Gates",
    "Barack Obama",
    "Donald Trump",
    "Joe Biden",
    "Boris Johnson",
    "Rishi Sunak",
)

ORGANIZATION_PLACEHOLDER = "Department X"
PERSON_PLACEHOLDER = "John Smith"


@dataclass(frozen=True)
class Blocklists:
    """Read-only blocklist configuration passed to the sanitizer."""

    organizations: tuple[str, ...] = DEFAULT_BLOCKED_ORGANIZATIONS
    public_figures: tuple[str, ...] = DEFAULT_BLOCKED_PUBLIC_FIGURES
    organization_placeholder: str = ORGANIZATION_PLACEHOLDER
    person_placeholder: str = PERSON_PLACEHOLDER

    def extended(
        self,
        organizations: list[str] | None = None,
        public_figures: list[str] | None = None,
    ) -> "Blocklists":
        """Return a copy with extra terms appended after the defaults."""
        return Blocklists(
            organizations=self.organizations + tuple(organizations or ()),
            public_figures=self.public_figures + tuple(public_figures or ()),
            organization_placeholder=self.organization_placeholder,
            person_placeholder=self.person_placeholder,
        )
