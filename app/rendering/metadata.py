"""Builds the metadata block shown between the title and the body."""

import re

from app.sanitization.models import SanitizedInputs

METADATA_FIELDS: tuple[tuple[str, str], ...] = (
    ("name", "Subject"),
    ("dob", "Date of Birth"),
    ("city", "Location"),
    ("companyName", "Organization"),
    ("jobTitle", "Position"),
    ("salary", "Salary"),
    ("propertyAddress", "Property"),
    ("universityName", "Institution"),
    ("degreeType", "Degree"),
)

_INPUT_ALIASES = {
    "fullName": "name",
    "dateOfBirth": "dob",
}

_TEXT_PATTERNS = {
    "name": re.compile(
        r"^(?:Subject|Name|Full Name|Applicant|Employee|Tenant|Student|Graduate|Claimant)"
        r"\s*:\s*(.+)$",
        re.IGNORECASE | re.MULTILINE,
    ),
    "dob": re.compile(r"^(?:Date of Birth|DOB)\s*:\s*(.+)$", re.IGNORECASE | re.MULTILINE),
    "city": re.compile(r"^(?:City|Home City|Location)\s*:\s*(.+)$", re.IGNORECASE | re.MULTILINE),
    "companyName": re.compile(
        r"^(?:Company|Employer|Organi[sz]ation)\s*:\s*(.+)$", re.IGNORECASE | re.MULTILINE
    ),
}

_MAX_VALUE_LENGTH = 80


def extract_metadata(text: str, sanitized_inputs: SanitizedInputs | None = None) -> dict[str, str]:
    """Collect metadata values from the text; sanitized inputs take precedence."""
    found: dict[str, str] = {}
    for key, pattern in _TEXT_PATTERNS.items():
        match = pattern.search(text)
        if match:
            value = match.group(1).strip()
            if value:
                found[key] = value[:_MAX_VALUE_LENGTH]

    if sanitized_inputs is not None:
        for name, value in sanitized_inputs.values.items():
            if not value:
                continue
            key = _INPUT_ALIASES.get(name, name)
            found[key] = value[:_MAX_VALUE_LENGTH]
    return found


def metadata_lines(metadata: dict[str, str]) -> list[tuple[str, str]]:
    """Return (label, value) pairs in display order for known fields only."""
    return [(label, metadata[key]) for key, label in METADATA_FIELDS if metadata.get(key)]
