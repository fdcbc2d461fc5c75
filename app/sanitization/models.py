from dataclasses import dataclass, field


@dataclass(frozen=True)
class SanitizeResult:
    """Outcome of sanitizing a single field value."""

    value: str
    was_sanitized: bool = False
    reason: str | None = None


@dataclass(frozen=True)
class SanitizedInputs:
    """Generation inputs after the sanitization pass."""

    values: dict[str, str] = field(default_factory=dict)
    org_sanitized: bool = False
    sanitized_reason: str | None = None
    sanitized_fields: frozenset[str] = frozenset()

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.values.get(name, default)

    def was_sanitized(self, name: str) -> bool:
        return name in self.sanitized_fields
