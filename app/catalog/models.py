from dataclasses import dataclass, field
from enum import Enum


class InputType(str, Enum):
    TEXT = "text"
    DATE = "date"
    EMAIL = "email"
    NUMBER = "number"


class FieldRole(str, Enum):
    """Semantic role of a field; drives sanitization."""

    ORGANIZATION = "organization"
    PERSON = "person"


class OutputMode(str, Enum):
    """Which validator judges the generated content."""

    TEXT = "text"
    JSON = "json"


@dataclass(frozen=True)
class FieldSpec:
    """A single form field of a service."""

    name: str
    label: str
    input_type: InputType = InputType.TEXT
    required: bool = False
    placeholder: str | None = None
    role: FieldRole | None = None
    min: float | None = None
    max: float | None = None


@dataclass(frozen=True)
class ServiceDefinition:
    """Static description of one document-generation offering."""

    slug: str
    display_name: str
    price_minor_units: int
    prompt_template_ref: str
    document_type: str = "pdf"
    fields: tuple[FieldSpec, ...] = ()
    temperature: float = 0.5
    output_mode: OutputMode = OutputMode.TEXT
    required_keys: tuple[str, ...] = ()
    case_prefix: str = "DOC"
    document_header: str = ""
    default_organization: str = "Official Services"
    logo_url: str | None = None

    def field_by_name(self, name: str) -> FieldSpec | None:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    @property
    def organization_field(self) -> FieldSpec | None:
        for spec in self.fields:
            if spec.role is FieldRole.ORGANIZATION:
                return spec
        return None


@dataclass(frozen=True)
class ServiceCatalog:
    """All configured services keyed by slug; immutable after load."""

    services: dict[str, ServiceDefinition] = field(default_factory=dict)

    def get(self, slug: str) -> ServiceDefinition | None:
        return self.services.get(slug)

    def __contains__(self, slug: object) -> bool:
        return slug in self.services

    def __len__(self) -> int:
        return len(self.services)

    @property
    def document_headers(self) -> tuple[str, ...]:
        return tuple(s.document_header for s in self.services.values() if s.document_header)
