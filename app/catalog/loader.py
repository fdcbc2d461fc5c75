"""Loads the static service catalog and checks submitted inputs against it."""

import json
from pathlib import Path
from typing import Any

from app.catalog.exceptions import ConfigError, InputValidationError
from app.catalog.models import (
    FieldRole,
    FieldSpec,
    InputType,
    OutputMode,
    ServiceCatalog,
    ServiceDefinition,
)

_DEFAULT_SERVICES_PATH = Path(__file__).parent / "services.json"


def load_catalog(path: Path | None = None) -> ServiceCatalog:
    """Load every service definition from a JSON file.

    Args:
        path: Path to the services file. Defaults to the bundled services.json.

    Returns:
        ServiceCatalog keyed by slug.

    Raises:
        ConfigError: if the file cannot be read or an entry is malformed.
    """
    if path is None:
        path = _DEFAULT_SERVICES_PATH
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Failed to load services file: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Services file is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Services file must contain an object keyed by slug")

    services = {slug: _build_service(slug, entry) for slug, entry in raw.items()}
    return ServiceCatalog(services=services)


def _build_service(slug: str, raw: Any) -> ServiceDefinition:
    if not isinstance(raw, dict):
        raise ConfigError(f"Service '{slug}' must be an object")
    for key in ("name", "price", "prompt_file"):
        if key not in raw:
            raise ConfigError(f"Service '{slug}' is missing '{key}'")
    try:
        return ServiceDefinition(
            slug=slug,
            display_name=raw["name"],
            price_minor_units=int(raw["price"]),
            prompt_template_ref=raw["prompt_file"],
            document_type=raw.get("type", "pdf"),
            fields=tuple(_build_field(slug, f) for f in raw.get("fields", [])),
            temperature=float(raw.get("temperature", 0.5)),
            output_mode=OutputMode(raw.get("output_mode", "text")),
            required_keys=tuple(raw.get("required_keys", [])),
            case_prefix=raw.get("case_prefix", "DOC"),
            document_header=raw.get("document_header", ""),
            default_organization=raw.get("default_organization", "Official Services"),
            logo_url=raw.get("logo_url"),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Service '{slug}' is malformed: {exc}") from exc


def _build_field(slug: str, raw: Any) -> FieldSpec:
    if not isinstance(raw, dict) or "name" not in raw:
        raise ConfigError(f"Service '{slug}' has a field without a name")
    role = raw.get("role")
    return FieldSpec(
        name=raw["name"],
        label=raw.get("label", raw["name"]),
        input_type=InputType(raw.get("type", "text")),
        required=bool(raw.get("required", False)),
        placeholder=raw.get("placeholder"),
        role=FieldRole(role) if role else None,
        min=raw.get("min"),
        max=raw.get("max"),
    )


def missing_required_fields(service: ServiceDefinition, inputs: dict[str, Any]) -> list[str]:
    """Return labels of required fields that are absent or blank."""
    missing: list[str] = []
    for spec in service.fields:
        if not spec.required:
            continue
        value = inputs.get(spec.name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(spec.label or spec.name)
    return missing


def validate_required_fields(service: ServiceDefinition, inputs: dict[str, Any]) -> None:
    """Raise InputValidationError when any required field is missing."""
    missing = missing_required_fields(service, inputs)
    if missing:
        raise InputValidationError(
            f"Missing required fields: {', '.join(missing)}", missing=missing
        )
