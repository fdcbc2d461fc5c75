"""Deterministic prompt construction from a service schema and raw form inputs."""

import math
import re
from pathlib import Path
from typing import Any, ClassVar

from app.catalog.exceptions import ServiceNotFoundError
from app.catalog.models import FieldSpec, InputType, OutputMode, ServiceCatalog, ServiceDefinition
from app.logging.logger import GenerationStep, Log
from app.prompting.models import BuiltPrompt
from app.prompting.prompt_loader import load_prompt_template
from app.sanitization.base import BaseSanitizer
from app.sanitization.models import SanitizedInputs


class PromptBuilder:
    """Builds the final generation prompt for one service run."""

    MAX_FIELD_LENGTH: ClassVar[int] = 500
    TEXT_MAX_TOKENS: ClassVar[int] = 1200
    JSON_MAX_TOKENS: ClassVar[int] = 450
    MISSING_OPTIONAL_VALUE: ClassVar[str] = "Not provided"

    _PLACEHOLDER_RE: ClassVar[re.Pattern[str]] = re.compile(r"\{\{\s*(\w+)\s*\}\}")
    _NUMBER_NOISE_RE: ClassVar[re.Pattern[str]] = re.compile(r"[\s,£$€¥]")

    def __init__(
        self,
        *,
        catalog: ServiceCatalog,
        sanitizer: BaseSanitizer,
        prompts_dir: Path | None = None,
        template_timeout_seconds: float = 2.0,
    ) -> None:
        self._catalog = catalog
        self._sanitizer = sanitizer
        self._prompts_dir = prompts_dir
        self._template_timeout_seconds = template_timeout_seconds

    async def build(
        self,
        slug: str,
        raw_inputs: dict[str, Any],
        trace_id: str | None = None,
    ) -> BuiltPrompt:
        """Resolve the service, load its template and substitute sanitized inputs.

        Raises:
            ServiceNotFoundError: if the slug is not in the catalog.
            TemplateNotFoundError: if the template cannot be loaded.
        """
        service = self._catalog.get(slug)
        if service is None:
            raise ServiceNotFoundError(f"Service not found: {slug}")

        template = await load_prompt_template(
            service.prompt_template_ref,
            prompts_dir=self._prompts_dir,
            timeout_seconds=self._template_timeout_seconds,
        )
        sanitized = self.sanitize_inputs(service, raw_inputs)
        if sanitized.org_sanitized:
            Log.warning(
                f"Inputs sanitized: {sanitized.sanitized_reason}",
                trace_id=trace_id,
                service=slug,
                step=GenerationStep.SANITIZATION,
            )

        prompt = self._substitute(template, sanitized, service, trace_id)
        is_json = service.output_mode is OutputMode.JSON
        built = BuiltPrompt(
            prompt=prompt,
            sanitized_inputs=sanitized,
            temperature=service.temperature,
            output_mode=service.output_mode,
            required_keys=service.required_keys,
            max_tokens=self.JSON_MAX_TOKENS if is_json else self.TEXT_MAX_TOKENS,
        )
        Log.info(
            f"Prompt built: {len(prompt)} chars, temperature {built.temperature}",
            trace_id=trace_id,
            service=slug,
            step=GenerationStep.PROMPT_BUILT,
        )
        return built

    def sanitize_inputs(
        self,
        service: ServiceDefinition,
        raw_inputs: dict[str, Any],
    ) -> SanitizedInputs:
        """Normalize every declared field and sanitize organization/person names.

        Keys not declared by the service are dropped.
        """
        values: dict[str, str] = {}
        sanitized_fields: set[str] = set()
        reason: str | None = None
        for spec in service.fields:
            raw = raw_inputs.get(spec.name)
            if raw is None:
                continue
            if spec.role is not None:
                result = self._sanitizer.sanitize(self._normalize_text(raw), spec.role)
                values[spec.name] = result.value
                if result.was_sanitized:
                    sanitized_fields.add(spec.name)
                    reason = reason or result.reason
            elif spec.input_type is InputType.NUMBER:
                values[spec.name] = self._normalize_number(spec, raw)
            else:
                values[spec.name] = self._normalize_text(raw)
        return SanitizedInputs(
            values=values,
            org_sanitized=bool(sanitized_fields),
            sanitized_reason=reason,
            sanitized_fields=frozenset(sanitized_fields),
        )

    def _normalize_text(self, raw: Any) -> str:
        return str(raw).strip()[: self.MAX_FIELD_LENGTH]

    def _normalize_number(self, spec: FieldSpec, raw: Any) -> str:
        """Clamp a numeric field; text that is not a number is kept as text."""
        text = self._normalize_text(raw)
        if not text:
            return text
        try:
            number = float(self._NUMBER_NOISE_RE.sub("", text))
        except ValueError:
            return text
        if not math.isfinite(number):
            return text
        if spec.min is not None:
            number = max(spec.min, number)
        if spec.max is not None:
            number = min(spec.max, number)
        if number.is_integer():
            return str(int(number))
        return f"{number:.2f}"

    def _substitute(
        self,
        template: str,
        sanitized: SanitizedInputs,
        service: ServiceDefinition,
        trace_id: str | None,
    ) -> str:
        unmatched: list[str] = []

        def replace(match: re.Match[str]) -> str:
            name = match.group(1)
            value = sanitized.values.get(name)
            if value:
                return value
            if service.field_by_name(name) is not None:
                return self.MISSING_OPTIONAL_VALUE
            unmatched.append(name)
            return match.group(0)

        prompt = self._PLACEHOLDER_RE.sub(replace, template)
        if unmatched:
            Log.warning(
                f"Template placeholders left unmatched: {', '.join(sorted(set(unmatched)))}",
                trace_id=trace_id,
                service=service.slug,
            )
        return prompt
