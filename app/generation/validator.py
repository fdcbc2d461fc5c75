"""Validators for raw provider output: JSON structure or plain-text quality."""

import json
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from app.catalog.models import OutputMode
from app.generation.exceptions import StructuralValidationError
from app.generation.models import ValidationResult
from app.generation.repair import repair_json


class BaseContentValidator(ABC):
    """Contract for deterministic content validators."""

    json_mode: ClassVar[bool] = False
    system_instruction: ClassVar[str] = ""
    strict_directive: ClassVar[str] = ""

    @abstractmethod
    def validate(self, raw: str) -> ValidationResult:
        """Judge one raw provider response.

        Never raises; failures are reported through ValidationResult.error.
        """


class JsonStructureValidator(BaseContentValidator):
    """Parses (and if needed repairs) JSON, then checks required keys."""

    json_mode: ClassVar[bool] = True
    system_instruction: ClassVar[str] = (
        "You MUST ONLY respond with one valid JSON object. "
        "No commentary, no Markdown, no explanations."
    )
    strict_directive: ClassVar[str] = "STRICT JSON ONLY - no commentary."

    def __init__(self, required_keys: tuple[str, ...] = ()) -> None:
        self._required_keys = required_keys

    def validate(self, raw: str) -> ValidationResult:
        repair_attempted = False
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            repair_attempted = True
            try:
                data = repair_json(raw).data
            except StructuralValidationError as exc:
                return ValidationResult(
                    success=False,
                    error=str(exc),
                    repair_attempted=True,
                    raw_response=raw,
                )

        issues = self.structure_issues(data)
        if issues:
            return ValidationResult(
                success=False,
                error=f"Validation failed: {', '.join(issues)}",
                repair_attempted=repair_attempted,
                raw_response=raw,
            )
        return ValidationResult(
            success=True,
            data=data,
            repair_attempted=repair_attempted,
            raw_response=raw,
        )

    def structure_issues(self, data: Any) -> list[str]:
        if not isinstance(data, dict):
            return ["Response is not a JSON object"]
        issues = [f"Missing required field: {key}" for key in self._required_keys if key not in data]
        for key, value in data.items():
            if isinstance(value, str) and not value.strip():
                issues.append(f"Empty value for field: {key}")
        return issues


class PlainTextValidator(BaseContentValidator):
    """Accepts natural-language text of a minimum length."""

    system_instruction: ClassVar[str] = (
        "You write plain-text documents. Respond with the document text only."
    )
    strict_directive: ClassVar[str] = (
        "PLAIN TEXT ONLY - no commentary, no Markdown, no code fences, no JSON."
    )

    def __init__(self, min_length: int = 300) -> None:
        self._min_length = min_length

    def validate(self, raw: str) -> ValidationResult:
        text = raw.strip()
        issues: list[str] = []
        if not text:
            issues.append("Empty response")
        elif len(text) < self._min_length:
            issues.append(f"Response too short (less than {self._min_length} characters)")
        if "```" in text:
            issues.append("Response contains code blocks instead of plain text")
        if text.startswith("{") and text.endswith("}"):
            issues.append("Response appears to be JSON instead of plain text")
        if issues:
            return ValidationResult(
                success=False,
                error=f"Text quality issues: {', '.join(issues)}",
                raw_response=raw,
            )
        return ValidationResult(success=True, data=text, raw_response=raw)


def validator_for(output_mode: OutputMode, required_keys: tuple[str, ...] = ()) -> BaseContentValidator:
    """Select the validator matching a service's output mode."""
    if output_mode is OutputMode.JSON:
        return JsonStructureValidator(required_keys)
    return PlainTextValidator()
