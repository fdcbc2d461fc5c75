from dataclasses import dataclass, field
from typing import Any

ParsedContent = dict[str, Any] | str


@dataclass(frozen=True)
class GenerationAttempt:
    """Parameters of a single provider call."""

    prompt: str
    system_prompt: str
    temperature: float
    max_tokens: int
    attempt_number: int


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one raw provider response."""

    success: bool
    data: ParsedContent | None = None
    error: str | None = None
    repair_attempted: bool = False
    raw_response: str | None = None


@dataclass(frozen=True)
class GenerationOutcome:
    """Final result of a retry orchestrator run."""

    success: bool
    data: ParsedContent | None = None
    error: str | None = None
    retries: int = 0
    repair_attempted: bool = False
    raw_response: str | None = None
    attempts: tuple[GenerationAttempt, ...] = field(default_factory=tuple)
