from dataclasses import dataclass

from app.catalog.models import OutputMode
from app.sanitization.models import SanitizedInputs


@dataclass(frozen=True)
class BuiltPrompt:
    """Output of the prompt builder; input to the retry orchestrator."""

    prompt: str
    sanitized_inputs: SanitizedInputs
    temperature: float
    output_mode: OutputMode = OutputMode.TEXT
    required_keys: tuple[str, ...] = ()
    max_tokens: int = 1200
