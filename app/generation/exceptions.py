class GenerationError(Exception):
    """Base exception for content generation failures."""


class GenerationTransportError(GenerationError):
    """Raised when the provider call fails due to network/infrastructure issues."""


class GenerationTimeoutError(GenerationTransportError):
    """Raised when a provider call exceeds its per-call timeout."""


class EmptyResponseError(GenerationTransportError):
    """Raised when the provider returns no usable content."""


class StructuralValidationError(GenerationError):
    """Raised when generated content is malformed and cannot be repaired."""


class GenerationFailedError(GenerationError):
    """Raised when every generation attempt has been exhausted."""

    def __init__(self, message: str, raw_response: str | None = None, retries: int = 0) -> None:
        super().__init__(message)
        self.raw_response = raw_response
        self.retries = retries
