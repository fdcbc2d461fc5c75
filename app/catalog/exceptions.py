class ConfigError(Exception):
    """Raised when static service configuration is missing or unusable."""


class ServiceNotFoundError(ConfigError):
    """Raised when no service is registered under the requested slug."""


class TemplateNotFoundError(ConfigError):
    """Raised when a service's prompt template cannot be loaded."""


class InputValidationError(Exception):
    """Raised when submitted form inputs do not satisfy the service schema."""

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing = missing or []
