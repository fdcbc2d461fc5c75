import logging
import sys
from enum import Enum

_CONTEXT_KEYS = ("trace_id", "session_id", "service", "step")


class GenerationStep(str, Enum):
    """Pipeline milestones attached to log records."""

    PROMPT_BUILT = "PROMPT_BUILT"
    SANITIZATION = "SANITIZATION"
    RETRY_ATTEMPT = "RETRY_ATTEMPT"
    CONTENT_VALIDATED = "CONTENT_VALIDATED"
    PDF_RENDERED = "PDF_RENDERED"
    PDF_STORED = "PDF_STORED"
    GENERATION_COMPLETE = "GENERATION_COMPLETE"
    GENERATION_FAILED = "GENERATION_FAILED"


class _ContextFormatter(logging.Formatter):
    """Appends known context fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        parts = []
        for key in _CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value is None:
                continue
            if isinstance(value, Enum):
                value = value.value
            parts.append(f"{key}={value}")
        if not parts:
            return base
        return f"{base} | {' '.join(parts)}"


class Log:
    """Centralized logging with structured context."""

    _logger: logging.Logger = logging.getLogger("docpipeline")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                _ContextFormatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        """Log an info message."""
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        """Log an error message."""
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def exception(cls, message: str, **kwargs: object) -> None:
        """Log an error message with the active exception traceback."""
        cls._logger.exception(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        """Log a warning message."""
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Log a debug message."""
        cls._logger.debug(message, extra=kwargs)
