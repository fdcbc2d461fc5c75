class ProcessorError(Exception):
    """Base exception for pipeline orchestration errors."""


class PipelineTimeoutError(ProcessorError):
    """Raised when a pipeline run exceeds its overall deadline."""
