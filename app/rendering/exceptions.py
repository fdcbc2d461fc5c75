class RenderError(Exception):
    """Raised when a PDF cannot be laid out or written."""


class LogoLoadError(Exception):
    """Raised when a logo asset cannot be fetched or decoded."""
