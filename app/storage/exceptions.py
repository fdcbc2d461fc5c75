class StorageError(Exception):
    """Base exception for ephemeral store failures."""


class DocumentNotFoundError(StorageError):
    """Raised when no document is stored under the requested id."""


class DocumentExpiredError(DocumentNotFoundError):
    """Raised when the requested document existed but its TTL has elapsed."""
