from abc import ABC, abstractmethod
from datetime import timedelta

from app.storage.models import DocumentMetadata, GenerationStatus, StoredDocument, StoreStats


class BaseStatusStore(ABC):
    """Contract for session status stores.

    Once a session reaches a terminal state every further transition is
    rejected and reported by returning False.
    """

    @abstractmethod
    def mark_processing(
        self,
        session_id: str,
        *,
        trace_id: str | None = None,
        service_name: str | None = None,
    ) -> bool:
        """Record that generation has started."""

    @abstractmethod
    def mark_ready(
        self,
        session_id: str,
        *,
        document_id: str,
        preview_url: str | None = None,
        download_url: str | None = None,
    ) -> bool:
        """Record a successful generation."""

    @abstractmethod
    def mark_error(self, session_id: str, message: str) -> bool:
        """Record a failed generation with a user-safe message."""

    @abstractmethod
    def get(self, session_id: str) -> GenerationStatus | None:
        """Return the current status, or None if unknown or expired."""

    @abstractmethod
    def sweep(self) -> int:
        """Drop expired entries and return how many were removed."""

    @abstractmethod
    def clear(self) -> None:
        """Drop every entry."""


class BaseDocumentStore(ABC):
    """Contract for ephemeral document stores."""

    @abstractmethod
    def put(
        self,
        pdf_bytes: bytes,
        metadata: DocumentMetadata,
        *,
        document_id: str | None = None,
        ttl: timedelta | None = None,
    ) -> StoredDocument:
        """Store a document and return its record."""

    @abstractmethod
    def get(self, document_id: str) -> StoredDocument:
        """Return a stored document.

        Raises:
            DocumentNotFoundError: if absent.
            DocumentExpiredError: if past expiry; the entry is removed.
        """

    @abstractmethod
    def exists(self, document_id: str) -> bool:
        """Return True if a live document is stored under the id."""

    @abstractmethod
    def get_metadata(self, document_id: str) -> DocumentMetadata:
        """Return metadata of a live document; raises like get()."""

    @abstractmethod
    def delete(self, document_id: str) -> bool:
        """Remove a document; return True if one was removed."""

    @abstractmethod
    def sweep(self) -> int:
        """Drop expired entries and return how many were removed."""

    @abstractmethod
    def stats(self) -> StoreStats:
        """Return count, total bytes and age of the oldest entry."""

    @abstractmethod
    def clear(self) -> None:
        """Drop every entry."""
