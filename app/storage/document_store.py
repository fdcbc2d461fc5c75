import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from app.storage.base import BaseDocumentStore
from app.storage.exceptions import DocumentExpiredError, DocumentNotFoundError
from app.storage.models import DocumentMetadata, StoredDocument, StoreStats


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryDocumentStore(BaseDocumentStore):
    """Process-local document map; expired entries read as not found."""

    def __init__(
        self,
        ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._documents: dict[str, StoredDocument] = {}

    def now(self) -> datetime:
        return self._clock()

    def put(
        self,
        pdf_bytes: bytes,
        metadata: DocumentMetadata,
        *,
        document_id: str | None = None,
        ttl: timedelta | None = None,
    ) -> StoredDocument:
        now = self._clock()
        document = StoredDocument(
            document_id=document_id or f"doc_{uuid.uuid4().hex}",
            pdf_bytes=pdf_bytes,
            metadata=metadata,
            created_at=now,
            expires_at=now + (ttl if ttl is not None else self._ttl),
        )
        self._documents[document.document_id] = document
        return document

    def get(self, document_id: str) -> StoredDocument:
        document = self._documents.get(document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document not found: {document_id}")
        if document.is_expired(self._clock()):
            del self._documents[document_id]
            raise DocumentExpiredError(f"Document expired: {document_id}")
        return document

    def exists(self, document_id: str) -> bool:
        try:
            self.get(document_id)
        except DocumentNotFoundError:
            return False
        return True

    def get_metadata(self, document_id: str) -> DocumentMetadata:
        return self.get(document_id).metadata

    def delete(self, document_id: str) -> bool:
        return self._documents.pop(document_id, None) is not None

    def sweep(self) -> int:
        now = self._clock()
        expired = [doc_id for doc_id, doc in self._documents.items() if doc.is_expired(now)]
        for document_id in expired:
            del self._documents[document_id]
        return len(expired)

    def stats(self) -> StoreStats:
        now = self._clock()
        documents = list(self._documents.values())
        oldest = min((doc.created_at for doc in documents), default=None)
        return StoreStats(
            count=len(documents),
            total_bytes=sum(doc.size_bytes for doc in documents),
            oldest_age_seconds=(now - oldest).total_seconds() if oldest else None,
        )

    def clear(self) -> None:
        self._documents.clear()

    def __len__(self) -> int:
        return len(self._documents)
