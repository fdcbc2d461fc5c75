from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum


class GenerationState(str, Enum):
    PROCESSING = "processing"
    READY = "ready"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not GenerationState.PROCESSING


@dataclass(frozen=True)
class GenerationStatus:
    """Pollable status of one session's generation run."""

    session_id: str
    state: GenerationState
    created_at: datetime
    updated_at: datetime
    trace_id: str | None = None
    service_name: str | None = None
    document_id: str | None = None
    preview_url: str | None = None
    download_url: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["state"] = self.state.value
        data["created_at"] = self.created_at.isoformat()
        data["updated_at"] = self.updated_at.isoformat()
        return data


@dataclass(frozen=True)
class DocumentMetadata:
    service_slug: str
    session_id: str
    trace_id: str | None = None
    user_id: str | None = None
    filename: str | None = None


@dataclass(frozen=True)
class StoredDocument:
    """PDF bytes plus bookkeeping; owned exclusively by the document store."""

    document_id: str
    pdf_bytes: bytes = field(repr=False)
    metadata: DocumentMetadata
    created_at: datetime
    expires_at: datetime
    mime_type: str = "application/pdf"

    @property
    def size_bytes(self) -> int:
        return len(self.pdf_bytes)

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


@dataclass(frozen=True)
class StoreStats:
    count: int
    total_bytes: int
    oldest_age_seconds: float | None
