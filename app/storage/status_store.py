from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from app.logging.logger import Log
from app.storage.base import BaseStatusStore
from app.storage.models import GenerationState, GenerationStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryStatusStore(BaseStatusStore):
    """Process-local status map with lazy and periodic TTL expiry."""

    def __init__(
        self,
        ttl: timedelta = timedelta(hours=2),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._statuses: dict[str, GenerationStatus] = {}

    def mark_processing(
        self,
        session_id: str,
        *,
        trace_id: str | None = None,
        service_name: str | None = None,
    ) -> bool:
        current = self.get(session_id)
        if current is not None and self._reject_terminal(current, GenerationState.PROCESSING):
            return False
        now = self._clock()
        self._statuses[session_id] = GenerationStatus(
            session_id=session_id,
            state=GenerationState.PROCESSING,
            created_at=current.created_at if current else now,
            updated_at=now,
            trace_id=trace_id,
            service_name=service_name,
        )
        return True

    def mark_ready(
        self,
        session_id: str,
        *,
        document_id: str,
        preview_url: str | None = None,
        download_url: str | None = None,
    ) -> bool:
        return self._transition(
            session_id,
            GenerationState.READY,
            document_id=document_id,
            preview_url=preview_url,
            download_url=download_url,
        )

    def mark_error(self, session_id: str, message: str) -> bool:
        return self._transition(session_id, GenerationState.ERROR, error=message)

    def get(self, session_id: str) -> GenerationStatus | None:
        status = self._statuses.get(session_id)
        if status is None:
            return None
        if self._is_expired(status, self._clock()):
            del self._statuses[session_id]
            return None
        return status

    def sweep(self) -> int:
        now = self._clock()
        expired = [sid for sid, status in self._statuses.items() if self._is_expired(status, now)]
        for session_id in expired:
            del self._statuses[session_id]
        return len(expired)

    def clear(self) -> None:
        self._statuses.clear()

    def __len__(self) -> int:
        return len(self._statuses)

    def _transition(self, session_id: str, state: GenerationState, **changes: str | None) -> bool:
        current = self.get(session_id)
        now = self._clock()
        if current is None:
            self._statuses[session_id] = GenerationStatus(
                session_id=session_id, state=state, created_at=now, updated_at=now, **changes
            )
            return True
        if self._reject_terminal(current, state):
            return False
        self._statuses[session_id] = replace(current, state=state, updated_at=now, **changes)
        return True

    @staticmethod
    def _reject_terminal(current: GenerationStatus, requested: GenerationState) -> bool:
        if not current.state.is_terminal:
            return False
        Log.warning(
            f"Ignoring {requested.value} transition for session already {current.state.value}",
            session_id=current.session_id,
            trace_id=current.trace_id,
        )
        return True

    def _is_expired(self, status: GenerationStatus, now: datetime) -> bool:
        return now - status.created_at > self._ttl
