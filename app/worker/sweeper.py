import asyncio

from app.logging.logger import Log
from app.storage.base import BaseDocumentStore, BaseStatusStore


class StoreSweeper:
    """Periodic loop: sleep -> drop expired statuses and documents."""

    def __init__(
        self,
        status_store: BaseStatusStore,
        document_store: BaseDocumentStore,
        interval_seconds: float,
    ) -> None:
        self._status_store = status_store
        self._document_store = document_store
        self._interval_seconds = interval_seconds

    async def run(self, max_sweeps: int | None = None) -> None:
        """Main sweep loop. Runs until cancelled.

        If max_sweeps is set, stop after that many sweeps (for testing).
        """
        Log.info(f"Sweeper started, interval {self._interval_seconds}s")
        sweeps_done = 0
        try:
            while max_sweeps is None or sweeps_done < max_sweeps:
                await asyncio.sleep(self._interval_seconds)
                self.sweep_once()
                sweeps_done += 1
        except asyncio.CancelledError:
            Log.info("Sweeper shutting down gracefully")
            raise

    def sweep_once(self) -> tuple[int, int]:
        """Sweep both stores. Store errors are logged and retried next interval."""
        try:
            statuses = self._status_store.sweep()
            documents = self._document_store.sweep()
        except Exception as exc:
            Log.warning(f"Store sweep failed, will retry: {exc}")
            return 0, 0
        if statuses or documents:
            Log.info(f"Swept {statuses} expired statuses and {documents} expired documents")
        else:
            Log.debug("Nothing to sweep")
        return statuses, documents
