import asyncio
from collections.abc import Sequence
from urllib.parse import urlencode

from app.catalog.exceptions import ConfigError, InputValidationError
from app.generation.exceptions import GenerationError, GenerationFailedError
from app.logging.logger import GenerationStep, Log
from app.processor.exceptions import PipelineTimeoutError
from app.processor.pipeline import PipelineContext, PipelineStep
from app.rendering.exceptions import RenderError
from app.storage.base import BaseStatusStore
from app.storage.exceptions import StorageError
from app.storage.models import StoredDocument

_USER_MESSAGES: tuple[tuple[type[Exception], str], ...] = (
    (PipelineTimeoutError, "Document generation took too long and was stopped."),
    (InputValidationError, "Some of the details you provided could not be used."),
    (ConfigError, "This document type is temporarily unavailable."),
    (GenerationError, "We could not generate your document after several attempts."),
    (RenderError, "We could not produce the PDF for your document."),
    (StorageError, "We could not save your document."),
)
_FALLBACK_MESSAGE = "An unexpected error occurred while generating your document."


def user_message(exc: Exception, trace_id: str) -> str:
    """Map a pipeline failure to text that is safe to show a customer."""
    base = next(
        (message for exc_type, message in _USER_MESSAGES if isinstance(exc, exc_type)),
        _FALLBACK_MESSAGE,
    )
    return (
        f"{base} Reference: {trace_id}. "
        "You will not be charged again for this attempt."
    )


class PipelineOrchestrator:
    """Runs the generation pipeline for one paid session as a background task.

    Status moves to processing before anything is awaited and always ends in
    ready or error, including when the overall deadline fires.
    """

    def __init__(
        self,
        steps: Sequence[PipelineStep],
        status_store: BaseStatusStore,
        *,
        deadline_seconds: float = 90.0,
        public_base_url: str = "",
    ) -> None:
        self._steps = list(steps)
        self._status_store = status_store
        self._deadline_seconds = deadline_seconds
        self._public_base_url = public_base_url.rstrip("/")
        self._tasks: set[asyncio.Task[PipelineContext]] = set()

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    def start(self, context: PipelineContext) -> asyncio.Task[PipelineContext]:
        """Record processing and schedule the run; must be called on the event loop."""
        self._status_store.mark_processing(
            context.session_id,
            trace_id=context.trace_id,
            service_name=context.service.display_name if context.service else context.slug,
        )
        task = asyncio.get_running_loop().create_task(
            self.execute(context), name=f"pipeline-{context.session_id}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def execute(self, context: PipelineContext) -> PipelineContext:
        """Run every step under the overall deadline and write the terminal status."""
        Log.info(
            f"Pipeline started for {context.slug}",
            trace_id=context.trace_id,
            session_id=context.session_id,
            service=context.slug,
        )
        try:
            await asyncio.wait_for(self._run_steps(context), timeout=self._deadline_seconds)
        except asyncio.TimeoutError:
            self._fail(
                context,
                PipelineTimeoutError(
                    f"Pipeline exceeded its {self._deadline_seconds}s deadline"
                ),
            )
            return context
        except Exception as exc:
            self._fail(context, exc)
            return context

        document = context.document
        if document is None:
            self._fail(context, StorageError("Pipeline finished without a stored document"))
            return context
        preview_url, download_url = self.document_urls(document)
        self._status_store.mark_ready(
            context.session_id,
            document_id=document.document_id,
            preview_url=preview_url,
            download_url=download_url,
        )
        Log.info(
            f"Generation complete: document {document.document_id}",
            trace_id=context.trace_id,
            session_id=context.session_id,
            service=context.slug,
            step=GenerationStep.GENERATION_COMPLETE,
        )
        return context

    def document_urls(self, document: StoredDocument) -> tuple[str, str]:
        expires = int(document.expires_at.timestamp())
        base = f"{self._public_base_url}/documents/{document.document_id}"
        preview = f"{base}?{urlencode({'preview': 'true', 'expires': expires})}"
        download = f"{base}?{urlencode({'expires': expires})}"
        return preview, download

    async def shutdown(self) -> None:
        """Cancel outstanding runs and wait for them to unwind."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            Log.info(f"Cancelled {len(tasks)} outstanding pipeline runs")

    async def _run_steps(self, context: PipelineContext) -> None:
        for step in self._steps:
            await step.run(context)

    def _fail(self, context: PipelineContext, exc: Exception) -> None:
        context.error_message = user_message(exc, context.trace_id)
        self._status_store.mark_error(context.session_id, context.error_message)
        log_context = {
            "trace_id": context.trace_id,
            "session_id": context.session_id,
            "service": context.slug,
            "step": GenerationStep.GENERATION_FAILED,
        }
        if isinstance(exc, GenerationFailedError):
            Log.error(
                f"Generation failed after {exc.retries} retries: {exc}",
                **log_context,
            )
        elif isinstance(exc, tuple(exc_type for exc_type, _ in _USER_MESSAGES)):
            Log.error(f"Pipeline failed: {exc}", **log_context)
        else:
            Log.exception(f"Pipeline failed unexpectedly: {exc}", **log_context)
