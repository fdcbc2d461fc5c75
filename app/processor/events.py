from dataclasses import dataclass, field

from app.catalog.exceptions import ServiceNotFoundError
from app.catalog.loader import validate_required_fields
from app.catalog.models import ServiceCatalog
from app.logging.logger import Log
from app.processor.orchestrator import PipelineOrchestrator
from app.processor.pipeline import PipelineContext
from app.storage.base import BaseStatusStore


@dataclass(frozen=True)
class PaymentConfirmedEvent:
    """Verified payment notification; signature checks happen upstream."""

    session_id: str
    slug: str
    inputs: dict[str, str] = field(default_factory=dict)
    customer_email: str | None = None


@dataclass(frozen=True)
class EventReceipt:
    accepted: bool
    session_id: str
    trace_id: str | None = None
    duplicate: bool = False


class PaymentEventHandler:
    """Validate a payment event and hand it to the orchestrator without waiting."""

    def __init__(
        self,
        catalog: ServiceCatalog,
        orchestrator: PipelineOrchestrator,
        status_store: BaseStatusStore,
    ) -> None:
        self._catalog = catalog
        self._orchestrator = orchestrator
        self._status_store = status_store

    def handle(self, event: PaymentConfirmedEvent) -> EventReceipt:
        """Schedule generation for a confirmed payment.

        Raises:
            ServiceNotFoundError: if the slug is not in the catalog.
            InputValidationError: if required fields are missing.
        """
        service = self._catalog.get(event.slug)
        if service is None:
            raise ServiceNotFoundError(f"Service not found: {event.slug}")
        validate_required_fields(service, event.inputs)

        existing = self._status_store.get(event.session_id)
        if existing is not None:
            Log.info(
                f"Duplicate payment event ignored (status {existing.state.value})",
                session_id=event.session_id,
                trace_id=existing.trace_id,
                service=event.slug,
            )
            return EventReceipt(
                accepted=True,
                session_id=event.session_id,
                trace_id=existing.trace_id,
                duplicate=True,
            )

        context = PipelineContext(
            session_id=event.session_id,
            slug=event.slug,
            inputs=dict(event.inputs),
            customer_email=event.customer_email,
            service=service,
        )
        self._orchestrator.start(context)
        return EventReceipt(accepted=True, session_id=event.session_id, trace_id=context.trace_id)
