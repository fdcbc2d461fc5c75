import hmac
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse, Response

from app.api.schemas import PaymentAcceptedResponse, PaymentConfirmedRequest
from app.catalog.exceptions import InputValidationError, ServiceNotFoundError
from app.logging.logger import Log
from app.processor.container import Container
from app.processor.events import PaymentConfirmedEvent
from app.storage.exceptions import DocumentExpiredError, DocumentNotFoundError

router = APIRouter()


def get_container(request: Request) -> Container:
    return request.app.state.container


ContainerDep = Annotated[Container, Depends(get_container)]


def require_admin(
    container: ContainerDep,
    x_admin_token: Annotated[str | None, Header()] = None,
) -> None:
    expected = container.settings.admin_token
    if not expected:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    if not x_admin_token or not hmac.compare_digest(x_admin_token, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid admin token")


@router.post("/webhooks/payment-confirmed", status_code=status.HTTP_202_ACCEPTED)
async def payment_confirmed(payload: PaymentConfirmedRequest, container: ContainerDep) -> Response:
    """Accept a verified payment and schedule generation without waiting for it."""
    event = PaymentConfirmedEvent(
        session_id=payload.session_id,
        slug=payload.slug,
        inputs=payload.string_inputs(),
        customer_email=payload.customer_email,
    )
    try:
        receipt = container.event_handler.handle(event)
    except ServiceNotFoundError as exc:
        Log.warning(f"Rejected payment event: {exc}", session_id=payload.session_id)
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})
    except InputValidationError as exc:
        Log.warning(f"Rejected payment event: {exc}", session_id=payload.session_id)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc), "missing": exc.missing},
        )
    body = PaymentAcceptedResponse(
        accepted=receipt.accepted,
        session_id=receipt.session_id,
        trace_id=receipt.trace_id,
        duplicate=receipt.duplicate,
    )
    return JSONResponse(status_code=status.HTTP_202_ACCEPTED, content=body.model_dump(by_alias=True))


@router.get("/status/{session_id}")
async def generation_status(session_id: str, container: ContainerDep) -> Response:
    current = container.status_store.get(session_id)
    if current is None:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"status": "unknown"})
    return JSONResponse(content=current.to_dict())


@router.get("/documents/{document_id}")
async def fetch_document(
    document_id: str,
    container: ContainerDep,
    preview: bool = False,
    expires: Annotated[int | None, Query()] = None,
) -> Response:
    """Serve a stored PDF inline (preview) or as an attachment."""
    try:
        document = container.document_store.get(document_id)
    except DocumentExpiredError as exc:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail=str(exc)) from exc
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if expires is not None and container.document_store.now().timestamp() > expires:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail="Document link has expired")

    disposition = "inline" if preview else "attachment"
    filename = document.metadata.filename or f"{document.document_id}.pdf"
    return Response(
        content=document.pdf_bytes,
        media_type=document.mime_type,
        headers={
            "Content-Disposition": f'{disposition}; filename="{filename}"',
            "Cache-Control": "private, no-store",
        },
    )


@router.delete("/admin/documents/{document_id}", dependencies=[Depends(require_admin)])
async def delete_document(document_id: str, container: ContainerDep) -> dict[str, object]:
    if not container.document_store.delete(document_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    Log.info(f"Document {document_id} deleted by admin")
    return {"deleted": True, "documentId": document_id}


@router.get("/admin/stats", dependencies=[Depends(require_admin)])
async def store_stats(container: ContainerDep) -> dict[str, object]:
    stats = container.document_store.stats()
    return {
        "documents": {
            "count": stats.count,
            "totalBytes": stats.total_bytes,
            "oldestAgeSeconds": stats.oldest_age_seconds,
        },
        "statuses": len(container.status_store),
        "pendingRuns": container.orchestrator.pending_count,
    }
