"""Product import endpoints — upload, plan, confirm or decline."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, UploadFile, status

from app.application.schemas.product import ImportDecision, ImportTicketResponse
from app.application.services import ProductService
from app.config import get_settings
from app.domain.entities import ImportState, ImportTicket
from app.domain.exceptions import (
    EntityNotFoundError,
    ImportInProgressError,
    ParseFailureError,
    PersistenceFailureError,
)
from app.infrastructure.dependencies import get_product_service
from app.presentation.api.v1.endpoints.products import not_durable

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/imports", tags=["Imports"])


# ── Helpers ──────────────────────────────────────────────────────────

def _to_response(ticket: ImportTicket, response: Response) -> ImportTicketResponse:
    if ticket.state == ImportState.AWAITING_CONFIRMATION:
        response.status_code = status.HTTP_202_ACCEPTED
    return ImportTicketResponse(
        plan_id=ticket.plan_id,
        state=ticket.state.value,
        message=ticket.message,
        imported=ticket.imported,
        created=ticket.created,
        overwritten=ticket.overwritten,
        collision_count=ticket.collision_count,
        collisions=ticket.collisions,
        shape=ticket.shape.value if ticket.shape else None,
        skipped=ticket.skipped,
    )


def _check_size(content: bytes) -> None:
    limit = get_settings().max_upload_size_mb * 1024 * 1024
    if len(content) > limit:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Import payload exceeds {get_settings().max_upload_size_mb} MB",
        )


async def _begin(
    service: ProductService,
    content: bytes,
    response: Response,
    *,
    filename: str | None = None,
    content_type: str | None = None,
) -> ImportTicketResponse:
    _check_size(content)
    try:
        ticket = await service.begin_import(
            content, filename=filename, content_type=content_type
        )
    except ImportInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ParseFailureError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except PersistenceFailureError as e:
        raise not_durable(e)
    return _to_response(ticket, response)


# ── Endpoints ────────────────────────────────────────────────────────

@router.post("", response_model=ImportTicketResponse)
async def upload_import(
    file: UploadFile,
    response: Response,
    service: ProductService = Depends(get_product_service),
) -> ImportTicketResponse:
    """Import products from an uploaded JSON file or legacy HTML page."""
    content = await file.read()
    logger.info("Received import upload '%s' (%d bytes)", file.filename, len(content))
    return await _begin(
        service,
        content,
        response,
        filename=file.filename,
        content_type=file.content_type,
    )


@router.post("/json", response_model=ImportTicketResponse)
async def json_import(
    request: Request,
    response: Response,
    service: ProductService = Depends(get_product_service),
) -> ImportTicketResponse:
    """Import products from a raw JSON request body."""
    content = await request.body()
    return await _begin(service, content, response)


@router.post("/{plan_id}/decision", response_model=ImportTicketResponse)
async def decide_import(
    plan_id: str,
    decision: ImportDecision,
    response: Response,
    service: ProductService = Depends(get_product_service),
) -> ImportTicketResponse:
    """Confirm or decline overwriting the colliding products of a pending import."""
    try:
        ticket = await service.resolve_import(plan_id, decision.confirmed)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PersistenceFailureError as e:
        raise not_durable(e)
    return _to_response(ticket, response)
