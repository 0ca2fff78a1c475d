"""
Quotation CRUD endpoints.

- List / create / update require any authenticated user.
- Status changes and deletes require the admin role.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from quotation_api.api.deps import get_current_user, get_db, require_admin
from quotation_api.core.exceptions import NotFoundError, ValidationError
from quotation_api.crud import quotation as crud
from quotation_api.models.quotation import QUOTATION_STATUSES, Quotation
from quotation_api.schemas.quotation import (
    QuotationCreate,
    QuotationRead,
    QuotationStatusResponse,
    QuotationStatusUpdate,
    QuotationUpdate,
    QuotationWriteResponse,
)
from quotation_api.schemas.token import TokenClaims

router = APIRouter(prefix="/quotations", tags=["quotations"])
logger = logging.getLogger(__name__)


@router.get("", response_model=list[QuotationRead])
async def list_quotations(
    db: AsyncSession = Depends(get_db),
    _user: TokenClaims = Depends(get_current_user),
) -> list[Quotation]:
    """All quotations, newest first."""
    quotations = await crud.list_quotations(db)
    logger.info("Fetched %d quotations", len(quotations))
    return quotations


@router.post("", response_model=QuotationWriteResponse, status_code=status.HTTP_201_CREATED)
async def create_quotation(
    body: QuotationCreate,
    db: AsyncSession = Depends(get_db),
    user: TokenClaims = Depends(get_current_user),
) -> QuotationWriteResponse:
    quotation_id = await crud.create_quotation(db, **body.model_dump())
    logger.info("Quotation %d created by user id=%d", quotation_id, user.id)
    return QuotationWriteResponse(id=quotation_id, message="Quotation created successfully")


@router.patch("/{quotation_id}", response_model=QuotationWriteResponse)
async def update_quotation(
    quotation_id: int,
    body: QuotationUpdate,
    db: AsyncSession = Depends(get_db),
    _user: TokenClaims = Depends(get_current_user),
) -> QuotationWriteResponse:
    fields = body.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        raise ValidationError("No valid fields to update")

    if not await crud.update_quotation(db, quotation_id, fields):
        raise NotFoundError("Quotation not found")

    logger.info("Updated quotation %d: %s", quotation_id, sorted(fields))
    return QuotationWriteResponse(id=quotation_id, message="Quotation updated successfully")


@router.patch("/{quotation_id}/status", response_model=QuotationStatusResponse)
async def update_quotation_status(
    quotation_id: int,
    body: QuotationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: TokenClaims = Depends(require_admin),
) -> QuotationStatusResponse:
    if not body.status:
        raise ValidationError("Missing status field in request body")
    if body.status not in QUOTATION_STATUSES:
        raise ValidationError(
            "Invalid status value. Must be one of: " + ", ".join(QUOTATION_STATUSES)
        )

    if not await crud.update_quotation(db, quotation_id, {"status": body.status}):
        raise NotFoundError("Quotation not found")

    logger.info("Quotation %d status set to %s", quotation_id, body.status)
    return QuotationStatusResponse(
        id=quotation_id,
        status=body.status,
        message="Quotation status updated successfully",
    )


@router.delete("/{quotation_id}", response_model=QuotationWriteResponse)
async def delete_quotation(
    quotation_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: TokenClaims = Depends(require_admin),
) -> QuotationWriteResponse:
    if not await crud.delete_quotation(db, quotation_id):
        raise NotFoundError("Quotation not found")

    logger.info("Deleted quotation %d", quotation_id)
    return QuotationWriteResponse(id=quotation_id, message="Quotation deleted successfully")
