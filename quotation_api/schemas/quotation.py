"""Pydantic schemas for Quotation CRUD."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator

QuotationStatus = Literal["pending", "approved", "rejected"]
CustomerName = Annotated[str, Field(min_length=1, max_length=255)]
Amount = Annotated[Decimal, Field(max_digits=10, decimal_places=2)]


def _check_items(v: Any) -> Any:
    if v == [] or v == {}:
        raise ValueError("items must not be empty")
    return v


class QuotationCreate(BaseModel):
    customer_name: CustomerName
    items: Any
    total_amount: Amount
    status: QuotationStatus = "pending"

    @field_validator("items")
    @classmethod
    def _items_present(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("items must not be empty")
        return _check_items(v)


class QuotationUpdate(BaseModel):
    customer_name: CustomerName | None = None
    items: Any = None
    total_amount: Amount | None = None
    status: QuotationStatus | None = None

    @field_validator("items")
    @classmethod
    def _items_not_empty(cls, v: Any) -> Any:
        # None means the field was not supplied.
        return v if v is None else _check_items(v)


class QuotationStatusUpdate(BaseModel):
    status: str | None = None


class QuotationRead(BaseModel):
    id: int
    customer_name: str
    items: Any
    total_amount: float
    status: str
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class QuotationWriteResponse(BaseModel):
    id: int
    message: str


class QuotationStatusResponse(BaseModel):
    id: int
    status: str
    message: str
