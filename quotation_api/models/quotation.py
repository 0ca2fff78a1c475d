"""
Quotation model — a priced offer to a customer awaiting approval.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Column, DateTime, Integer, Numeric, String

from quotation_api.db.base import Base

QUOTATION_STATUSES = ("pending", "approved", "rejected")


class Quotation(Base):
    __tablename__ = "quotations"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    customer_name: str = Column(String(255), nullable=False)  # type: ignore[assignment]
    items: Any = Column(JSON, nullable=False)  # type: ignore[assignment]
    total_amount: Decimal = Column(Numeric(10, 2), nullable=False)  # type: ignore[assignment]
    status: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default="pending",
        server_default="pending",
    )  # pending | approved | rejected
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
