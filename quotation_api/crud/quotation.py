"""
Quotation data access — list, create, partial update, status change, delete.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from quotation_api.db.session import run_with_reconnect
from quotation_api.models.quotation import Quotation


async def list_quotations(db: AsyncSession) -> list[Quotation]:
    async def _query() -> list[Quotation]:
        result = await db.execute(
            select(Quotation).order_by(Quotation.created_at.desc(), Quotation.id.desc())
        )
        return list(result.scalars().all())

    return await run_with_reconnect(db, _query)


async def create_quotation(
    db: AsyncSession,
    *,
    customer_name: str,
    items: Any,
    total_amount: Decimal,
    status: str = "pending",
) -> int:
    async def _insert() -> int:
        quotation = Quotation(
            customer_name=customer_name,
            items=items,
            total_amount=total_amount,
            status=status,
        )
        db.add(quotation)
        await db.commit()
        await db.refresh(quotation)
        return quotation.id

    return await run_with_reconnect(db, _insert)


async def update_quotation(db: AsyncSession, quotation_id: int, fields: dict[str, Any]) -> bool:
    """Apply *fields* to one quotation; return False if it does not exist.

    Only the supplied columns appear in the SET clause.
    """
    if not fields:
        raise ValueError("no fields to update")

    async def _update() -> bool:
        result = await db.execute(
            update(Quotation).where(Quotation.id == quotation_id).values(**fields)
        )
        await db.commit()
        return result.rowcount > 0

    return await run_with_reconnect(db, _update)


async def delete_quotation(db: AsyncSession, quotation_id: int) -> bool:
    async def _delete() -> bool:
        result = await db.execute(delete(Quotation).where(Quotation.id == quotation_id))
        await db.commit()
        return result.rowcount > 0

    return await run_with_reconnect(db, _delete)
