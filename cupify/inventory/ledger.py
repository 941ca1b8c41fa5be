"""Stock ledger primitives.

These functions run inside a caller-owned transaction. Rows are locked in
ascending ``color_code`` order and every color is verified before any row
is decremented, so two checkouts touching overlapping colors cannot
deadlock or leave a half-applied reservation behind.
"""

import logging
from typing import Dict, List, Mapping

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from ..common.db import utcnow
from ..common.errors import InsufficientStock, UnknownColor
from ..common.i18n import DEFAULT_LANGUAGE
from .model import InventoryItem

_logger = logging.getLogger(__name__)


async def lock_item(session: AsyncSession, color_code: str, language: str = DEFAULT_LANGUAGE) -> InventoryItem:
    stmt = (
        sa.select(InventoryItem)
        .where(InventoryItem.color_code == color_code)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    item = (await session.execute(stmt)).scalar_one_or_none()
    if item is None:
        raise UnknownColor(color_code, language)
    return item


async def verify_available(
    session: AsyncSession,
    quantities: Mapping[str, int],
    language: str = DEFAULT_LANGUAGE,
) -> List[InventoryItem]:
    """Lock every requested row and check stock; nothing is written."""
    locked: List[InventoryItem] = []
    for color_code in sorted(quantities):
        qty = quantities[color_code]
        item = await lock_item(session, color_code, language)
        if item.stock < qty:
            _logger.info(
                "Insufficient stock | color=%s requested=%s available=%s",
                color_code,
                qty,
                item.stock,
            )
            raise InsufficientStock(color_code, item.display_name(language), language)
        locked.append(item)
    return locked


async def decrement(session: AsyncSession, color_code: str, qty: int, language: str = DEFAULT_LANGUAGE) -> int:
    """Compare-and-decrement one row. Returns the new stock."""
    stmt = (
        sa.update(InventoryItem)
        .where(InventoryItem.color_code == color_code, InventoryItem.stock >= qty)
        .values(stock=InventoryItem.stock - qty, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    res = await session.execute(stmt)
    if (res.rowcount or 0) == 0:
        item = await session.get(InventoryItem, color_code, populate_existing=True)
        if item is None:
            raise UnknownColor(color_code, language)
        raise InsufficientStock(color_code, item.display_name(language), language)
    new_stock = await session.scalar(
        sa.select(InventoryItem.stock).where(InventoryItem.color_code == color_code)
    )
    return int(new_stock)


async def reserve_many(
    session: AsyncSession,
    quantities: Mapping[str, int],
    language: str = DEFAULT_LANGUAGE,
) -> Dict[str, int]:
    """Verify then decrement every color. Returns the new stock per color."""
    await verify_available(session, quantities, language)
    remaining: Dict[str, int] = {}
    for color_code in sorted(quantities):
        remaining[color_code] = await decrement(session, color_code, quantities[color_code], language)
    return remaining
