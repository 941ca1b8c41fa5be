import logging
from typing import Any, Dict, List, Optional

import sqlalchemy as sa

from ..common import database
from ..common.config import settings
from ..common.errors import UnknownColor, ValidationError
from ..common.redis_client import publish_json
from . import ledger
from .model import InventoryItem

_logger = logging.getLogger(__name__)

HEX_LENGTHS = (4, 7)


async def publish_stock(changes: Dict[str, int]) -> None:
    for color_code, stock in changes.items():
        await publish_json(settings.REDIS_STOCK_CHANNEL, {"colorCode": color_code, "stock": stock})
    if changes:
        _logger.info("Published stock update via Redis | changes=%s", changes)


async def list_inventory() -> List[Dict[str, Any]]:
    async with database.get_session() as session:
        res = await session.execute(
            sa.select(InventoryItem).order_by(InventoryItem.sort_order, InventoryItem.color_code)
        )
        return [item.to_dict() for item in res.scalars().all()]


async def get_item(color_code: str) -> Optional[Dict[str, Any]]:
    async with database.get_session() as session:
        item = await session.get(InventoryItem, color_code)
        return item.to_dict() if item else None


async def reserve(color_code: str, qty: int) -> int:
    """Atomically take ``qty`` units of one color. Returns the new stock."""
    if isinstance(qty, bool) or not isinstance(qty, int) or qty < 1:
        raise ValidationError("Quantity must be a positive integer")
    async with database.get_session() as session:
        async with session.begin():
            remaining = await ledger.reserve_many(session, {color_code: qty})
    await publish_stock(remaining)
    return remaining[color_code]


def _check_stock_value(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Stock must be an integer")
    if value < 0:
        raise ValidationError("Stock cannot be negative")
    return value


def _check_delta(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Delta must be an integer")
    return value


async def set_stock(color_code: str, new_stock: int) -> int:
    # Last write wins; admin edits are not serialized against checkouts.
    new_stock = _check_stock_value(new_stock)
    async with database.get_session() as session:
        async with session.begin():
            item = await session.get(InventoryItem, color_code)
            if item is None:
                raise UnknownColor(color_code)
            item.stock = new_stock
    _logger.info("DB set stock | color=%s new_stock=%s", color_code, new_stock)
    await publish_stock({color_code: new_stock})
    return new_stock


async def adjust_stock(color_code: str, delta: int) -> int:
    delta = _check_delta(delta)
    async with database.get_session() as session:
        async with session.begin():
            item = await session.get(InventoryItem, color_code)
            if item is None:
                raise UnknownColor(color_code)
            if item.stock + delta < 0:
                raise ValidationError(f"Adjustment would make stock negative for {color_code}")
            item.stock = item.stock + delta
            new_stock = item.stock
    _logger.info("DB adjust stock | color=%s delta=%s new_stock=%s", color_code, delta, new_stock)
    await publish_stock({color_code: new_stock})
    return new_stock


async def update_item(color_code: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Admin edit of names, swatch and stock (set or delta) for one color.

    Everything is validated before the row is touched, and all edits land in
    one transaction so a rejected request changes nothing.
    """
    fields = fields or {}
    if "stock" in fields and "delta" in fields:
        raise ValidationError("Send either stock or delta, not both")
    changes = {}
    for key, column in (("nameAr", "name_ar"), ("nameEn", "name_en")):
        if key in fields:
            value = fields[key]
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"{key} must be a non-empty string")
            changes[column] = value.strip()
    if "hex" in fields:
        value = fields["hex"]
        if not isinstance(value, str) or not value.startswith("#") or len(value) not in HEX_LENGTHS:
            raise ValidationError("hex must look like #RRGGBB")
        changes["hex"] = value
    new_stock = _check_stock_value(fields["stock"]) if "stock" in fields else None
    delta = _check_delta(fields["delta"]) if "delta" in fields else None
    if not changes and new_stock is None and delta is None:
        raise ValidationError("No fields to update")

    async with database.get_session() as session:
        async with session.begin():
            item = await session.get(InventoryItem, color_code)
            if item is None:
                raise UnknownColor(color_code)
            if delta is not None:
                if item.stock + delta < 0:
                    raise ValidationError(f"Adjustment would make stock negative for {color_code}")
                new_stock = item.stock + delta
            for column, value in changes.items():
                setattr(item, column, value)
            if new_stock is not None:
                item.stock = new_stock
    _logger.info("Inventory item updated | color=%s fields=%s new_stock=%s", color_code, sorted(changes), new_stock)
    if new_stock is not None:
        await publish_stock({color_code: new_stock})
    result = await get_item(color_code)
    if result is None:
        raise UnknownColor(color_code)
    return result
