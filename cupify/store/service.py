import copy
import logging
from typing import Any, Dict, List, Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from ..common import database
from ..common.errors import NotFound, ValidationError
from .defaults import DEFAULT_PACK_PRICES, DEFAULT_STORE_SETTINGS
from .model import PackConfig, Setting

_logger = logging.getLogger(__name__)

PUBLIC_SETTING_KEYS = tuple(DEFAULT_STORE_SETTINGS)

PACK_TEXT_FIELDS = {
    "titleAr": "title_ar",
    "titleEn": "title_en",
    "descAr": "desc_ar",
    "descEn": "desc_en",
    "badge": "badge",
}


def merge_settings(persisted: Dict[str, Any]) -> Dict[str, Any]:
    """Lay persisted settings over the defaults; pack prices merge per size."""
    merged = copy.deepcopy(DEFAULT_STORE_SETTINGS)
    for key, value in persisted.items():
        if key == "pack_prices" and isinstance(value, dict):
            prices = dict(DEFAULT_PACK_PRICES)
            prices.update({str(k): v for k, v in value.items()})
            merged[key] = prices
        else:
            merged[key] = value
    return merged


def is_store_active(value: Any) -> bool:
    # Older rows stored the flag as the JSON string "false".
    if isinstance(value, str):
        return value.strip().lower() not in {"false", "0", "no", "off"}
    return bool(value)


def resolve_pack_price(pack_prices: Dict[str, Any], pack_size: int) -> Optional[int]:
    price = pack_prices.get(str(pack_size))
    if price is None:
        price = DEFAULT_PACK_PRICES.get(str(pack_size))
    return int(price) if price is not None else None


async def read_settings(session: AsyncSession, keys: Optional[List[str]] = None) -> Dict[str, Any]:
    stmt = sa.select(Setting.key, Setting.value)
    if keys:
        stmt = stmt.where(Setting.key.in_(keys))
    res = await session.execute(stmt)
    return merge_settings({row.key: row.value for row in res})


async def get_settings() -> Dict[str, Any]:
    async with database.get_session() as session:
        return await read_settings(session)


async def get_public_settings() -> Dict[str, Any]:
    merged = await get_settings()
    return {key: merged[key] for key in PUBLIC_SETTING_KEYS}


def _validate_setting(key: str, value: Any) -> Any:
    if key == "pack_prices":
        if not isinstance(value, dict):
            raise ValidationError("pack_prices must be an object of size -> price")
        cleaned = {}
        for size, price in value.items():
            try:
                pack_size = int(size)
            except ValueError:
                raise ValidationError(f"Invalid pack size: {size}") from None
            if pack_size <= 0:
                raise ValidationError(f"Invalid pack size: {size}")
            if isinstance(price, bool) or not isinstance(price, int) or price < 0:
                raise ValidationError(f"Invalid price for pack {size}")
            cleaned[str(pack_size)] = price
        return cleaned
    if key in ("delivery_fee", "min_order"):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(f"{key} must be a non-negative integer")
        return value
    if key == "whatsapp_number":
        if not isinstance(value, str):
            raise ValidationError("whatsapp_number must be a string")
        digits = "".join(ch for ch in value if ch.isdigit())
        if not digits:
            raise ValidationError("whatsapp_number must contain digits")
        return digits
    if key == "store_active":
        if not isinstance(value, bool):
            raise ValidationError("store_active must be a boolean")
        return value
    raise ValidationError(f"Unknown setting: {key}")


async def update_settings(changes: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(changes, dict) or not changes:
        raise ValidationError("No settings to update")
    cleaned = {key: _validate_setting(key, value) for key, value in changes.items()}
    async with database.get_session() as session:
        async with session.begin():
            for key, value in cleaned.items():
                row = await session.get(Setting, key)
                if row is None:
                    session.add(Setting(key=key, value=value))
                else:
                    row.value = value
        _logger.info("Settings updated | keys=%s", sorted(cleaned))
        return await read_settings(session)


async def list_packs() -> List[Dict[str, Any]]:
    async with database.get_session() as session:
        config = await read_settings(session, ["pack_prices"])
        res = await session.execute(sa.select(PackConfig).order_by(PackConfig.sort_order, PackConfig.size))
        return [
            pack.to_dict(price=resolve_pack_price(config["pack_prices"], pack.size))
            for pack in res.scalars().all()
        ]


async def update_pack(size: int, fields: Dict[str, Any]) -> Dict[str, Any]:
    values = {PACK_TEXT_FIELDS[k]: v for k, v in (fields or {}).items() if k in PACK_TEXT_FIELDS}
    if not values:
        raise ValidationError("No fields to update")
    for column, value in values.items():
        if not isinstance(value, str):
            raise ValidationError(f"{column} must be a string")
    async with database.get_session() as session:
        async with session.begin():
            pack = await session.get(PackConfig, size)
            if pack is None:
                raise NotFound(f"Pack {size} not found")
            for column, value in values.items():
                setattr(pack, column, value)
        config = await read_settings(session, ["pack_prices"])
        _logger.info("Pack updated | size=%s fields=%s", size, sorted(values))
        return pack.to_dict(price=resolve_pack_price(config["pack_prices"], pack.size))
