import logging
from typing import Any, Dict, List

import sqlalchemy as sa

from ..common import database
from ..common.errors import NotFound, ValidationError
from .model import ImageAsset

_logger = logging.getLogger(__name__)


async def list_images() -> List[Dict[str, Any]]:
    async with database.get_session() as session:
        res = await session.execute(
            sa.select(ImageAsset).order_by(ImageAsset.category, ImageAsset.ref_key, ImageAsset.sort_order)
        )
        return [asset.to_dict() for asset in res.scalars().all()]


async def save_image(data: Dict[str, Any]) -> Dict[str, Any]:
    """Insert or replace the image in a (category, ref_key, sort_order) slot."""
    category = data.get("category")
    ref_key = data.get("ref_key")
    image_url = data.get("image_url")
    if not category or not ref_key or not image_url:
        raise ValidationError("Missing required fields")
    sort_order = data.get("sort_order") or 0
    if isinstance(sort_order, bool) or not isinstance(sort_order, int) or sort_order < 0:
        raise ValidationError("sort_order must be a non-negative integer")

    async with database.get_session() as session:
        async with session.begin():
            res = await session.execute(
                sa.select(ImageAsset).where(
                    ImageAsset.category == category,
                    ImageAsset.ref_key == ref_key,
                    ImageAsset.sort_order == sort_order,
                )
            )
            asset = res.scalar_one_or_none()
            if asset is None:
                asset = ImageAsset(category=category, ref_key=ref_key, image_url=image_url, sort_order=sort_order)
                session.add(asset)
            else:
                asset.image_url = image_url
            await session.flush()
            result = asset.to_dict()
    _logger.info("Image saved | category=%s ref_key=%s sort_order=%s", category, ref_key, sort_order)
    return result


async def delete_image(image_id: str) -> None:
    async with database.get_session() as session:
        async with session.begin():
            res = await session.execute(sa.delete(ImageAsset).where(ImageAsset.id == image_id))
            if (res.rowcount or 0) == 0:
                raise NotFound("Image not found")
    _logger.info("Image deleted | id=%s", image_id)
