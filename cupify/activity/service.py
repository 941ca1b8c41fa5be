from typing import List

import sqlalchemy as sa

from ..common import database
from ..common.config import settings
from ..common.i18n import normalize_language, translate
from ..inventory.model import InventoryItem
from ..orders.service import recent_orders


async def live_activity(lang: str) -> List[str]:
    """Recent orders first, then a couple of nearly sold-out colors."""
    lang = normalize_language(lang)
    activities: List[str] = []
    for order in await recent_orders(settings.ACTIVITY_RECENT_ORDERS):
        first_name = order.customer_name.split(" ")[0]
        activities.append(
            translate("activity_order", lang, name=first_name, city=order.customer_city, pack_size=order.pack_size)
        )

    async with database.get_session() as session:
        res = await session.execute(
            sa.select(InventoryItem)
            .where(InventoryItem.stock > 0, InventoryItem.stock < settings.LOW_STOCK_THRESHOLD)
            .order_by(InventoryItem.stock, InventoryItem.color_code)
            .limit(settings.ACTIVITY_LOW_STOCK_ITEMS)
        )
        for item in res.scalars().all():
            activities.append(translate("activity_low_stock", lang, stock=item.stock, name=item.display_name(lang)))
    return activities
