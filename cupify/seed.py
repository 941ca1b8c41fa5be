import asyncio
from typing import Dict

import sqlalchemy as sa

from .common import database
from .inventory.model import InventoryItem
from .store.defaults import DEFAULT_COLORS, DEFAULT_PACKS, DEFAULT_STORE_SETTINGS
from .store.model import PackConfig, Setting

PLACEHOLDER_HEX = "#888888"


async def seed_catalogue() -> Dict[str, int]:
    """Add any default color, pack or setting that is missing.

    Existing rows keep their stock and edits; colors still carrying the
    placeholder swatch get their default hex back.
    """
    await database.init_db(seed=False)
    added = {"colors": 0, "packs": 0, "settings": 0, "hex_backfilled": 0}
    async with database.get_session() as session:
        async with session.begin():
            existing = {item.color_code: item for item in (await session.execute(sa.select(InventoryItem))).scalars()}
            for c in DEFAULT_COLORS:
                item = existing.get(c["colorCode"])
                if item is None:
                    session.add(
                        InventoryItem(
                            color_code=c["colorCode"],
                            name_ar=c["nameAr"],
                            name_en=c["nameEn"],
                            hex=c["hex"],
                            sort_order=c["sortOrder"],
                            stock=c["stock"],
                        )
                    )
                    added["colors"] += 1
                elif item.hex == PLACEHOLDER_HEX:
                    item.hex = c["hex"]
                    added["hex_backfilled"] += 1

            sizes = set((await session.execute(sa.select(PackConfig.size))).scalars())
            for p in DEFAULT_PACKS:
                if p["size"] in sizes:
                    continue
                session.add(
                    PackConfig(
                        size=p["size"],
                        title_ar=p["titleAr"],
                        title_en=p["titleEn"],
                        desc_ar=p["descAr"],
                        desc_en=p["descEn"],
                        badge=p["badge"],
                        sort_order=p["sortOrder"],
                    )
                )
                added["packs"] += 1

            keys = set((await session.execute(sa.select(Setting.key))).scalars())
            for key, value in DEFAULT_STORE_SETTINGS.items():
                if key not in keys:
                    session.add(Setting(key=key, value=value))
                    added["settings"] += 1
    return added


async def amain():
    added = await seed_catalogue()
    print(
        "Seed complete. Added {colors} colors, {packs} packs, {settings} settings; "
        "backfilled {hex_backfilled} swatches.".format(**added)
    )
    await database.dispose_engine()


if __name__ == "__main__":
    asyncio.run(amain())
