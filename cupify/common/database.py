import logging
from typing import Optional

import sqlalchemy as sa
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .config import settings
from .db import Base
from ..inventory.model import InventoryItem
from ..media.model import ImageAsset  # noqa: F401  (registers table)
from ..orders.model import Order, OrderLine  # noqa: F401
from ..store.defaults import DEFAULT_COLORS, DEFAULT_PACKS, DEFAULT_STORE_SETTINGS
from ..store.model import PackConfig, Setting

_logger = logging.getLogger(__name__)

# Async SQLAlchemy engine and session factory, bound by configure_engine()
engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[async_sessionmaker] = None


def _enable_sqlite_write_transactions(async_engine: AsyncEngine) -> None:
    # Take the database write lock at BEGIN so concurrent checkouts serialize
    # instead of failing when they upgrade from a read lock.
    @event.listens_for(async_engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(async_engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def configure_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> AsyncEngine:
    global engine, AsyncSessionLocal
    db_url = url or settings.DB_URL
    engine = create_async_engine(db_url, future=True, echo=settings.DB_ECHO if echo is None else echo)
    if engine.dialect.name == "sqlite":
        _enable_sqlite_write_transactions(engine)
    AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    _logger.info("Database engine configured | dialect=%s", engine.dialect.name)
    return engine


def get_session() -> AsyncSession:
    if AsyncSessionLocal is None:
        configure_engine()
    return AsyncSessionLocal()


async def dispose_engine() -> None:
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    AsyncSessionLocal = None


async def init_db(seed: bool = True) -> None:
    if engine is None:
        configure_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    if seed:
        await seed_defaults()


async def seed_defaults() -> None:
    """Seed settings, colors and packs, each only when its table is empty."""
    async with get_session() as session:
        async with session.begin():
            count = await session.scalar(sa.select(sa.func.count()).select_from(Setting))
            if not count:
                session.add_all(Setting(key=k, value=v) for k, v in DEFAULT_STORE_SETTINGS.items())
                _logger.info("Admin settings seeded.")

            count = await session.scalar(sa.select(sa.func.count()).select_from(InventoryItem))
            if not count:
                session.add_all(
                    InventoryItem(
                        color_code=c["colorCode"],
                        name_ar=c["nameAr"],
                        name_en=c["nameEn"],
                        hex=c["hex"],
                        sort_order=c["sortOrder"],
                        stock=c["stock"],
                    )
                    for c in DEFAULT_COLORS
                )
                _logger.info("Inventory seeded.")

            count = await session.scalar(sa.select(sa.func.count()).select_from(PackConfig))
            if not count:
                session.add_all(
                    PackConfig(
                        size=p["size"],
                        title_ar=p["titleAr"],
                        title_en=p["titleEn"],
                        desc_ar=p["descAr"],
                        desc_en=p["descEn"],
                        badge=p["badge"],
                        sort_order=p["sortOrder"],
                    )
                    for p in DEFAULT_PACKS
                )
                _logger.info("Pack configs seeded.")
