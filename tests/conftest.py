"""Shared fixtures: a throwaway SQLite database per test and an in-memory Redis."""

from typing import Dict

import pytest
from fakeredis import aioredis as fake_aioredis

from cupify.common import database
from cupify.common.redis_client import use_redis
from cupify.inventory.model import InventoryItem
from cupify.media.storage import LocalObjectStorage, use_storage
from cupify.store.defaults import DEFAULT_PACKS
from cupify.store.model import PackConfig


@pytest.fixture(autouse=True)
def fake_redis():
    client = fake_aioredis.FakeRedis(decode_responses=True)
    use_redis(client)
    yield client
    use_redis(None)


@pytest.fixture
async def db(tmp_path):
    database.configure_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    await database.init_db(seed=False)
    yield database
    await database.dispose_engine()


@pytest.fixture
def storage(tmp_path):
    store = LocalObjectStorage(str(tmp_path / "objects"))
    use_storage(store)
    yield store
    use_storage(None)


@pytest.fixture
def stock_colors(db):
    """Insert colors as ``{code: stock}``; sort order follows insertion."""

    async def _add(stock: Dict[str, int]) -> None:
        async with database.get_session() as session:
            async with session.begin():
                for position, (code, units) in enumerate(stock.items()):
                    session.add(
                        InventoryItem(
                            color_code=code,
                            name_ar=f"{code.lower()}-ar",
                            name_en=code.title(),
                            hex="#123456",
                            sort_order=position,
                            stock=units,
                        )
                    )

    return _add


@pytest.fixture
async def packs(db):
    async with database.get_session() as session:
        async with session.begin():
            for p in DEFAULT_PACKS:
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


async def stock_of(code: str) -> int:
    async with database.get_session() as session:
        item = await session.get(InventoryItem, code)
        return item.stock


@pytest.fixture
def read_stock():
    return stock_of


@pytest.fixture
def app(db):
    from cupify.app import create_app

    return create_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
async def admin_headers(client):
    response = await client.post("/admin/login", json={"username": "admin", "password": "qwe-12345"})
    token = (await response.get_json())["token"]
    return {"Authorization": f"Bearer {token}"}


def order_payload(items, pack_size=None, language="en", **customer):
    details = {"name": "Sara Ali", "mobile": "0501234567", "city": "Dubai", "address": "Marina", "preferredTime": "Evening"}
    details.update(customer)
    return {
        "language": language,
        "packSize": pack_size if pack_size is not None else sum(qty for _, qty in items),
        "items": [{"colorCode": code, "qty": qty} for code, qty in items],
        "customer": details,
    }


@pytest.fixture
def make_order():
    return order_payload
