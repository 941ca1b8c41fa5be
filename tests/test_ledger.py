import asyncio

import pytest

from cupify.common import database
from cupify.common.errors import InsufficientStock, UnknownColor, ValidationError
from cupify.inventory import ledger
from cupify.inventory.service import adjust_stock, list_inventory, reserve, set_stock, update_item


class TestSnapshot:

    async def test_ordered_by_sort_order_then_code(self, stock_colors):
        await stock_colors({"PINK": 3, "BLUE": 1})
        codes = [item["colorCode"] for item in await list_inventory()]
        assert codes == ["PINK", "BLUE"]

    async def test_item_shape(self, stock_colors):
        await stock_colors({"RED": 4})
        (item,) = await list_inventory()
        assert item["stock"] == 4
        assert item["nameEn"] == "Red"
        assert item["hex"] == "#123456"


class TestReserve:

    async def test_decrements_stock(self, stock_colors, read_stock):
        await stock_colors({"RED": 5})
        assert await reserve("RED", 2) == 3
        assert await read_stock("RED") == 3

    async def test_unknown_color(self, db):
        with pytest.raises(UnknownColor):
            await reserve("NOPE", 1)

    async def test_insufficient_leaves_stock(self, stock_colors, read_stock):
        await stock_colors({"RED": 1})
        with pytest.raises(InsufficientStock) as exc:
            await reserve("RED", 2)
        assert exc.value.color_code == "RED"
        assert await read_stock("RED") == 1

    async def test_concurrent_reserves_never_go_negative(self, stock_colors, read_stock):
        await stock_colors({"RED": 3})
        results = await asyncio.gather(*(reserve("RED", 1) for _ in range(8)), return_exceptions=True)
        successes = [r for r in results if isinstance(r, int)]
        failures = [r for r in results if isinstance(r, InsufficientStock)]
        assert len(successes) == 3
        assert len(failures) == 5
        assert await read_stock("RED") == 0

    async def test_rejects_non_positive_quantity(self, stock_colors):
        await stock_colors({"RED": 3})
        with pytest.raises(ValidationError):
            await reserve("RED", 0)


class TestReserveMany:

    async def test_all_or_nothing(self, stock_colors, read_stock):
        await stock_colors({"BLUE": 5, "RED": 1})
        with pytest.raises(InsufficientStock):
            async with database.get_session() as session:
                async with session.begin():
                    await ledger.reserve_many(session, {"BLUE": 2, "RED": 2})
        assert await read_stock("BLUE") == 5
        assert await read_stock("RED") == 1

    async def test_returns_remaining_per_color(self, stock_colors):
        await stock_colors({"BLUE": 5, "RED": 1})
        async with database.get_session() as session:
            async with session.begin():
                remaining = await ledger.reserve_many(session, {"RED": 1, "BLUE": 2})
        assert remaining == {"BLUE": 3, "RED": 0}

    async def test_insufficient_message_is_localized(self, stock_colors):
        await stock_colors({"RED": 0})
        with pytest.raises(InsufficientStock) as exc:
            async with database.get_session() as session:
                async with session.begin():
                    await ledger.reserve_many(session, {"RED": 1}, language="ar")
        assert "red-ar" in exc.value.message

    async def test_unknown_color_message_is_localized(self, stock_colors):
        await stock_colors({"RED": 3})
        with pytest.raises(UnknownColor) as exc:
            async with database.get_session() as session:
                async with session.begin():
                    await ledger.reserve_many(session, {"GHOST": 1, "RED": 1}, language="en")
        assert exc.value.message == "Color GHOST not found"
        assert not isinstance(exc.value.__context__, UnknownColor)


class TestAdminStock:

    async def test_set_stock(self, stock_colors, read_stock):
        await stock_colors({"RED": 1})
        assert await set_stock("RED", 12) == 12
        assert await read_stock("RED") == 12

    async def test_set_negative_rejected(self, stock_colors, read_stock):
        await stock_colors({"RED": 1})
        with pytest.raises(ValidationError):
            await set_stock("RED", -1)
        assert await read_stock("RED") == 1

    async def test_set_unknown_color(self, db):
        with pytest.raises(UnknownColor):
            await set_stock("NOPE", 3)

    async def test_adjust(self, stock_colors):
        await stock_colors({"RED": 4})
        assert await adjust_stock("RED", 3) == 7
        assert await adjust_stock("RED", -7) == 0

    async def test_adjust_below_zero_rejected(self, stock_colors, read_stock):
        await stock_colors({"RED": 2})
        with pytest.raises(ValidationError):
            await adjust_stock("RED", -3)
        assert await read_stock("RED") == 2

    async def test_update_item_names_and_stock(self, stock_colors):
        await stock_colors({"RED": 2})
        item = await update_item("RED", {"nameEn": "Ruby", "hex": "#AA0000", "stock": 9})
        assert item["nameEn"] == "Ruby"
        assert item["hex"] == "#AA0000"
        assert item["stock"] == 9

    @pytest.mark.parametrize("fields", [{"nameEn": "Ruby", "stock": -1}, {"nameEn": "Ruby", "delta": -5}])
    async def test_rejected_update_item_changes_nothing(self, stock_colors, fields):
        await stock_colors({"RED": 2})
        with pytest.raises(ValidationError):
            await update_item("RED", fields)
        [item] = await list_inventory()
        assert item["nameEn"] == "Red"
        assert item["stock"] == 2

    async def test_update_item_requires_fields(self, stock_colors):
        await stock_colors({"RED": 2})
        with pytest.raises(ValidationError):
            await update_item("RED", {})

    async def test_stock_change_is_published(self, stock_colors, fake_redis):
        await stock_colors({"RED": 2})
        pubsub = fake_redis.pubsub(ignore_subscribe_messages=True)
        await pubsub.subscribe("stock-updates")
        await set_stock("RED", 6)
        message = None
        for _ in range(10):
            message = await pubsub.get_message(timeout=0.1)
            if message:
                break
        await pubsub.aclose()
        assert message is not None
        assert '"colorCode": "RED"' in message["data"]
