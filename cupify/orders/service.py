import logging
import secrets
import string
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..common import database
from ..common.config import settings
from ..common.errors import InvalidTransition, NotFound, StoreClosed, ValidationError
from ..common.i18n import LANGUAGES
from ..inventory import ledger
from ..inventory.service import publish_stock
from ..store.service import is_store_active, read_settings, resolve_pack_price
from .model import ALLOWED_TRANSITIONS, Order, OrderLine, OrderStatus

_logger = logging.getLogger(__name__)

ORDER_CODE_ALPHABET = string.ascii_uppercase + string.digits
ORDER_CODE_LENGTH = 6
PREFERRED_TIMES = ("Morning", "Evening")


@dataclass
class CustomerDetails:
    name: str
    mobile: str
    city: str = ""
    address: str = ""
    preferred_time: str = "Morning"


@dataclass
class OrderRequest:
    language: str
    pack_size: int
    items: List[Dict[str, Any]]
    customer: CustomerDetails
    quantities: "OrderedDict[str, int]" = field(default_factory=OrderedDict)


def generate_order_code(token: Optional[Callable[[], str]] = None) -> str:
    body = token() if token else "".join(secrets.choice(ORDER_CODE_ALPHABET) for _ in range(ORDER_CODE_LENGTH))
    return f"{settings.ORDER_CODE_PREFIX}-{body}"


def aggregate_items(items: List[Dict[str, Any]]) -> "OrderedDict[str, int]":
    """Merge repeated colors, summing their quantities (first-seen order)."""
    totals: "OrderedDict[str, int]" = OrderedDict()
    for item in items:
        totals[item["colorCode"]] = totals.get(item["colorCode"], 0) + item["qty"]
    return totals


def _as_positive_int(value: Any, what: str) -> int:
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise ValidationError(f"{what} must be a positive integer") from None
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{what} must be a positive integer")
    return value


def parse_order_request(data: Any) -> OrderRequest:
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    language = data.get("language")
    if language not in LANGUAGES:
        raise ValidationError("language must be 'ar' or 'en'")

    pack_size = _as_positive_int(data.get("packSize"), "packSize")

    raw_items = data.get("items")
    if not isinstance(raw_items, list) or not raw_items:
        raise ValidationError("items must be a non-empty list")
    items: List[Dict[str, Any]] = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            raise ValidationError("Each item must be an object")
        color_code = raw.get("colorCode")
        if not isinstance(color_code, str) or not color_code.strip():
            raise ValidationError("Each item needs a colorCode")
        items.append({"colorCode": color_code.strip(), "qty": _as_positive_int(raw.get("qty"), "qty")})

    quantities = aggregate_items(items)
    if sum(quantities.values()) != pack_size:
        raise ValidationError(f"Selected cups must add up to the pack size ({pack_size})")

    raw_customer = data.get("customer")
    if not isinstance(raw_customer, dict):
        raise ValidationError("customer is required")
    name = str(raw_customer.get("name") or "").strip()
    mobile = str(raw_customer.get("mobile") or "").strip()
    if not name or not mobile:
        raise ValidationError("Customer name and mobile are required")
    preferred_time = raw_customer.get("preferredTime") or "Morning"
    if preferred_time not in PREFERRED_TIMES:
        raise ValidationError("preferredTime must be Morning or Evening")
    customer = CustomerDetails(
        name=name,
        mobile=mobile,
        city=str(raw_customer.get("city") or "").strip(),
        address=str(raw_customer.get("address") or "").strip(),
        preferred_time=preferred_time,
    )
    return OrderRequest(language=language, pack_size=pack_size, items=items, customer=customer, quantities=quantities)


async def _insert_order(
    session: AsyncSession,
    build: Callable[[str], Order],
    token: Optional[Callable[[], str]] = None,
) -> Order:
    """Insert the order under a fresh code, retrying on a code collision.

    Each attempt flushes inside a savepoint so a duplicate ``order_code``
    (including one committed by a concurrent checkout) only undoes that
    insert, not the stock already reserved in the enclosing transaction.
    """
    for attempt in range(1, settings.ORDER_CODE_ATTEMPTS + 1):
        order = build(generate_order_code(token))
        try:
            async with session.begin_nested():
                session.add(order)
                await session.flush()
        except IntegrityError:
            _logger.warning("Order code collision, retrying | code=%s attempt=%s", order.order_code, attempt)
            continue
        return order
    raise RuntimeError("Could not generate a unique order code")


async def place_order(request: OrderRequest, code_token: Optional[Callable[[], str]] = None) -> Dict[str, Any]:
    """Check the store is open, price the pack, reserve stock and persist.

    Runs as one transaction: any failure rolls back both the stock
    decrements and the order rows.
    """
    lang = request.language
    async with database.get_session() as session:
        async with session.begin():
            config = await read_settings(session, ["store_active", "pack_prices", "min_order"])
            if not is_store_active(config["store_active"]):
                raise StoreClosed(lang)

            total_price = resolve_pack_price(config["pack_prices"], request.pack_size)
            if total_price is None:
                raise ValidationError(f"Unknown pack size: {request.pack_size}")
            min_order = config.get("min_order") or 0
            if isinstance(min_order, int) and request.pack_size < min_order:
                raise ValidationError(f"Minimum order is {min_order} cups")

            remaining = await ledger.reserve_many(session, request.quantities, lang)

            def build(order_code: str) -> Order:
                order = Order(
                    order_code=order_code,
                    language=lang,
                    pack_size=request.pack_size,
                    total_price=total_price,
                    status=OrderStatus.CONFIRMED.value,
                    customer_name=request.customer.name,
                    customer_mobile=request.customer.mobile,
                    customer_city=request.customer.city,
                    customer_address=request.customer.address,
                    preferred_time=request.customer.preferred_time,
                )
                order.lines = [
                    OrderLine(position=i, color_code=color_code, qty=qty)
                    for i, (color_code, qty) in enumerate(request.quantities.items())
                ]
                return order

            order = await _insert_order(session, build, code_token)
            result = order.to_dict()

    _logger.info(
        "Order placed | code=%s pack=%s total=%s items=%s",
        result["orderCode"],
        request.pack_size,
        total_price,
        dict(request.quantities),
    )
    await publish_stock(remaining)
    return result


async def list_orders() -> List[Dict[str, Any]]:
    async with database.get_session() as session:
        res = await session.execute(sa.select(Order).order_by(Order.created_at.desc()))
        return [order.to_dict() for order in res.scalars().all()]


async def get_order(order_id: str) -> Optional[Dict[str, Any]]:
    async with database.get_session() as session:
        order = await session.get(Order, order_id)
        return order.to_dict() if order else None


def parse_status(value: Any) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError("Invalid status")


async def set_status(order_id: str, status: Any) -> Dict[str, Any]:
    target = parse_status(status)
    async with database.get_session() as session:
        async with session.begin():
            order = await session.get(Order, order_id)
            if order is None:
                raise NotFound("Order not found")
            current = OrderStatus(order.status)
            if (
                settings.ENFORCE_STATUS_TRANSITIONS
                and current != target
                and target not in ALLOWED_TRANSITIONS[current]
            ):
                raise InvalidTransition(current.value, target.value)
            order.status = target.value
    _logger.info("Order status updated | order_id=%s %s -> %s", order_id, current.value, target.value)
    return {"success": True, "id": order_id, "status": target.value}


async def recent_orders(limit: int) -> List[Order]:
    async with database.get_session() as session:
        res = await session.execute(sa.select(Order).order_by(Order.created_at.desc()).limit(limit))
        return list(res.scalars().all())
