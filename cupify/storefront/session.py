import logging
import random
from typing import Any, Dict, List, Optional

from ..common.config import settings
from ..common.errors import ValidationError
from .cart import Cart
from .client import OrderRejected
from .polling import ActivityTicker, RepeatingTask

_logger = logging.getLogger(__name__)

DEFAULT_PACK_SIZE = 3


class CheckoutSession:
    """One shopper's visit: a cart kept fresh by the inventory poll.

    Both refresh loops belong to the session and stop when it closes.
    """

    def __init__(
        self,
        client,
        lang: str = "ar",
        rng: Optional[random.Random] = None,
        poll_interval: Optional[float] = None,
        activity_interval: Optional[float] = None,
    ) -> None:
        self.client = client
        self.lang = lang
        self.cart = Cart(rng=rng)
        self.packs: List[Dict[str, Any]] = []
        self.store: Dict[str, Any] = {}
        self.ticker = ActivityTicker(lambda: self.client.get_activity(self.lang))
        self.inventory_poll = RepeatingTask(
            self.refresh_inventory,
            poll_interval or settings.INVENTORY_POLL_SECONDS,
            name="inventory-poll",
        )
        self.activity_loop = RepeatingTask(
            self.ticker.advance,
            activity_interval or settings.ACTIVITY_ROTATE_SECONDS,
            name="activity-ticker",
            run_immediately=True,
        )

    async def load(self, pack_size: int = DEFAULT_PACK_SIZE) -> None:
        self.store = await self.client.get_public_settings()
        self.packs = await self.client.get_packs()
        self.cart.update_inventory(await self.client.get_inventory())
        self.cart.select_pack(pack_size)

    async def refresh_inventory(self) -> None:
        self.cart.update_inventory(await self.client.get_inventory())

    def start(self) -> None:
        self.inventory_poll.start()
        self.activity_loop.start()

    async def close(self) -> None:
        await self.inventory_poll.stop()
        await self.activity_loop.stop()

    async def __aenter__(self) -> "CheckoutSession":
        self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def submit(self, customer: Dict[str, Any], agreed: bool) -> Dict[str, Any]:
        """Send the cart as an order.

        Incomplete details raise ``ValidationError`` before any request. If
        the server rejects the order the inventory is re-fetched so the
        shopper can adjust, then the rejection is re-raised.
        """
        if not customer.get("name") or not customer.get("mobile") or not agreed:
            raise ValidationError("Please fill in your name and mobile and accept the terms")
        if not self.cart.can_submit:
            raise ValidationError(f"Pick exactly {self.cart.quota} cups")
        try:
            return await self.client.create_order(
                self.lang, self.cart.pack_size, self.cart.order_items(), customer
            )
        except OrderRejected as e:
            _logger.info("Order rejected, resyncing inventory | code=%s", e.code)
            await self.refresh_inventory()
            raise
