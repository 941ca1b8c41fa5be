"""In-progress order selection kept by the storefront.

The cart only ever holds a guess about stock: the last inventory snapshot it
was given. The order transaction re-checks everything when the order is
submitted, so nothing here is authoritative.
"""

import random
from typing import Dict, Iterable, List, Mapping, Optional


def random_fill(quota: int, stock: Mapping[str, int], rng: Optional[random.Random] = None) -> Dict[str, int]:
    """Suggest a selection of ``quota`` cups, one of each color first.

    ``stock`` maps color code to the known units in stock. When fewer than
    ``quota`` units exist in total the suggestion comes up short.
    """
    rng = rng or random.Random()
    available = [code for code, units in stock.items() if units > 0]
    rng.shuffle(available)

    picked: Dict[str, int] = {}
    remaining = quota
    for code in available:
        if remaining <= 0:
            break
        picked[code] = 1
        remaining -= 1

    if remaining > 0:
        for code in available:
            if remaining <= 0:
                break
            headroom = stock[code] - picked.get(code, 0)
            extra = min(remaining, headroom)
            if extra > 0:
                picked[code] = picked.get(code, 0) + extra
                remaining -= extra
    return picked


class Cart:
    def __init__(self, inventory: Iterable[Mapping] = (), rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self.pack_size: Optional[int] = None
        self.items: Dict[str, int] = {}
        self.stock: Dict[str, int] = {}
        self.update_inventory(inventory)

    def update_inventory(self, inventory: Iterable[Mapping]) -> None:
        """Replace the known stock; the current selection is left alone."""
        self.stock = {item["colorCode"]: int(item["stock"]) for item in inventory}

    def select_pack(self, size: int) -> None:
        self.pack_size = size
        self.items = random_fill(size, self.stock, self.rng)

    @property
    def quota(self) -> int:
        return self.pack_size or 0

    @property
    def selected_count(self) -> int:
        return sum(self.items.values())

    @property
    def selected_list(self) -> List[str]:
        return [code for code, qty in self.items.items() for _ in range(qty)]

    @property
    def can_submit(self) -> bool:
        return self.pack_size is not None and self.selected_count == self.quota

    def quantity(self, color_code: str) -> int:
        return self.items.get(color_code, 0)

    def add_color(self, color_code: str) -> bool:
        if self.pack_size is None or self.selected_count >= self.quota:
            return False
        if self.quantity(color_code) >= self.stock.get(color_code, 0):
            return False
        self.items[color_code] = self.quantity(color_code) + 1
        return True

    def remove_color(self, color_code: str) -> bool:
        qty = self.quantity(color_code)
        if qty == 0:
            return False
        if qty == 1:
            del self.items[color_code]
        else:
            self.items[color_code] = qty - 1
        return True

    def order_items(self) -> List[Dict[str, int]]:
        return [{"colorCode": code, "qty": qty} for code, qty in self.items.items()]
