import logging
from typing import Iterator, List, Optional

from printmaster.errors import ValidationError
from printmaster.models.catalog import Product
from printmaster.models.line import CatalogLine, Line
from printmaster.services.pricing import OrderTotals, price_engine

logger = logging.getLogger(__name__)


def line_from_product(product: Product, quantity: int = 1) -> CatalogLine:
    return CatalogLine(
        product_id=product.id,
        name=product.name,
        category=product.category,
        unit_price=product.price,
        unit_cost=product.cost,
        quantity=quantity,
        image=product.image,
    )


class Cart:
    """Ordered collection of priced lines keyed by line identity.

    Catalog lines share the product id as key, so adding the same product twice
    bumps its quantity. Custom print and manual lines carry freshly minted keys
    and are never merged. ``version`` increases on every mutation.
    """

    def __init__(self, lines: Optional[List[Line]] = None):
        self._lines: List[Line] = []
        self.version = 0
        for line in lines or []:
            if self._find(line.key) is None:
                self._lines.append(line)

    def __iter__(self) -> Iterator[Line]:
        return iter(list(self._lines))

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> List[Line]:
        return list(self._lines)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    def get(self, key: str) -> Optional[Line]:
        idx = self._find(key)
        return self._lines[idx] if idx is not None else None

    def _find(self, key: str) -> Optional[int]:
        for idx, line in enumerate(self._lines):
            if line.key == key:
                return idx
        return None

    def _touch(self) -> None:
        self.version += 1

    def add_or_increment(self, line: Line) -> "Cart":
        idx = self._find(line.key)
        if idx is not None:
            existing = self._lines[idx]
            self._lines[idx] = existing.model_copy(update={"quantity": existing.quantity + 1})
            logger.debug("Cart line incremented key=%s qty=%s", line.key, existing.quantity + 1)
        else:
            self._lines.append(line)
            logger.debug("Cart line added key=%s qty=%s", line.key, line.quantity)
        self._touch()
        return self

    def add_product(self, product: Product) -> "Cart":
        if not product.in_stock:
            raise ValidationError(f"{product.name} is out of stock")
        return self.add_or_increment(line_from_product(product))

    def update_quantity(self, key: str, delta: int) -> "Cart":
        idx = self._find(key)
        if idx is None:
            return self
        line = self._lines[idx]
        self._lines[idx] = line.model_copy(update={"quantity": max(1, line.quantity + delta)})
        self._touch()
        return self

    def decrement(self, key: str) -> "Cart":
        """Take one unit off a line, removing the line instead of going below 1."""
        line = self.get(key)
        if line is None:
            return self
        if line.quantity <= 1:
            return self.remove(key)
        return self.update_quantity(key, -1)

    def remove(self, key: str) -> "Cart":
        idx = self._find(key)
        if idx is not None:
            del self._lines[idx]
            self._touch()
        return self

    def clear(self) -> "Cart":
        self._lines = []
        self._touch()
        return self

    def totals(self, urgent: bool = False) -> OrderTotals:
        return price_engine.totals(self._lines, urgent)
