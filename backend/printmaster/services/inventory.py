import logging
from typing import Any, Dict, List
from uuid import uuid4

from printmaster.errors import NotFound, ValidationError
from printmaster.models.catalog import Expense, Product, StockCategory, StockItem
from printmaster.state import AppState

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid4().hex[:9]


def low_stock_items(stock: Dict[str, StockItem]) -> List[StockItem]:
    """Recomputed from the current collection on every call."""
    return [item for item in stock.values() if item.is_low]


def total_expenses(expenses: List[Expense]) -> float:
    return sum((e.amount for e in expenses), 0.0)


class Inventory:
    """Raw-material stock, expenses and the product in-stock flag."""

    def __init__(self, state: AppState):
        self.state = state

    def _get_stock(self, item_id: str) -> StockItem:
        item = self.state.stock.get(item_id)
        if item is None:
            raise NotFound("stock item", item_id)
        return item

    def add_stock(self, data: Dict[str, Any]) -> StockItem:
        if not (data.get("name") or "").strip():
            raise ValidationError("Stock item name is required")
        item = StockItem(id=_new_id(), **data)
        # newest first
        self.state.stock = {item.id: item, **self.state.stock}
        logger.info("Stock item added id=%s name=%s qty=%s", item.id, item.name, item.quantity)
        return item

    def update_stock(self, item_id: str, updates: Dict[str, Any]) -> StockItem:
        item = self._get_stock(item_id)
        updated = StockItem(**{**item.model_dump(), **updates, "id": item.id})
        self.state.stock[item_id] = updated
        return updated

    def adjust_stock(self, item_id: str, delta: int) -> StockItem:
        item = self._get_stock(item_id)
        updated = item.model_copy(update={"quantity": max(0, item.quantity + delta)})
        self.state.stock[item_id] = updated
        logger.info("Stock adjusted id=%s %s -> %s", item_id, item.quantity, updated.quantity)
        return updated

    def delete_stock(self, item_id: str) -> None:
        self._get_stock(item_id)
        del self.state.stock[item_id]
        logger.info("Stock item deleted id=%s", item_id)

    def deduct_paper(self) -> List[str]:
        """Take one unit off every Paper item, clamped at zero.

        A deliberately crude consumption proxy run once per placed order, not
        per-sheet accounting.
        """
        touched = []
        for item_id, item in self.state.stock.items():
            if item.category == StockCategory.PAPER:
                self.state.stock[item_id] = item.model_copy(update={"quantity": max(0, item.quantity - 1)})
                touched.append(item_id)
        logger.debug("Paper stock deducted ids=%s", touched)
        return touched

    def low_stock(self) -> List[StockItem]:
        return low_stock_items(self.state.stock)

    def add_expense(self, data: Dict[str, Any]) -> Expense:
        if not (data.get("title") or "").strip():
            raise ValidationError("Expense title is required")
        expense = Expense(id=_new_id(), **data)
        self.state.expenses.insert(0, expense)
        logger.info("Expense recorded id=%s amount=%s", expense.id, expense.amount)
        return expense

    def toggle_product_stock(self, product_id: str) -> Product:
        product = self.state.products.get(product_id)
        if product is None:
            raise NotFound("product", product_id)
        updated = product.model_copy(update={"in_stock": not product.in_stock})
        self.state.products[product_id] = updated
        return updated
