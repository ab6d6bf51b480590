import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from printmaster.models.catalog import CategoryRegistry, Expense, Product, StockItem
from printmaster.models.order import Order
from printmaster.models.session import CurrentUser
from printmaster.services.cart import Cart
from printmaster.services.configurator import PrintConfigurator
from printmaster.services.seed import seed_expenses, seed_products, seed_stock

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Everything one shop session works on, owned by a single top-level context."""

    products: Dict[str, Product] = field(default_factory=dict)
    stock: Dict[str, StockItem] = field(default_factory=dict)
    expenses: List[Expense] = field(default_factory=list)
    categories: CategoryRegistry = field(default_factory=CategoryRegistry)
    orders: Dict[str, Order] = field(default_factory=dict)
    cart: Cart = field(default_factory=Cart)
    current_user: Optional[CurrentUser] = None
    configurator: PrintConfigurator = field(default_factory=PrintConfigurator)
    checkout_generation: int = 0


def seeded_state() -> AppState:
    products = seed_products()
    return AppState(
        products={p.id: p for p in products},
        stock={s.id: s for s in seed_stock()},
        expenses=seed_expenses(),
        categories=CategoryRegistry(p.category for p in products),
    )


_state: Optional[AppState] = None


def set_state(state: AppState) -> AppState:
    global _state
    _state = state
    return state


def get_state() -> AppState:
    global _state
    if _state is None:
        logger.debug("No application state yet; seeding a fresh one")
        _state = seeded_state()
    return _state
