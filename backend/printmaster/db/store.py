import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import pydantic
from pydantic import TypeAdapter
from sqlmodel import Session

from printmaster.db.session import create_tables, get_engine
from printmaster.errors import CorruptState
from printmaster.models.line import Line, lines_adapter
from printmaster.models.order import Order
from printmaster.models.record import StoredRecord
from printmaster.models.session import CurrentUser
from printmaster.services.cart import Cart
from printmaster.state import AppState

logger = logging.getLogger(__name__)

SESSION_KEY = "session"
CART_KEY = "cart"
ORDERS_KEY = "orders"

_user_adapter = TypeAdapter(Optional[CurrentUser])
_orders_adapter = TypeAdapter(List[Order])


class StateStore:
    """Durable key-value store holding the session, cart and order records as JSON text."""

    def __init__(self, engine=None):
        self.engine = engine if engine is not None else get_engine()
        create_tables(self.engine)

    # raw records

    def write(self, key: str, value: Any) -> None:
        text = json.dumps(value, ensure_ascii=False)
        with Session(self.engine) as session:
            record = session.get(StoredRecord, key)
            if record is None:
                record = StoredRecord(key=key, value=text)
            else:
                record.value = text
                record.updated_at = datetime.now(timezone.utc)
            session.add(record)
            session.commit()

    def read(self, key: str) -> Optional[str]:
        with Session(self.engine) as session:
            record = session.get(StoredRecord, key)
            return record.value if record is not None else None

    def delete(self, key: str) -> None:
        with Session(self.engine) as session:
            record = session.get(StoredRecord, key)
            if record is not None:
                session.delete(record)
                session.commit()

    def _restore(self, key: str, adapter: TypeAdapter, default: Callable[[], Any]) -> Any:
        text = self.read(key)
        if text is None:
            return default()
        try:
            return self._decode(key, text, adapter)
        except CorruptState as e:
            logger.warning("Resetting corrupt record key=%s: %s", key, e)
            self.delete(key)
            return default()

    @staticmethod
    def _decode(key: str, text: str, adapter: TypeAdapter) -> Any:
        try:
            return adapter.validate_json(text)
        except pydantic.ValidationError as e:
            raise CorruptState(f"record {key!r} has an unexpected shape: {e.error_count()} errors") from e

    # typed records

    def save_session(self, user: Optional[CurrentUser]) -> None:
        if user is None:
            self.delete(SESSION_KEY)
        else:
            self.write(SESSION_KEY, user.model_dump(mode="json"))

    def load_session(self) -> Optional[CurrentUser]:
        return self._restore(SESSION_KEY, _user_adapter, lambda: None)

    def save_cart(self, cart: Cart) -> None:
        self.write(CART_KEY, lines_adapter.dump_python(cart.lines, mode="json"))

    def load_cart(self) -> List[Line]:
        return self._restore(CART_KEY, lines_adapter, list)

    def save_orders(self, orders: Dict[str, Order]) -> None:
        self.write(ORDERS_KEY, _orders_adapter.dump_python(list(orders.values()), mode="json"))

    def load_orders(self) -> Dict[str, Order]:
        orders = self._restore(ORDERS_KEY, _orders_adapter, list)
        return {o.id: o for o in orders}

    def load_into(self, state: AppState) -> AppState:
        state.current_user = self.load_session()
        state.cart = Cart(self.load_cart())
        state.orders = self.load_orders()
        logger.info("Restored state: user=%s cart_lines=%s orders=%s",
                    state.current_user.name if state.current_user else None, len(state.cart), len(state.orders))
        return state

    def save_all(self, state: AppState) -> None:
        self.save_session(state.current_user)
        self.save_cart(state.cart)
        self.save_orders(state.orders)


_store: Optional[StateStore] = None


def get_store() -> StateStore:
    global _store
    if _store is None:
        _store = StateStore()
    return _store
