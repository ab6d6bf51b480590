import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional
from uuid import uuid4

from printmaster import config
from printmaster.errors import NotFound, ValidationError
from printmaster.models.line import Line
from printmaster.models.order import (
    Customer,
    Order,
    OrderStatus,
    OrderUpdate,
    PaymentMethod,
    PaymentSplit,
    PaymentStatus,
)
from printmaster.services.inventory import Inventory
from printmaster.state import AppState

logger = logging.getLogger(__name__)

STATUS_FLOW = {
    OrderStatus.RECEIVED: OrderStatus.PRINTING,
    OrderStatus.PRINTING: OrderStatus.DELIVERED,
}

PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PENDING, PaymentStatus.PARTIAL, PaymentStatus.PAID},
    PaymentStatus.PARTIAL: {PaymentStatus.PENDING, PaymentStatus.PARTIAL, PaymentStatus.PAID},
    PaymentStatus.PAID: {PaymentStatus.PENDING, PaymentStatus.PAID},
}


@dataclass
class CheckoutResult:
    ok: bool
    order: Optional[Order] = None
    error: Optional[str] = None
    # True when the cart changed or another checkout started during the wait
    stale: bool = False


def payment_method_for(cash: float, online: float) -> PaymentMethod:
    if cash > 0 and online > 0:
        return PaymentMethod.SPLIT
    if online > 0:
        return PaymentMethod.ONLINE
    return PaymentMethod.CASH


class OrderManager:
    """Creates orders and moves them through the status and payment axes.

    Orders live in a map keyed by id: every operation on an unknown id raises
    NotFound. Placing an order deducts paper stock as a side effect.
    """

    def __init__(self, state: AppState, now: Callable[[], datetime] = None):
        self.state = state
        self._now = now or (lambda: datetime.now(timezone.utc))

    def _new_id(self) -> str:
        while True:
            order_id = f"ORD-{uuid4().hex[:8].upper()}"
            if order_id not in self.state.orders:
                return order_id

    def get(self, order_id: str) -> Order:
        order = self.state.orders.get(order_id)
        if order is None:
            raise NotFound("order", order_id)
        return order

    def _save(self, order: Order) -> Order:
        self.state.orders[order.id] = order
        return order

    def place_order(
        self,
        customer: Customer,
        lines: Iterable[Line],
        urgent: bool = False,
        payment_method: PaymentMethod = PaymentMethod.UPI,
    ) -> Order:
        lines = [line.model_copy(deep=True) for line in lines]
        if not (customer.name or "").strip():
            raise ValidationError("Customer name is required")
        if not lines:
            raise ValidationError("Cannot place an order with no items")

        order = Order(
            id=self._new_id(),
            customer_name=customer.name.strip(),
            customer_phone=customer.phone or "",
            items=lines,
            urgent=urgent,
            status=OrderStatus.RECEIVED,
            created_at=self._now(),
            payment_status=PaymentStatus.PENDING,
            payment_method=payment_method,
        )
        self._save(order)
        Inventory(self.state).deduct_paper()
        logger.info("Order placed id=%s items=%s total=%s urgent=%s",
                    order.id, len(order.items), order.total, urgent)
        return order

    def create_staff_order(self, customer: Customer, lines: Iterable[Line], urgent: bool = False) -> Order:
        return self.place_order(customer, lines, urgent, payment_method=PaymentMethod.CASH)

    async def checkout(self, customer: Customer, urgent: bool = False,
                       delay: float = None) -> CheckoutResult:
        """Self-service checkout of the session cart.

        Validation failures raise before anything happens. After the placement
        delay the order is created only if neither the cart nor another
        checkout moved on in the meantime; otherwise the cart is left untouched.
        """
        cart = self.state.cart
        if not (customer.name or "").strip() or not (customer.phone or "").strip():
            raise ValidationError("Name and phone are required to place an order")
        if len(cart) == 0:
            raise ValidationError("Cart is empty")

        self.state.checkout_generation += 1
        token = self.state.checkout_generation
        cart_version = cart.version

        await asyncio.sleep(config.CHECKOUT_DELAY_SECONDS if delay is None else delay)

        if token != self.state.checkout_generation or cart_version != cart.version:
            logger.warning("Discarding stale checkout token=%s current=%s", token, self.state.checkout_generation)
            return CheckoutResult(ok=False, error="Cart changed while the order was being placed", stale=True)

        order = self.place_order(customer, cart.lines, urgent, payment_method=PaymentMethod.UPI)
        cart.clear()
        return CheckoutResult(ok=True, order=order)

    def update_order(self, order_id: str, update: OrderUpdate) -> Order:
        order = self.get(order_id)
        changes = {key: getattr(update, key) for key in update.model_fields_set}
        if "items" in changes:
            if not update.items:
                raise ValidationError("An order needs at least one item")
            changes["items"] = [line.model_copy(deep=True) for line in update.items]
        if "customer_name" in changes and not (update.customer_name or "").strip():
            raise ValidationError("Customer name is required")
        # explicit nulls only make sense for the optional split
        for key in ("customer_phone", "urgent", "status", "payment_status", "payment_method"):
            if key in changes and changes[key] is None:
                del changes[key]

        updated = order.model_copy(update=changes)
        logger.info("Order updated id=%s fields=%s total=%s", order_id, sorted(changes), updated.total)
        return self._save(updated)

    def advance_status(self, order_id: str) -> Order:
        order = self.get(order_id)
        nxt = STATUS_FLOW.get(order.status)
        if nxt is None:
            raise ValidationError(f"Order {order.short_id} is already {order.status.value}")
        logger.info("Order status id=%s %s -> %s", order_id, order.status.value, nxt.value)
        return self._save(order.model_copy(update={"status": nxt}))

    def cancel_order(self, order_id: str) -> Order:
        order = self.get(order_id)
        if order.status.is_terminal:
            raise ValidationError(f"Order {order.short_id} is already {order.status.value}")
        logger.info("Order cancelled id=%s", order_id)
        return self._save(order.model_copy(update={"status": OrderStatus.CANCELLED}))

    def record_payment(self, order_id: str, payment_status: PaymentStatus,
                       cash: float = 0, online: float = 0) -> Order:
        """Record collection against an order.

        Marking Paid derives the method from the cash/online split, stores the
        split and completes the order (status Delivered). Any other payment
        status leaves the order status alone.
        """
        order = self.get(order_id)
        if cash < 0 or online < 0:
            raise ValidationError("Payment amounts cannot be negative")
        if payment_status not in PAYMENT_TRANSITIONS[order.payment_status]:
            raise ValidationError(
                f"Cannot move payment from {order.payment_status.value} to {payment_status.value}")

        changes: Dict[str, object] = {"payment_status": payment_status}
        if payment_status == PaymentStatus.PAID:
            changes["payment_method"] = payment_method_for(cash, online)
            changes["payment_split"] = PaymentSplit(cash=cash, online=online)
            changes["status"] = OrderStatus.DELIVERED
        elif payment_status == PaymentStatus.PARTIAL:
            changes["payment_split"] = PaymentSplit(cash=cash, online=online)

        updated = order.model_copy(update=changes)
        logger.info("Payment recorded id=%s status=%s method=%s cash=%s online=%s",
                    order_id, payment_status.value, updated.payment_method.value, cash, online)
        return self._save(updated)

    def delete_order(self, order_id: str, confirm: Callable[[Order], bool]) -> bool:
        """Remove an order for good, only if ``confirm`` approves it."""
        order = self.get(order_id)
        if not confirm(order):
            logger.info("Order delete not confirmed id=%s", order_id)
            return False
        del self.state.orders[order_id]
        logger.info("Order deleted id=%s", order_id)
        return True

    def list_orders(self) -> List[Order]:
        return list(self.state.orders.values())
