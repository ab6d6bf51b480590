import asyncio
from datetime import datetime, timezone

import pydantic
import pytest

from conftest import manual_line
from printmaster.errors import NotFound, ValidationError
from printmaster.models.catalog import StockCategory
from printmaster.models.order import (
    Customer,
    OrderStatus,
    OrderUpdate,
    PaymentMethod,
    PaymentStatus,
)
from printmaster.services.cart import line_from_product
from printmaster.services.orders import OrderManager

NOW = datetime(2026, 10, 15, 6, 30, tzinfo=timezone.utc)
ASHA = Customer(name="Asha", phone="9876500001")


@pytest.fixture
def manager(state):
    return OrderManager(state, now=lambda: NOW)


def paper_levels(state):
    return {k: s.quantity for k, s in state.stock.items() if s.category == StockCategory.PAPER}


def assert_money_consistent(order):
    assert order.total == order.subtotal + order.urgent_fee
    assert order.profit == order.total - order.cost_total


def test_place_order_prices_and_deducts_paper(manager, state):
    before = paper_levels(state)
    ink_before = state.stock["s6"].quantity
    lines = [line_from_product(state.products["pf-bee"]), manual_line(140, cost=25, key="custom-1")]

    order = manager.place_order(ASHA, lines, urgent=True)

    assert order.status == OrderStatus.RECEIVED
    assert order.payment_status == PaymentStatus.PENDING
    assert order.payment_method == PaymentMethod.UPI
    assert order.created_at == NOW
    assert (order.subtotal, order.urgent_fee, order.total) == (290, 50, 340)
    assert order.cost_total == 105
    assert order.profit == 235
    assert_money_consistent(order)
    assert state.orders[order.id] is order
    assert paper_levels(state) == {k: v - 1 for k, v in before.items()}
    assert state.stock["s6"].quantity == ink_before


def test_paper_deduction_clamps_at_zero(manager, state):
    state.stock["s3"] = state.stock["s3"].model_copy(update={"quantity": 0})
    manager.place_order(ASHA, [manual_line(10)])
    assert state.stock["s3"].quantity == 0


def test_empty_order_rejected_without_side_effects(manager, state):
    before = paper_levels(state)
    with pytest.raises(ValidationError):
        manager.place_order(ASHA, [])
    assert state.orders == {}
    assert paper_levels(state) == before


def test_missing_customer_name_rejected(manager, state):
    with pytest.raises(ValidationError):
        manager.place_order(Customer(name="  "), [manual_line(10)])
    assert state.orders == {}


def test_staff_order_defaults_to_cash(manager):
    order = manager.create_staff_order(ASHA, [manual_line(100)])
    assert order.payment_method == PaymentMethod.CASH


def test_order_items_are_a_snapshot(manager, state):
    state.cart.add_product(state.products["pf-bee"])
    order = manager.place_order(ASHA, state.cart.lines)
    state.cart.update_quantity("pf-bee", 3)
    assert order.items[0].quantity == 1
    assert order.total == 150


def test_ids_are_unique(manager):
    ids = {manager.place_order(ASHA, [manual_line(10)]).id for _ in range(50)}
    assert len(ids) == 50


def test_update_items_recomputes_totals(manager):
    order = manager.place_order(ASHA, [manual_line(100, cost=40)])
    updated = manager.update_order(order.id, OrderUpdate(items=[manual_line(60, quantity=3, cost=20)], urgent=True))
    assert (updated.subtotal, updated.urgent_fee, updated.total) == (180, 50, 230)
    assert updated.cost_total == 60
    assert updated.profit == 170
    assert_money_consistent(updated)


def test_update_urgency_alone_recomputes(manager):
    order = manager.place_order(ASHA, [manual_line(100)], urgent=True)
    updated = manager.update_order(order.id, OrderUpdate(urgent=False))
    assert updated.total == 100
    assert_money_consistent(updated)


def test_update_rejects_direct_totals():
    with pytest.raises(pydantic.ValidationError):
        OrderUpdate(total=1)


def test_update_to_empty_items_rejected(manager):
    order = manager.place_order(ASHA, [manual_line(100)])
    with pytest.raises(ValidationError):
        manager.update_order(order.id, OrderUpdate(items=[]))
    assert manager.get(order.id).total == 100


def test_unknown_id_raises_not_found(manager):
    with pytest.raises(NotFound):
        manager.update_order("ORD-NOPE", OrderUpdate(urgent=True))
    with pytest.raises(NotFound):
        manager.record_payment("ORD-NOPE", PaymentStatus.PAID, 1, 0)
    with pytest.raises(NotFound):
        manager.delete_order("ORD-NOPE", lambda o: True)


def test_status_flow_and_cancel(manager):
    order = manager.place_order(ASHA, [manual_line(100)])
    assert manager.advance_status(order.id).status == OrderStatus.PRINTING
    assert manager.advance_status(order.id).status == OrderStatus.DELIVERED
    with pytest.raises(ValidationError):
        manager.advance_status(order.id)
    with pytest.raises(ValidationError):
        manager.cancel_order(order.id)

    other = manager.place_order(ASHA, [manual_line(100)])
    assert manager.cancel_order(other.id).status == OrderStatus.CANCELLED


def test_paid_in_cash_completes_order(manager):
    order = manager.place_order(ASHA, [manual_line(100)])
    paid = manager.record_payment(order.id, PaymentStatus.PAID, cash=100, online=0)
    assert paid.payment_method == PaymentMethod.CASH
    assert paid.status == OrderStatus.DELIVERED
    assert paid.payment_split.cash == 100


def test_split_payment(manager):
    order = manager.place_order(ASHA, [manual_line(100)])
    paid = manager.record_payment(order.id, PaymentStatus.PAID, cash=60, online=40)
    assert paid.payment_method == PaymentMethod.SPLIT
    assert paid.payment_split.model_dump() == {"cash": 60, "online": 40}


def test_online_payment(manager):
    order = manager.place_order(ASHA, [manual_line(100)])
    paid = manager.record_payment(order.id, PaymentStatus.PAID, cash=0, online=100)
    assert paid.payment_method == PaymentMethod.ONLINE


def test_payment_revert_keeps_status(manager):
    order = manager.place_order(ASHA, [manual_line(100)])
    manager.record_payment(order.id, PaymentStatus.PAID, cash=100)
    reverted = manager.record_payment(order.id, PaymentStatus.PENDING)
    assert reverted.payment_status == PaymentStatus.PENDING
    assert reverted.status == OrderStatus.DELIVERED


def test_partial_then_paid(manager):
    order = manager.place_order(ASHA, [manual_line(100)])
    partial = manager.record_payment(order.id, PaymentStatus.PARTIAL, cash=30)
    assert partial.payment_status == PaymentStatus.PARTIAL
    assert partial.status == OrderStatus.RECEIVED
    with pytest.raises(ValidationError):
        manager.record_payment(order.id, PaymentStatus.PAID, cash=-1)
    assert manager.record_payment(order.id, PaymentStatus.PAID, cash=100).status == OrderStatus.DELIVERED
    with pytest.raises(ValidationError):
        manager.record_payment(order.id, PaymentStatus.PARTIAL, cash=10)


def test_prepaid_order_can_still_print(manager):
    order = manager.place_order(ASHA, [manual_line(100)])
    manager.update_order(order.id, OrderUpdate(payment_status=PaymentStatus.PAID))
    assert manager.advance_status(order.id).status == OrderStatus.PRINTING
    assert manager.get(order.id).payment_status == PaymentStatus.PAID


def test_delete_requires_confirmation(manager, state):
    order = manager.place_order(ASHA, [manual_line(100)])
    assert manager.delete_order(order.id, lambda o: False) is False
    assert order.id in state.orders
    assert manager.delete_order(order.id, lambda o: o.id == order.id) is True
    assert order.id not in state.orders


def test_checkout_places_order_and_clears_cart(manager, state):
    state.cart.add_product(state.products["pf-bee"])
    result = asyncio.run(manager.checkout(ASHA, urgent=True, delay=0))
    assert result.ok
    assert result.order.total == 200
    assert result.order.payment_method == PaymentMethod.UPI
    assert len(state.cart) == 0


def test_checkout_with_empty_cart_rejected(manager, state):
    before = paper_levels(state)
    with pytest.raises(ValidationError):
        asyncio.run(manager.checkout(ASHA, delay=0))
    assert state.orders == {}
    assert paper_levels(state) == before


def test_checkout_requires_phone(manager, state):
    state.cart.add_product(state.products["pf-bee"])
    with pytest.raises(ValidationError):
        asyncio.run(manager.checkout(Customer(name="Asha"), delay=0))
    assert len(state.cart) == 1


def test_checkout_discarded_when_cart_changes_midway(manager, state):
    state.cart.add_product(state.products["pf-bee"])

    async def scenario():
        task = asyncio.create_task(manager.checkout(ASHA, delay=0.05))
        await asyncio.sleep(0)
        state.cart.add_product(state.products["st-pen-blue"])
        return await task

    result = asyncio.run(scenario())
    assert not result.ok and result.stale
    assert state.orders == {}
    assert len(state.cart) == 2
