import logging
from typing import List, Optional, Union
from uuid import uuid4

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from pydantic import BaseModel, Field

from printmaster.api.deps import get_orders
from printmaster.db.store import StateStore, get_store
from printmaster.errors import NotFound, ValidationError
from printmaster.models.line import ManualLine
from printmaster.models.order import Customer, OrderUpdate, PaymentStatus
from printmaster.services.aggregation import StatusWindow, TimeWindow, filter_orders
from printmaster.services.cart import line_from_product
from printmaster.services.messaging import build_message, whatsapp_link
from printmaster.services.notifier import OrderNotifier
from printmaster.services.orders import OrderManager
from printmaster.state import AppState, get_state

logger = logging.getLogger(__name__)
router = APIRouter()


class CheckoutRequest(BaseModel):
    name: str
    phone: str
    urgent: bool = False


class CatalogItem(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)


class ManualItem(BaseModel):
    name: str
    category: str = "Custom"
    price: float = Field(..., ge=0)
    cost: float = Field(0, ge=0)
    quantity: int = Field(1, ge=1)


class StaffOrderCreate(BaseModel):
    customer_name: str
    customer_phone: str = ""
    urgent: bool = False
    items: List[Union[CatalogItem, ManualItem]]


class PaymentRequest(BaseModel):
    payment_status: PaymentStatus
    cash: float = Field(0, ge=0)
    online: float = Field(0, ge=0)


def staff_lines(state: AppState, items: List[Union[CatalogItem, ManualItem]]):
    """Catalog picks merge by product id (quantities add up); manual items never merge."""
    lines = []
    by_product = {}
    for item in items:
        if isinstance(item, CatalogItem):
            product = state.products.get(item.product_id)
            if product is None:
                raise NotFound("product", item.product_id)
            if item.product_id in by_product:
                pos = by_product[item.product_id]
                lines[pos] = lines[pos].model_copy(update={"quantity": lines[pos].quantity + item.quantity})
            else:
                by_product[item.product_id] = len(lines)
                lines.append(line_from_product(product, item.quantity))
        else:
            lines.append(ManualLine(
                line_id=f"manual-{uuid4().hex[:12]}",
                name=item.name,
                category=item.category or "Custom",
                unit_price=item.price,
                unit_cost=item.cost,
                quantity=item.quantity,
            ))
    return lines


def _notify(background: BackgroundTasks, order) -> None:
    notifier = OrderNotifier()
    if notifier.enabled:
        background.add_task(notifier.notify, order)


@router.get("/")
def list_orders(window: TimeWindow = TimeWindow.ALL, status: str = StatusWindow.ALL.value,
                search: Optional[str] = None, state: AppState = Depends(get_state)):
    return filter_orders(state.orders.values(), window, status, search)


@router.post("/checkout", status_code=201)
async def checkout(body: CheckoutRequest, background: BackgroundTasks,
                   manager: OrderManager = Depends(get_orders), store: StateStore = Depends(get_store)):
    result = await manager.checkout(Customer(name=body.name, phone=body.phone), body.urgent)
    if not result.ok:
        raise HTTPException(status_code=409, detail=result.error)
    store.save_orders(manager.state.orders)
    store.save_cart(manager.state.cart)
    _notify(background, result.order)
    return result.order


@router.post("/", status_code=201)
def create_staff_order(body: StaffOrderCreate, background: BackgroundTasks,
                       manager: OrderManager = Depends(get_orders), store: StateStore = Depends(get_store)):
    lines = staff_lines(manager.state, body.items)
    order = manager.create_staff_order(Customer(name=body.customer_name, phone=body.customer_phone),
                                       lines, body.urgent)
    store.save_orders(manager.state.orders)
    _notify(background, order)
    return order


@router.get("/{order_id}")
def get_order(order_id: str, manager: OrderManager = Depends(get_orders)):
    return manager.get(order_id)


@router.patch("/{order_id}")
def update_order(order_id: str, body: OrderUpdate, manager: OrderManager = Depends(get_orders),
                 store: StateStore = Depends(get_store)):
    order = manager.update_order(order_id, body)
    store.save_orders(manager.state.orders)
    return order


@router.post("/{order_id}/advance")
def advance_status(order_id: str, manager: OrderManager = Depends(get_orders),
                   store: StateStore = Depends(get_store)):
    order = manager.advance_status(order_id)
    store.save_orders(manager.state.orders)
    return order


@router.post("/{order_id}/cancel")
def cancel(order_id: str, manager: OrderManager = Depends(get_orders), store: StateStore = Depends(get_store)):
    order = manager.cancel_order(order_id)
    store.save_orders(manager.state.orders)
    return order


@router.post("/{order_id}/payment")
def record_payment(order_id: str, body: PaymentRequest, manager: OrderManager = Depends(get_orders),
                   store: StateStore = Depends(get_store)):
    order = manager.record_payment(order_id, body.payment_status, body.cash, body.online)
    store.save_orders(manager.state.orders)
    return order


@router.delete("/{order_id}")
def delete_order(order_id: str, confirm: bool = False, manager: OrderManager = Depends(get_orders),
                 store: StateStore = Depends(get_store)):
    if not manager.delete_order(order_id, lambda order: confirm):
        raise ValidationError("Deleting an order needs explicit confirmation (confirm=true)")
    store.save_orders(manager.state.orders)
    return {"ok": True, "order_id": order_id}


@router.get("/{order_id}/whatsapp")
def whatsapp(order_id: str, manager: OrderManager = Depends(get_orders)):
    order = manager.get(order_id)
    return {"message": build_message(order), "link": whatsapp_link(order)}
