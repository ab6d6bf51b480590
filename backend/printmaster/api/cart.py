from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from printmaster.db.store import StateStore, get_store
from printmaster.services.cart import Cart
from printmaster.state import AppState, get_state

router = APIRouter()


class AddProduct(BaseModel):
    product_id: str


class QuantityChange(BaseModel):
    delta: int


def cart_view(cart: Cart, urgent: bool = False) -> dict:
    totals = cart.totals(urgent)
    return {
        "lines": cart.lines,
        "item_count": cart.item_count,
        "subtotal": totals.subtotal,
        "urgent_fee": totals.urgent_fee,
        "total": totals.total,
    }


@router.get("/")
def view_cart(urgent: bool = False, state: AppState = Depends(get_state)):
    return cart_view(state.cart, urgent)


@router.post("/items")
def add_product(body: AddProduct, state: AppState = Depends(get_state), store: StateStore = Depends(get_store)):
    product = state.products.get(body.product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="product not found")
    state.cart.add_product(product)
    store.save_cart(state.cart)
    return cart_view(state.cart)


@router.patch("/items/{key}")
def update_quantity(key: str, body: QuantityChange, state: AppState = Depends(get_state),
                    store: StateStore = Depends(get_store)):
    """Negative deltas that would drop below one remove the line."""
    line = state.cart.get(key)
    if line is not None and line.quantity + body.delta < 1:
        state.cart.remove(key)
    else:
        state.cart.update_quantity(key, body.delta)
    store.save_cart(state.cart)
    return cart_view(state.cart)


@router.post("/items/{key}/decrement")
def decrement(key: str, state: AppState = Depends(get_state), store: StateStore = Depends(get_store)):
    state.cart.decrement(key)
    store.save_cart(state.cart)
    return cart_view(state.cart)


@router.delete("/items/{key}")
def remove(key: str, state: AppState = Depends(get_state), store: StateStore = Depends(get_store)):
    state.cart.remove(key)
    store.save_cart(state.cart)
    return cart_view(state.cart)


@router.delete("/")
def clear(state: AppState = Depends(get_state), store: StateStore = Depends(get_store)):
    state.cart.clear()
    store.save_cart(state.cart)
    return cart_view(state.cart)
