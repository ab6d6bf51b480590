from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from printmaster.api.deps import get_inventory
from printmaster.models.catalog import CUSTOM_PRINT_CATEGORY
from printmaster.services.inventory import Inventory
from printmaster.state import AppState, get_state

router = APIRouter()


class CategoryCreate(BaseModel):
    name: str


@router.get("/products")
def list_products(category: Optional[str] = None, search: Optional[str] = None,
                  state: AppState = Depends(get_state)):
    """Customer-facing grid; the Custom Print base item is never listed."""
    term = (search or "").lower()
    return [
        p for p in state.products.values()
        if p.category != CUSTOM_PRINT_CATEGORY
        and (not category or category == "All" or p.category == category)
        and term in p.name.lower()
    ]


@router.get("/products/{product_id}")
def get_product(product_id: str, state: AppState = Depends(get_state)):
    product = state.products.get(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="product not found")
    return product


@router.post("/products/{product_id}/toggle-stock")
def toggle_product_stock(product_id: str, inventory: Inventory = Depends(get_inventory)):
    return inventory.toggle_product_stock(product_id)


@router.get("/categories")
def list_categories(state: AppState = Depends(get_state)):
    return state.categories.names()


@router.post("/categories", status_code=201)
def add_category(body: CategoryCreate, state: AppState = Depends(get_state)):
    added = state.categories.add(body.name)
    return {"added": added, "categories": state.categories.names()}
