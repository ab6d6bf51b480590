from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from printmaster.api.deps import get_inventory
from printmaster.errors import ValidationError
from printmaster.models.catalog import ExpenseCategory, StockCategory
from printmaster.services.inventory import Inventory, total_expenses
from printmaster.state import AppState, get_state

router = APIRouter()


class StockCreate(BaseModel):
    name: str
    unit: str = "Unit"
    quantity: int = Field(0, ge=0)
    threshold: int = Field(5, ge=0)
    category: StockCategory = StockCategory.PAPER


class StockPatch(BaseModel):
    name: Optional[str] = None
    unit: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)
    threshold: Optional[int] = Field(None, ge=0)
    category: Optional[StockCategory] = None


class StockAdjust(BaseModel):
    delta: int


class ExpenseCreate(BaseModel):
    title: str
    amount: float = Field(..., ge=0)
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: date


@router.get("/stock")
def list_stock(search: Optional[str] = None, category: Optional[StockCategory] = None,
               state: AppState = Depends(get_state)):
    term = (search or "").lower()
    return [
        s for s in state.stock.values()
        if term in s.name.lower() and (category is None or s.category == category)
    ]


@router.get("/stock/low")
def low_stock(inventory: Inventory = Depends(get_inventory)):
    return inventory.low_stock()


@router.post("/stock", status_code=201)
def add_stock(body: StockCreate, inventory: Inventory = Depends(get_inventory)):
    return inventory.add_stock(body.model_dump())


@router.patch("/stock/{item_id}")
def update_stock(item_id: str, body: StockPatch, inventory: Inventory = Depends(get_inventory)):
    return inventory.update_stock(item_id, body.model_dump(exclude_unset=True, exclude_none=True))


@router.post("/stock/{item_id}/adjust")
def adjust_stock(item_id: str, body: StockAdjust, inventory: Inventory = Depends(get_inventory)):
    return inventory.adjust_stock(item_id, body.delta)


@router.delete("/stock/{item_id}")
def delete_stock(item_id: str, confirm: bool = False, inventory: Inventory = Depends(get_inventory)):
    if not confirm:
        raise ValidationError("Deleting a stock item needs explicit confirmation (confirm=true)")
    inventory.delete_stock(item_id)
    return {"ok": True, "low_stock": inventory.low_stock()}


@router.get("/expenses")
def list_expenses(state: AppState = Depends(get_state)):
    return {"expenses": state.expenses, "total": total_expenses(state.expenses)}


@router.post("/expenses", status_code=201)
def add_expense(body: ExpenseCreate, inventory: Inventory = Depends(get_inventory)):
    return inventory.add_expense(body.model_dump())
