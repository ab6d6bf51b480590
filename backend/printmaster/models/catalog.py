from datetime import date
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from pydantic import BaseModel, Field

from printmaster.errors import ValidationError

CUSTOM_PRINT_CATEGORY = "Custom Print"

# names that order list tabs and filters already use
RESERVED_CATEGORY_NAMES = frozenset({"all", "pending", "unpaid", "completed"})


class Product(BaseModel):
    id: str
    name: str
    category: str
    description: str = ""
    price: float = Field(..., ge=0, description="Selling price per unit")
    cost: float = Field(0, ge=0, description="Cost price per unit, never shown to customers")
    quantity: int = Field(0, ge=0, description="Units on hand")
    # toggled by staff independently of quantity
    in_stock: bool = True
    image: Optional[str] = None


class StockCategory(str, Enum):
    PAPER = "Paper"
    INK = "Ink"
    BINDING = "Binding"
    COVER = "Cover"
    LAMINATION = "Lamination"
    STATIONERY = "Stationery"
    OTHER = "Other"


class StockItem(BaseModel):
    id: str
    name: str
    unit: str = "Unit"
    quantity: int = Field(0, ge=0)
    threshold: int = Field(5, ge=0, description="Low stock alert level")
    category: StockCategory = StockCategory.OTHER

    @property
    def is_low(self) -> bool:
        return self.quantity <= self.threshold


class ExpenseCategory(str, Enum):
    RENT = "Rent"
    ELECTRICITY = "Electricity"
    RAW_MATERIAL = "Raw Material"
    REPAIRS = "Repairs"
    OTHER = "Other"


class Expense(BaseModel):
    id: str
    title: str
    amount: float = Field(..., ge=0)
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: date


class CategoryRegistry:
    """Insertion-ordered set of product/order category names that staff can extend."""

    def __init__(self, names: Iterable[str] = ()):
        self._names: List[str] = []
        for name in names:
            self.add(name)

    def add(self, name: str) -> bool:
        name = (name or "").strip()
        if name.lower() in RESERVED_CATEGORY_NAMES:
            raise ValidationError(f"\"{name}\" is reserved and cannot be used as a category")
        if not name or name in self._names:
            return False
        self._names.append(name)
        return True

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def names(self) -> List[str]:
        return list(self._names)
