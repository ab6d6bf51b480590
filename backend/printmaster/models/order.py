from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from printmaster.models.line import Line
from printmaster.services.pricing import OrderTotals, price_engine


class OrderStatus(str, Enum):
    RECEIVED = "Received"
    PRINTING = "Printing"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    PARTIAL = "Partial"
    PAID = "Paid"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    ONLINE = "Online"
    UPI = "UPI"
    SPLIT = "Split"


class PaymentSplit(BaseModel):
    cash: float = Field(0, ge=0)
    online: float = Field(0, ge=0)


class Customer(BaseModel):
    name: str
    phone: str = ""


class Order(BaseModel):
    """A placed order.

    The money fields (subtotal, urgent_fee, total, cost_total, profit) are not
    stored: they are re-derived from ``items`` and ``urgent`` whenever read, so
    an edit to either can never leave a stale total behind.
    """

    id: str
    customer_name: str
    customer_phone: str = ""
    items: List[Line]
    urgent: bool = False
    status: OrderStatus = OrderStatus.RECEIVED
    created_at: datetime
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.UPI
    payment_split: Optional[PaymentSplit] = None

    @property
    def totals(self) -> OrderTotals:
        return price_engine.totals(self.items, self.urgent)

    @computed_field
    @property
    def subtotal(self) -> float:
        return self.totals.subtotal

    @computed_field
    @property
    def urgent_fee(self) -> float:
        return self.totals.urgent_fee

    @computed_field
    @property
    def total(self) -> float:
        return self.totals.total

    @computed_field
    @property
    def cost_total(self) -> float:
        return self.totals.cost_total

    @computed_field
    @property
    def profit(self) -> float:
        return self.totals.profit

    @property
    def short_id(self) -> str:
        return self.id[-5:]

    @property
    def is_pending(self) -> bool:
        return not self.status.is_terminal

    def has_category(self, category: str) -> bool:
        return any(line.category == category for line in self.items)


class OrderUpdate(BaseModel):
    """Fields a full staff edit may change. Money totals are not editable."""

    model_config = ConfigDict(extra="forbid")

    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    items: Optional[List[Line]] = None
    urgent: Optional[bool] = None
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    payment_method: Optional[PaymentMethod] = None
    payment_split: Optional[PaymentSplit] = None
