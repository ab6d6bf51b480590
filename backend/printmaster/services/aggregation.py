from dataclasses import dataclass, field
from datetime import datetime, time, timedelta, timezone, tzinfo
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from printmaster import config
from printmaster.models.order import Order, OrderStatus, PaymentMethod, PaymentStatus


class TimeWindow(str, Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


class StatusWindow(str, Enum):
    ALL = "all"
    PENDING = "pending"
    UNPAID = "unpaid"
    COMPLETED = "completed"


ONLINE_METHODS = (PaymentMethod.ONLINE, PaymentMethod.UPI)


@dataclass
class OrderSummary:
    revenue: float = 0.0
    profit: float = 0.0
    cash_collected: float = 0.0
    online_collected: float = 0.0
    orders: List[Order] = field(default_factory=list)

    @property
    def order_count(self) -> int:
        return len(self.orders)


def shop_tz() -> tzinfo:
    return ZoneInfo(config.SHOP_TIMEZONE)


def _local_now(now: Optional[datetime], tz: tzinfo) -> datetime:
    if now is None:
        return datetime.now(tz)
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


def _aware(ts: datetime) -> datetime:
    # naive timestamps are stored as UTC
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


def window_bounds(window: TimeWindow, now: Optional[datetime] = None,
                  tz: Optional[tzinfo] = None) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Return the [start, end) range of a time window; None means unbounded."""
    tz = tz or shop_tz()
    local = _local_now(now, tz)
    today_start = datetime.combine(local.date(), time.min, tzinfo=tz)

    if window == TimeWindow.TODAY:
        return today_start, None
    if window == TimeWindow.YESTERDAY:
        return datetime.combine(local.date() - timedelta(days=1), time.min, tzinfo=tz), today_start
    if window == TimeWindow.WEEK:
        return datetime.combine(local.date() - timedelta(days=6), time.min, tzinfo=tz), None
    if window == TimeWindow.MONTH:
        return datetime.combine(local.date().replace(day=1), time.min, tzinfo=tz), None
    return None, None


def in_time_window(order: Order, window: TimeWindow, now: Optional[datetime] = None,
                   tz: Optional[tzinfo] = None) -> bool:
    start, end = window_bounds(window, now, tz)
    created = _aware(order.created_at)
    if start is not None and created < start:
        return False
    if end is not None and created >= end:
        return False
    return True


def in_status_window(order: Order, status_window: Union[StatusWindow, str]) -> bool:
    """Known window names filter on status/payment; any other value is a line category."""
    try:
        status_window = StatusWindow(status_window)
    except ValueError:
        return order.has_category(str(status_window))

    if status_window == StatusWindow.PENDING:
        return order.is_pending
    if status_window == StatusWindow.UNPAID:
        return order.payment_status != PaymentStatus.PAID
    if status_window == StatusWindow.COMPLETED:
        return order.status == OrderStatus.DELIVERED
    return True


def matches_search(order: Order, term: Optional[str]) -> bool:
    if not term:
        return True
    lower = term.lower()
    return lower in order.customer_name.lower() or lower in order.id.lower() or term in order.customer_phone


def filter_orders(
    orders: Iterable[Order],
    time_window: TimeWindow = TimeWindow.ALL,
    status_window: Union[StatusWindow, str] = StatusWindow.ALL,
    search: Optional[str] = None,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> List[Order]:
    """Apply both windows (and an optional search term), newest first.

    Builds a new list; the input collection is never touched.
    """
    tz = tz or shop_tz()
    result = [
        o for o in orders
        if in_time_window(o, time_window, now, tz)
        and in_status_window(o, status_window)
        and matches_search(o, search)
    ]
    return sorted(result, key=lambda o: _aware(o.created_at), reverse=True)


def summarize(
    orders: Iterable[Order],
    time_window: TimeWindow = TimeWindow.ALL,
    status_window: Union[StatusWindow, str] = StatusWindow.ALL,
    search: Optional[str] = None,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> OrderSummary:
    selected = filter_orders(orders, time_window, status_window, search, now, tz)
    paid = [o for o in selected if o.payment_status == PaymentStatus.PAID]
    return OrderSummary(
        revenue=sum((o.total for o in selected), 0.0),
        profit=sum((o.profit for o in selected), 0.0),
        cash_collected=sum((o.total for o in paid if o.payment_method == PaymentMethod.CASH), 0.0),
        online_collected=sum((o.total for o in paid if o.payment_method in ONLINE_METHODS), 0.0),
        orders=selected,
    )


def pending_queue(orders: Iterable[Order]) -> Dict[str, float]:
    pending = [o for o in orders if o.is_pending]
    return {
        "count": len(pending),
        "revenue": sum((o.total for o in pending), 0.0),
        "profit": sum((o.profit for o in pending), 0.0),
    }


def tab_counts(orders: Iterable[Order], categories: Iterable[str] = ()) -> Dict[str, int]:
    orders = list(orders)
    counts = {w.value: sum(1 for o in orders if in_status_window(o, w)) for w in StatusWindow}
    for category in categories:
        counts.setdefault(category, sum(1 for o in orders if o.has_category(category)))
    return counts
