import logging

from fastapi import APIRouter, Depends

from printmaster.services.aggregation import TimeWindow, pending_queue, summarize, tab_counts
from printmaster.services.inventory import low_stock_items, total_expenses
from printmaster.services.report import ReportGenerator, build_summary
from printmaster.state import AppState, get_state

logger = logging.getLogger(__name__)
router = APIRouter()


def get_report_generator() -> ReportGenerator:
    return ReportGenerator()


@router.get("/summary")
def summary(window: TimeWindow = TimeWindow.TODAY, state: AppState = Depends(get_state)):
    orders = list(state.orders.values())
    period = summarize(orders, window)
    return {
        "window": window.value,
        "revenue": period.revenue,
        "profit": period.profit,
        "cash_collected": period.cash_collected,
        "online_collected": period.online_collected,
        "order_count": period.order_count,
        "pending": pending_queue(orders),
        "low_stock_count": len(low_stock_items(state.stock)),
        "total_expenses": total_expenses(state.expenses),
        "orders": period.orders,
    }


@router.get("/counts")
def counts(state: AppState = Depends(get_state)):
    return tab_counts(state.orders.values(), state.categories)


@router.post("/report")
def report(window: TimeWindow = TimeWindow.ALL, state: AppState = Depends(get_state),
           generator: ReportGenerator = Depends(get_report_generator)):
    period = summarize(state.orders.values(), window)
    numbers = build_summary(period.orders, state.stock.values(), state.expenses)
    logger.info("Generating report window=%s revenue=%s", window.value, numbers.total_revenue)
    return {"summary": numbers.as_dict(), "report": generator.generate(numbers)}
