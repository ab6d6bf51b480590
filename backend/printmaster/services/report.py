import logging
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Iterable, List, Optional

from openai import OpenAI

from printmaster import config
from printmaster.errors import ExternalUnavailable
from printmaster.models.catalog import Expense, StockItem
from printmaster.models.order import Order
from printmaster.services.inventory import total_expenses

logger = logging.getLogger(__name__)

UNCONFIGURED_MESSAGE = "API Key not configured. Unable to generate AI report."
FAILED_MESSAGE = "Failed to generate report due to an API error."

PROMPT_TEMPLATE = """
Act as a business analyst for a print shop in India. Analyze the following data snapshot and provide a concise, actionable summary (max 150 words).

Data:
- Total Revenue: ₹{total_revenue:g}
- Gross Profit: ₹{gross_profit:g}
- Total Expenses: ₹{total_expenses:g}
- Net Profit: ₹{net_profit:g}
- Critical Low Stock: {low_stock}

Provide:
1. Financial health check.
2. One specific recommendation for improvement.
3. A motivational quote for the staff.
"""


@dataclass
class ReportSummary:
    total_revenue: float
    gross_profit: float
    total_expenses: float
    net_profit: float
    low_stock: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_summary(orders: Iterable[Order], stock: Iterable[StockItem], expenses: Iterable[Expense]) -> ReportSummary:
    orders = list(orders)
    revenue = sum((o.total for o in orders), 0.0)
    profit = sum((o.profit for o in orders), 0.0)
    spent = total_expenses(list(expenses))
    return ReportSummary(
        total_revenue=revenue,
        gross_profit=profit,
        total_expenses=spent,
        net_profit=profit - spent,
        low_stock=[s.name for s in stock if s.is_low],
    )


def build_prompt(summary: ReportSummary) -> str:
    return PROMPT_TEMPLATE.format(
        total_revenue=summary.total_revenue,
        gross_profit=summary.gross_profit,
        total_expenses=summary.total_expenses,
        net_profit=summary.net_profit,
        low_stock=", ".join(summary.low_stock) or "None",
    )


class ReportGenerator:
    """Best-effort business report from summary numbers.

    The ``client`` is anything shaped like ``openai.OpenAI``; in tests provide a
    stub whose ``chat.completions.create`` returns a canned response. Without a
    client or API key, and on any API error, a placeholder string is returned.
    """

    def __init__(self, client: Optional[object] = None, model: Optional[str] = None):
        self.client = client
        self.model = model or config.OPENAI_MODEL

    def _get_client(self):
        if self.client is not None:
            return self.client
        if config.OPENAI_API_KEY:
            self.client = OpenAI(api_key=config.OPENAI_API_KEY)
            return self.client
        raise ExternalUnavailable("report generator is not configured")

    def _call(self, prompt: str) -> str:
        client = self._get_client()
        try:
            logger.debug("Calling report model=%s", self.model)
            resp = client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.7,
            )
            content = resp.choices[0].message.content
        except Exception as e:
            raise ExternalUnavailable(str(e)) from e
        if not content:
            raise ExternalUnavailable("empty response")
        return content.strip()

    def generate(self, summary: ReportSummary) -> str:
        try:
            return self._call(build_prompt(summary))
        except ExternalUnavailable as e:
            if self.client is None:
                logger.info("Report generation skipped: %s", e)
                return UNCONFIGURED_MESSAGE
            logger.exception("Report generation failed: %s", e)
            return FAILED_MESSAGE
