from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable

from printmaster import config


@dataclass(frozen=True)
class OrderTotals:
    subtotal: float = 0.0
    urgent_fee: float = 0.0
    total: float = 0.0
    cost_total: float = 0.0
    profit: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


class PriceEngine:
    """Rule-based pricing for cart and order lines.

    Lines are anything exposing ``unit_price``, ``unit_cost`` and ``quantity``.
    Nothing here mutates its inputs.
    """

    URGENT_FEE = config.URGENT_FEE

    PAGE_RATE = {
        "BW": config.BW_RATE,
        "Color": config.COLOR_RATE,
    }

    BINDING_FEE = {
        "None": 0.0,
        "Spiral": 40.0,
        "Wire": 60.0,
        "Hard": 200.0,
    }

    @staticmethod
    def line_total(line: Any) -> float:
        return line.unit_price * line.quantity

    @staticmethod
    def line_cost(line: Any) -> float:
        return line.unit_cost * line.quantity

    def urgent_fee(self, urgent: bool) -> float:
        return self.URGENT_FEE if urgent else 0.0

    def totals(self, lines: Iterable[Any], urgent: bool = False) -> OrderTotals:
        lines = list(lines)
        subtotal = sum((self.line_total(line) for line in lines), 0.0)
        cost_total = sum((self.line_cost(line) for line in lines), 0.0)
        urgent_fee = self.urgent_fee(urgent)
        total = subtotal + urgent_fee
        return OrderTotals(
            subtotal=subtotal,
            urgent_fee=urgent_fee,
            total=total,
            cost_total=cost_total,
            profit=total - cost_total,
        )

    def custom_print_price(self, page_count: int, print_type: str, binding: str) -> float:
        """pages x per-page rate + flat binding fee. Sides do not change the price."""
        rate = self.PAGE_RATE[print_type]
        return page_count * rate + self.BINDING_FEE[binding]


price_engine = PriceEngine()
