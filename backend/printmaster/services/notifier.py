import logging
import time
from typing import Any, Dict, Optional

import requests

from printmaster import config
from printmaster.models.order import Order

logger = logging.getLogger(__name__)


def order_payload(order: Order) -> Dict[str, Any]:
    return {
        "order_id": order.id,
        "customer_name": order.customer_name,
        "customer_phone": order.customer_phone,
        "items": len(order.items),
        "total": order.total,
        "urgent": order.urgent,
        "status": order.status.value,
        "created_at": order.created_at.isoformat(),
    }


class OrderNotifier:
    """Posts new orders to an optional webhook. Best-effort: never raises."""

    def __init__(self, webhook_url: Optional[str] = None, max_retries: int = 3, session=None):
        self.webhook = webhook_url if webhook_url is not None else config.ORDER_WEBHOOK_URL
        self.max_retries = max_retries
        self.http = session or requests
        logger.debug("OrderNotifier initialized with webhook=%s max_retries=%s", self.webhook, self.max_retries)

    @property
    def enabled(self) -> bool:
        return bool(self.webhook)

    def notify(self, order: Order) -> bool:
        if not self.enabled:
            return False

        # idempotency key so the receiver can drop duplicates from retries
        headers = {"Content-Type": "application/json", "Idempotency-Key": f"order-{order.id}"}
        payload = order_payload(order)

        for attempt in range(1, self.max_retries + 1):
            try:
                resp = self.http.post(self.webhook, json=payload, timeout=5, headers=headers)
                resp.raise_for_status()
                logger.info("Notified webhook order_id=%s status=%s", order.id, resp.status_code)
                return True
            except requests.RequestException as e:
                logger.warning("Attempt %s: failed to notify webhook for order_id=%s: %s", attempt, order.id, e)
            if attempt < self.max_retries:
                time.sleep(0.5 * attempt)
        logger.error("All %s attempts to notify webhook failed for order_id=%s", self.max_retries, order.id)
        return False
