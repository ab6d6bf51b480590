from urllib.parse import quote

from printmaster import config
from printmaster.models.order import Order

READY_TEMPLATE = """Namaste from {{store}},
Your order #{{id}} is ready. ✅

Please confirm whether you will be coming tomorrow or not.

💰 Total Bill: ₹{{total}}

Thank you,
{{store}}"""


def format_amount(value: float) -> str:
    return f"{value:g}" if value == int(value) else f"{value:.2f}"


def build_message(order: Order, template: str = READY_TEMPLATE, store_name: str = None) -> str:
    return (
        template
        .replace("{{store}}", store_name or config.STORE_NAME)
        .replace("{{total}}", format_amount(order.total))
        .replace("{{id}}", order.short_id)
    )


def whatsapp_link(order: Order, template: str = READY_TEMPLATE, country_code: str = None) -> str:
    """Deep link that opens a chat with the customer, message pre-filled. Nothing is sent."""
    phone = "".join(ch for ch in order.customer_phone if ch.isdigit())
    code = config.WHATSAPP_COUNTRY_CODE if country_code is None else country_code
    return f"https://wa.me/{code}{phone}?text={quote(build_message(order, template), safe='')}"
