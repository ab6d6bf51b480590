import logging

from printmaster import config
from printmaster.errors import ValidationError
from printmaster.models.session import CurrentUser, Role
from printmaster.state import AppState

logger = logging.getLogger(__name__)


def customer_login(state: AppState, name: str, phone: str) -> CurrentUser:
    name = (name or "").strip()
    phone = "".join(ch for ch in (phone or "") if ch.isdigit())
    if not name or not phone:
        raise ValidationError("Please enter both name and phone number.")
    if len(phone) < 10:
        raise ValidationError("Please enter a valid phone number.")
    state.current_user = CurrentUser(name=name, phone=phone, role=Role.CUSTOMER)
    logger.info("Customer session started name=%s", name)
    return state.current_user


def staff_login(state: AppState, email: str, password: str) -> CurrentUser:
    """Static credential check; this is a convenience gate, not security."""
    if not email or not password:
        raise ValidationError("Please enter credentials.")
    if email != config.ADMIN_EMAIL or password != config.ADMIN_PASSWORD:
        raise ValidationError("Invalid email or password.")
    state.current_user = CurrentUser(name="Administrator", email=email, role=Role.ADMIN)
    logger.info("Staff session started email=%s", email)
    return state.current_user


def logout(state: AppState) -> None:
    state.current_user = None
