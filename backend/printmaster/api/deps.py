from fastapi import Depends

from printmaster.services.inventory import Inventory
from printmaster.services.orders import OrderManager
from printmaster.state import AppState, get_state


def get_orders(state: AppState = Depends(get_state)) -> OrderManager:
    return OrderManager(state)


def get_inventory(state: AppState = Depends(get_state)) -> Inventory:
    return Inventory(state)
