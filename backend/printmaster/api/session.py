from fastapi import APIRouter, Depends
from pydantic import BaseModel

from printmaster.db.store import StateStore, get_store
from printmaster.services import session as sessions
from printmaster.state import AppState, get_state

router = APIRouter()


class CustomerLogin(BaseModel):
    name: str
    phone: str


class StaffLogin(BaseModel):
    email: str
    password: str


@router.get("/")
def current_user(state: AppState = Depends(get_state)):
    return {"user": state.current_user}


@router.post("/customer")
def login_customer(body: CustomerLogin, state: AppState = Depends(get_state),
                   store: StateStore = Depends(get_store)):
    user = sessions.customer_login(state, body.name, body.phone)
    store.save_session(user)
    return {"user": user}


@router.post("/staff")
def login_staff(body: StaffLogin, state: AppState = Depends(get_state),
                store: StateStore = Depends(get_store)):
    user = sessions.staff_login(state, body.email, body.password)
    store.save_session(user)
    return {"user": user}


@router.delete("/")
def logout(state: AppState = Depends(get_state), store: StateStore = Depends(get_store)):
    sessions.logout(state)
    store.save_session(None)
    return {"ok": True}
