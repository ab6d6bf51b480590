from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Role(str, Enum):
    ADMIN = "ADMIN"
    STAFF = "STAFF"
    CUSTOMER = "CUSTOMER"


class CurrentUser(BaseModel):
    name: str
    role: Role
    phone: Optional[str] = None
    email: Optional[str] = None
