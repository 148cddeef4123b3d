from pydantic import EmailStr, Field
from enum import Enum
from typing import Optional
from servicehub.schemas.base_schema import CamelModel, CamelResponse, UtcDateTime


class UserType(str, Enum):
    worker = "worker"
    customer = "customer"


class UserBase(CamelModel):
    username: str = Field(..., min_length=1, max_length=64)
    user_type: UserType
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    profile_picture: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)


class UserOut(CamelResponse):
    id: int
    username: str
    user_type: UserType
    name: str
    email: str
    phone: str
    address: str
    profile_picture: Optional[str] = None
    created_at: Optional[UtcDateTime] = None


class UserLogin(CamelModel):
    username: str
    password: str


class LogoutResponse(CamelModel):
    message: str
