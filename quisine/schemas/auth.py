from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class SignupPayload(BaseModel):
    username: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone: Optional[str] = None
    shop_name: Optional[str] = None


class LoginPayload(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    tenant_id: str
    email: str
    token: str
    token_type: str = "bearer"
