from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refreshToken: str


class HRUserOut(BaseModel):
    id: int
    email: str
    name: str
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True
