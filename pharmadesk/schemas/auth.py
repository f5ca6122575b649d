"""
Auth Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime

class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=8)
    full_name: Optional[str] = None
    email: Optional[str] = None
    role: Literal["admin", "pharmacist", "cashier"] = "cashier"

class LoginRequest(BaseModel):
    username: str
    password: str

class UserResponse(BaseModel):
    id: int
    username: str
    full_name: Optional[str]
    email: Optional[str]
    role: str
    is_active: bool
    date_joined: Optional[datetime]

    class Config:
        from_attributes = True

class Token(BaseModel):
    access_token: str
    token_type: str
    user: UserResponse
